# Copyright 2026 The FileScout Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""CORS filter — applies registered CORS policies to every request."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from filescout.web.cors import (
    ACCESS_CONTROL_ALLOW_ORIGIN,
    ACCESS_CONTROL_REQUEST_HEADERS,
    ACCESS_CONTROL_REQUEST_METHOD,
    ORIGIN,
    VARY,
    CorsProcessor,
    is_preflight,
    is_same_origin,
    merge_vary,
    parse_header_list,
    select_processor,
)
from filescout.web.filters import OncePerRequestFilter
from filescout.web.ordering import HIGHEST_PRECEDENCE, order
from filescout.web.ports.filter import CallNext

logger = structlog.get_logger("filescout.web.cors")


@order(HIGHEST_PRECEDENCE + 100)
class CorsFilter(OncePerRequestFilter):
    """Adds ``Access-Control-*`` headers for allowed cross-origin requests.

    Preflight requests are answered here and never reach a route: ``200``
    with the policy's headers when origin, method and headers are allowed,
    ``403`` without any CORS headers otherwise.  Other requests always reach
    the route; the allow headers are only added when the origin matches.
    Requests without an ``Origin`` header, or whose origin is the server
    itself, pass through untouched.
    """

    def __init__(self, processors: Sequence[CorsProcessor]) -> None:
        self._processors = tuple(processors)

    @property
    def processors(self) -> tuple[CorsProcessor, ...]:
        return self._processors

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        origin = request.headers.get(ORIGIN)
        processor = select_processor(self._processors, request.url.path)
        if (
            processor is None
            or origin is None
            or is_same_origin(origin, request.url.scheme, request.url.hostname, request.url.port)
        ):
            return cast(Response, await call_next(request))

        if is_preflight(request.method, request.headers):
            return self._preflight(request, processor, origin)

        response = cast(Response, await call_next(request))
        response.headers[VARY] = merge_vary(response.headers.get(VARY))

        # A route that set its own CORS headers keeps them.
        if ACCESS_CONTROL_ALLOW_ORIGIN in response.headers:
            return response

        cors_headers = processor.actual_headers(origin)
        if cors_headers is not None:
            response.headers.update(cors_headers)
        return response

    def _preflight(self, request: Request, processor: CorsProcessor, origin: str) -> Response:
        request_method = request.headers[ACCESS_CONTROL_REQUEST_METHOD]
        request_headers = parse_header_list(request.headers.get(ACCESS_CONTROL_REQUEST_HEADERS))

        cors_headers = processor.preflight_headers(origin, request_method, request_headers)
        if cors_headers is None:
            logger.debug(
                "cors_request_rejected",
                path=request.url.path,
                origin=origin,
                request_method=request_method,
                request_headers=request_headers,
                path_pattern=processor.policy.path_pattern,
            )
            response: Response = PlainTextResponse("Invalid CORS request", status_code=403)
        else:
            response = Response(status_code=200, headers=cors_headers)

        response.headers[VARY] = merge_vary(None)
        return response
