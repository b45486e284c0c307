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
"""Request logging filter — logs method, path, status, origin, and duration."""

from __future__ import annotations

import time
from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from filescout.web.cors import ORIGIN
from filescout.web.filters import OncePerRequestFilter
from filescout.web.ordering import HIGHEST_PRECEDENCE, order
from filescout.web.ports.filter import CallNext

logger = structlog.get_logger("filescout.web")


@order(HIGHEST_PRECEDENCE + 50)
class RequestLoggingFilter(OncePerRequestFilter):
    """Logs one ``http_request`` event per request, or ``http_request_failed`` on error."""

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        start = time.perf_counter()
        origin = request.headers.get(ORIGIN)

        try:
            response = cast(Response, await call_next(request))
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                "http_request_failed",
                method=request.method,
                path=request.url.path,
                origin=origin,
                duration_ms=round(duration_ms, 2),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            origin=origin,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return response
