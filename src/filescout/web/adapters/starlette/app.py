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
"""FileScout web application factory and CORS registrar built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import BaseRoute, Route

from filescout.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from filescout.web.adapters.starlette.filters import CorsFilter, RequestLoggingFilter
from filescout.web.cors import CorsPolicy, CorsProcessor

logger = structlog.get_logger("filescout.web")


def register(app: Starlette, policy: CorsPolicy, *more_policies: CorsPolicy) -> CorsFilter:
    """Attach CORS policies to *app*'s request pipeline.

    Every policy is validated first, so a bad pattern or contradictory
    setting aborts startup before anything is attached.  When several
    policies are given, the first one whose path pattern matches a request
    wins.

    Raises:
        InvalidCorsConfigurationException: a policy has invalid settings.
        InvalidPathPatternException: a policy's path pattern does not parse.
        RuntimeError: *app* has already started serving.
    """
    policies = (policy, *more_policies)
    processors = [CorsProcessor(p) for p in policies]

    for p in policies:
        if p.allow_credentials and p.allows_any_header:
            logger.warning(
                "cors_wildcard_headers_with_credentials",
                path_pattern=p.path_pattern,
                message="allowed_headers '*' is answered with the requested header list",
            )
        logger.info(
            "cors_policy_registered",
            path_pattern=p.path_pattern,
            allowed_origins=list(p.allowed_origins),
            allowed_methods=list(p.allowed_methods),
            allowed_headers=list(p.allowed_headers),
            allow_credentials=p.allow_credentials,
        )

    cors_filter = CorsFilter(processors)
    app.add_middleware(WebFilterChainMiddleware, filters=[cors_filter])
    return cors_filter


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "UP"})


def create_app(
    cors: Sequence[CorsPolicy] = (),
    debug: bool = False,
    extra_routes: list[BaseRoute] | None = None,
    request_logging: bool = True,
    lifespan: Any | None = None,
) -> Starlette:
    """Create a Starlette application with the FileScout web pipeline.

    Includes:
    - ``GET /health`` liveness route
    - request logging (outermost, so rejected preflights are logged too)
    - CORS policies (when *cors* is non-empty)
    """
    routes: list[BaseRoute] = [Route("/health", health, methods=["GET"])]
    if extra_routes:
        routes.extend(extra_routes)

    app = Starlette(debug=debug, routes=routes, lifespan=lifespan)

    # add_middleware wraps outermost, so CORS goes first and logging last.
    if cors:
        register(app, *cors)
    if request_logging:
        app.add_middleware(WebFilterChainMiddleware, filters=[RequestLoggingFilter()])

    return app
