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
"""FileScout Web — CORS policies, path patterns, and the WebFilter chain.

Framework-agnostic types are exported directly; the default adapter
(Starlette) is re-exported for convenience.
"""

from filescout.web.adapters.starlette import (
    CorsFilter,
    RequestLoggingFilter,
    WebFilterChainMiddleware,
    create_app,
    register,
)
from filescout.web.cors import CorsPolicy, CorsProcessor
from filescout.web.filters import OncePerRequestFilter
from filescout.web.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, order
from filescout.web.path_pattern import PathPattern
from filescout.web.ports.filter import WebFilter

__all__ = [
    # Framework-agnostic
    "CorsPolicy",
    "CorsProcessor",
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "OncePerRequestFilter",
    "PathPattern",
    "WebFilter",
    "order",
    # Default adapter (Starlette)
    "CorsFilter",
    "RequestLoggingFilter",
    "WebFilterChainMiddleware",
    "create_app",
    "register",
]
