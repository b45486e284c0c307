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
"""OncePerRequestFilter — base class for WebFilter with path-pattern matching.

Framework-agnostic: reads ``request.url.path`` via attribute access so no
Starlette import is needed.
"""

from __future__ import annotations

import abc
import functools
from typing import Any

from filescout.web.path_pattern import PathPattern
from filescout.web.ports.filter import CallNext


class OncePerRequestFilter(abc.ABC):
    """Abstract base class for :class:`WebFilter` implementations.

    Attributes:
        url_patterns: Ant-style patterns this filter applies to.  Empty
            (the default) means every path.
        exclude_patterns: Patterns skipped even when ``url_patterns`` match.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    def should_not_filter(self, request: Any) -> bool:
        path: str = request.url.path

        if self.url_patterns and not any(_compiled(p).matches(path) for p in self.url_patterns):
            return True

        return bool(self.exclude_patterns and any(_compiled(p).matches(path) for p in self.exclude_patterns))

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Execute the filter logic.  Must call ``await call_next(request)`` to proceed."""
        ...


@functools.lru_cache(maxsize=256)
def _compiled(pattern: str) -> PathPattern:
    return PathPattern(pattern)
