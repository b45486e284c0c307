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
"""LoggingPort: what FileScoutApplication needs from a logging backend."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from filescout.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Logging backend driven by the application bootstrap.

    ``configure`` is called once with the loaded configuration, before any
    CORS policy is bound, so registration and startup events already use
    the configured levels and format.  ``get_logger`` returns a logger that
    accepts structured keyword arguments (``logger.info("event", key=value)``).
    """

    def configure(self, config: Config) -> None: ...

    def get_logger(self, name: str) -> Any: ...

    def set_level(self, name: str, level: str) -> None:
        """Override the level of the stdlib logger *name* (e.g. ``filescout.web.cors``)."""
        ...
