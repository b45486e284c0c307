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
"""FileScout exception hierarchy.

Every error raised by the web layer is a :class:`FileScoutException`.  The
only failures this package knows about happen while the application boots:
a policy or path pattern that cannot be honoured is reported eagerly so the
process never starts serving with a half-valid CORS setup.
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class FileScoutException(Exception):
    """Base exception for all FileScout errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_001").
        context: Arbitrary key-value pairs describing the offending input.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(FileScoutException):
    """Configuration could not be loaded, bound, or validated at startup."""


class InvalidCorsConfigurationException(ConfigurationException):
    """A CORS policy contains contradictory or malformed settings."""


class InvalidPathPatternException(ConfigurationException):
    """A request path pattern has invalid syntax."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(
            f"Invalid path pattern '{pattern}': {reason}",
            code="PATH_PATTERN_INVALID",
            context={"pattern": pattern, "reason": reason},
        )
        self.pattern = pattern
        self.reason = reason
