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
"""CORS policies and the per-request CORS decision logic.

:class:`CorsPolicy` is the immutable configuration value for one path
pattern.  :class:`CorsProcessor` compiles a validated policy and answers, for
the headers of a single request, which ``Access-Control-*`` response headers
apply.  Nothing here imports a web framework; the Starlette filter in
``filescout.web.adapters.starlette.filters`` is the only caller that touches
real requests.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from filescout.kernel.exceptions import InvalidCorsConfigurationException
from filescout.web.path_pattern import PathPattern

ALL = "*"

KNOWN_METHODS: frozenset[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"}
)

DEFAULT_MAX_AGE = 1800  # seconds

# Request headers
ORIGIN = "Origin"
ACCESS_CONTROL_REQUEST_METHOD = "Access-Control-Request-Method"
ACCESS_CONTROL_REQUEST_HEADERS = "Access-Control-Request-Headers"

# Response headers
ACCESS_CONTROL_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ACCESS_CONTROL_ALLOW_METHODS = "Access-Control-Allow-Methods"
ACCESS_CONTROL_ALLOW_HEADERS = "Access-Control-Allow-Headers"
ACCESS_CONTROL_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ACCESS_CONTROL_EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ACCESS_CONTROL_MAX_AGE = "Access-Control-Max-Age"
VARY = "Vary"

VARY_HEADERS: tuple[str, ...] = (ORIGIN, ACCESS_CONTROL_REQUEST_METHOD, ACCESS_CONTROL_REQUEST_HEADERS)

_TOKEN_RE = re.compile(r"[!#$%&'*+.^_`|~0-9A-Za-z-]+\Z")
_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class CorsPolicy:
    """Cross-origin rules for every request path matching ``path_pattern``.

    Sequences are stored as tuples.  Origins lose a trailing ``/`` and
    methods are upper-cased on construction; everything else is checked by
    :meth:`validate`, which :func:`register` calls before the policy is used.
    """

    path_pattern: str = "/**"
    allowed_origins: tuple[str, ...] = ()
    allowed_methods: tuple[str, ...] = ("GET", "HEAD", "POST")
    allowed_headers: tuple[str, ...] = (ALL,)
    allow_credentials: bool = False
    exposed_headers: tuple[str, ...] = ()
    max_age: int = DEFAULT_MAX_AGE

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_origins", tuple(o.strip().rstrip("/") for o in self.allowed_origins))
        object.__setattr__(self, "allowed_methods", tuple(m.strip().upper() for m in self.allowed_methods))
        object.__setattr__(self, "allowed_headers", tuple(h.strip() for h in self.allowed_headers))
        object.__setattr__(self, "exposed_headers", tuple(h.strip() for h in self.exposed_headers))

    @property
    def allows_any_origin(self) -> bool:
        return ALL in self.allowed_origins

    @property
    def allows_any_header(self) -> bool:
        return ALL in self.allowed_headers

    @property
    def allows_any_method(self) -> bool:
        return ALL in self.allowed_methods

    def validate(self) -> CorsPolicy:
        """Check the policy for malformed or contradictory settings.

        Raises:
            InvalidCorsConfigurationException: on any invalid setting.
            InvalidPathPatternException: when ``path_pattern`` does not parse.
        """
        PathPattern(self.path_pattern)

        if not self.allowed_origins:
            self._fail("allowed_origins must not be empty; use ['*'] to allow any origin")
        if self.allow_credentials and self.allows_any_origin:
            self._fail(
                "allow_credentials cannot be true when allowed_origins contains '*'; "
                "list the origins explicitly"
            )
        for origin in self.allowed_origins:
            if origin != ALL:
                _check_origin(self, origin)

        if not self.allowed_methods:
            self._fail("allowed_methods must not be empty")
        unknown = [m for m in self.allowed_methods if m != ALL and m not in KNOWN_METHODS]
        if unknown:
            self._fail(f"unsupported HTTP methods {unknown}; expected any of {sorted(KNOWN_METHODS)}")

        for name in (*self.allowed_headers, *self.exposed_headers):
            if not _TOKEN_RE.match(name):
                self._fail(f"invalid header name '{name}'")
        if ALL in self.exposed_headers:
            self._fail("exposed_headers cannot contain '*'")

        if self.max_age < 0:
            self._fail(f"max_age must be >= 0, got {self.max_age}")

        return self

    def _fail(self, reason: str) -> None:
        raise InvalidCorsConfigurationException(
            f"Invalid CORS policy for '{self.path_pattern}': {reason}",
            code="CORS_INVALID",
            context={"path_pattern": self.path_pattern, "reason": reason},
        )


def _check_origin(policy: CorsPolicy, origin: str) -> None:
    reason = f"invalid origin '{origin}'; expected scheme://host[:port]"
    try:
        parts = urlsplit(origin)
        _ = parts.port  # raises on a malformed port
    except ValueError:
        policy._fail(reason)
        return
    if (
        parts.scheme not in _DEFAULT_PORTS
        or not parts.hostname
        or parts.username is not None
        or parts.path
        or parts.query
        or parts.fragment
        or ALL in origin
    ):
        policy._fail(reason)


def is_same_origin(origin: str, scheme: str, host: str | None, port: int | None) -> bool:
    """Return ``True`` when *origin* names the server the request was sent to."""
    try:
        parts = urlsplit(origin)
        origin_port = parts.port or _DEFAULT_PORTS.get(parts.scheme)
    except ValueError:
        return False
    if not host or parts.hostname is None:
        return False
    return (
        parts.scheme == scheme
        and parts.hostname == host.lower()
        and origin_port == (port or _DEFAULT_PORTS.get(scheme))
    )


def parse_header_list(value: str | None) -> list[str]:
    """Split a comma-separated header value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def merge_vary(existing: str | None) -> str:
    """Merge :data:`VARY_HEADERS` into an existing ``Vary`` value."""
    values = parse_header_list(existing)
    if ALL in values:
        return ALL
    seen = {v.lower() for v in values}
    values.extend(h for h in VARY_HEADERS if h.lower() not in seen)
    return ", ".join(values)


@dataclass(frozen=True)
class CorsProcessor:
    """Compiled, validated form of a :class:`CorsPolicy`.

    Read-only after construction; one instance serves every request.
    """

    policy: CorsPolicy
    matcher: PathPattern = field(init=False, repr=False, compare=False)
    _allowed_header_names: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.policy.validate()
        object.__setattr__(self, "matcher", PathPattern(self.policy.path_pattern))
        object.__setattr__(
            self,
            "_allowed_header_names",
            frozenset(h.lower() for h in self.policy.allowed_headers),
        )

    def applies_to(self, path: str) -> bool:
        return self.matcher.matches(path)

    def check_origin(self, origin: str) -> str | None:
        """Value for ``Access-Control-Allow-Origin``, or ``None`` if *origin* is not allowed.

        The comparison is exact and case-sensitive.  ``*`` is only ever
        returned for a wildcard policy that does not allow credentials.
        """
        policy = self.policy
        if policy.allows_any_origin:
            return origin if policy.allow_credentials else ALL
        if origin in policy.allowed_origins:
            return origin
        return None

    def check_method(self, method: str) -> bool:
        policy = self.policy
        method = method.upper()
        if policy.allows_any_method:
            return True
        if method == "HEAD" and "GET" in policy.allowed_methods:
            return True
        return method in policy.allowed_methods

    def check_headers(self, requested: list[str]) -> list[str] | None:
        """Headers to list in ``Access-Control-Allow-Headers``, or ``None`` to reject.

        A wildcard policy echoes the requested names back instead of sending
        a literal ``*``, which browsers ignore on credentialed requests.
        """
        if self.policy.allows_any_header:
            return list(requested)
        if all(name.lower() in self._allowed_header_names for name in requested):
            return list(requested)
        return None

    def preflight_headers(
        self, origin: str, request_method: str, request_headers: list[str]
    ) -> dict[str, str] | None:
        """Response headers for a preflight request, or ``None`` to reject it."""
        allow_origin = self.check_origin(origin)
        if allow_origin is None or not self.check_method(request_method):
            return None
        allow_headers = self.check_headers(request_headers)
        if allow_headers is None:
            return None

        policy = self.policy
        if policy.allows_any_method:
            allow_methods = request_method.upper()
        else:
            allow_methods = ", ".join(policy.allowed_methods)

        headers = {
            ACCESS_CONTROL_ALLOW_ORIGIN: allow_origin,
            ACCESS_CONTROL_ALLOW_METHODS: allow_methods,
        }
        if allow_headers:
            headers[ACCESS_CONTROL_ALLOW_HEADERS] = ", ".join(allow_headers)
        if policy.allow_credentials:
            headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] = "true"
        headers[ACCESS_CONTROL_MAX_AGE] = str(policy.max_age)
        return headers

    def actual_headers(self, origin: str) -> dict[str, str] | None:
        """Response headers for a non-preflight request, or ``None`` if *origin* is not allowed."""
        allow_origin = self.check_origin(origin)
        if allow_origin is None:
            return None
        headers = {ACCESS_CONTROL_ALLOW_ORIGIN: allow_origin}
        if self.policy.allow_credentials:
            headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] = "true"
        if self.policy.exposed_headers:
            headers[ACCESS_CONTROL_EXPOSE_HEADERS] = ", ".join(self.policy.exposed_headers)
        return headers


def select_processor(processors: Iterable[CorsProcessor], path: str) -> CorsProcessor | None:
    """First processor whose path pattern matches *path*."""
    for processor in processors:
        if processor.applies_to(path):
            return processor
    return None


def is_preflight(method: str, headers: Mapping[str, str]) -> bool:
    return method.upper() == "OPTIONS" and ORIGIN in headers and ACCESS_CONTROL_REQUEST_METHOD in headers
