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
"""Ant-style request path patterns.

Syntax, matched against the URL path:

- ``?`` matches one character other than ``/``
- ``*`` matches zero or more characters within a single path segment
- ``**`` (a whole segment) matches zero or more path segments
- ``{name}`` matches one segment and captures it as ``name``
- ``{name:regex}`` captures a segment that fully matches ``regex``

Patterns are compiled once and are immutable, so one instance can be shared
by concurrent requests.
"""

from __future__ import annotations

import re

from filescout.kernel.exceptions import InvalidPathPatternException

_VARIABLE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_DEFAULT_VARIABLE_REGEX = "[^/]+"


class PathPattern:
    """A compiled Ant-style path pattern.

    Raises :class:`InvalidPathPatternException` on construction when the
    pattern cannot be parsed.
    """

    __slots__ = ("_pattern", "_regex", "_variable_names")

    def __init__(self, pattern: str) -> None:
        self._pattern = pattern
        self._variable_names: list[str] = []
        self._regex = self._compile(pattern)

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def variable_names(self) -> tuple[str, ...]:
        return tuple(self._variable_names)

    def matches(self, path: str) -> bool:
        """Return ``True`` if *path* matches this pattern in full."""
        return self._regex.match(path) is not None

    def match(self, path: str) -> dict[str, str] | None:
        """Match *path*, returning captured URI variables or ``None``."""
        m = self._regex.match(path)
        if m is None:
            return None
        return {name: m.group(name) for name in self._variable_names}

    def __repr__(self) -> str:
        return f"PathPattern({self._pattern!r})"

    def __str__(self) -> str:
        return self._pattern

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PathPattern) and other._pattern == self._pattern

    def __hash__(self) -> int:
        return hash(self._pattern)

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _compile(self, pattern: str) -> re.Pattern[str]:
        if not pattern.startswith("/"):
            raise InvalidPathPatternException(pattern, "must start with '/'")

        parts = ["^"]
        for segment in pattern[1:].split("/"):
            if segment == "**":
                parts.append("(?:/[^/]*)*")
            elif "**" in segment:
                raise InvalidPathPatternException(pattern, "'**' must be a whole path segment")
            else:
                parts.append("/" + self._compile_segment(pattern, segment))
        parts.append("$")

        try:
            return re.compile("".join(parts))
        except re.error as exc:
            raise InvalidPathPatternException(pattern, f"invalid variable regex ({exc})") from exc

    def _compile_segment(self, pattern: str, segment: str) -> str:
        out: list[str] = []
        i = 0
        while i < len(segment):
            ch = segment[i]
            if ch == "{":
                end = self._find_closing_brace(pattern, segment, i)
                out.append(self._compile_variable(pattern, segment[i + 1 : end]))
                i = end + 1
                continue
            if ch == "}":
                raise InvalidPathPatternException(pattern, f"unmatched '}}' in segment '{segment}'")
            if ch == "*":
                out.append("[^/]*")
            elif ch == "?":
                out.append("[^/]")
            else:
                out.append(re.escape(ch))
            i += 1
        return "".join(out)

    @staticmethod
    def _find_closing_brace(pattern: str, segment: str, start: int) -> int:
        depth = 0
        for j in range(start, len(segment)):
            if segment[j] == "{":
                depth += 1
            elif segment[j] == "}":
                depth -= 1
                if depth == 0:
                    return j
        raise InvalidPathPatternException(pattern, f"unclosed '{{' in segment '{segment}'")

    def _compile_variable(self, pattern: str, body: str) -> str:
        name, sep, regex = body.partition(":")
        if not _VARIABLE_NAME_RE.match(name):
            raise InvalidPathPatternException(pattern, f"invalid variable name '{name}'")
        if name in self._variable_names:
            raise InvalidPathPatternException(pattern, f"duplicate variable name '{name}'")
        if sep and not regex:
            raise InvalidPathPatternException(pattern, f"empty regex for variable '{name}'")
        regex = regex or _DEFAULT_VARIABLE_REGEX
        try:
            compiled = re.compile(regex)
        except re.error as exc:
            raise InvalidPathPatternException(pattern, f"invalid regex for variable '{name}' ({exc})") from exc
        if compiled.groupindex:
            raise InvalidPathPatternException(pattern, f"regex for variable '{name}' must not define named groups")
        self._variable_names.append(name)
        return f"(?P<{name}>{regex})"
