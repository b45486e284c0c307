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
"""CORS configuration properties (filescout.web.cors.*).

A single policy can be written directly under ``filescout.web.cors``::

    filescout:
      web:
        cors:
          allowed-origins: [https://files.example.com]
          allow-credentials: true

Several path-specific policies go under ``mappings``; they take precedence
over the top-level fields, in the order given.  List fields also accept a
comma-separated string so they can be set from environment variables, e.g.
``FILESCOUT_WEB_CORS_ALLOWED_ORIGINS=https://a.example,https://b.example``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from filescout.core.config import config_properties
from filescout.web.cors import DEFAULT_MAX_AGE, CorsPolicy


def _split(value: object) -> object:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class CorsMappingProperties(BaseModel):
    """One CORS policy as it appears in configuration."""

    path_pattern: str = "/**"
    allowed_origins: list[str] = Field(default_factory=list)
    allowed_methods: list[str] = Field(default_factory=lambda: ["GET", "HEAD", "POST"])
    allowed_headers: list[str] = Field(default_factory=lambda: ["*"])
    allow_credentials: bool = False
    exposed_headers: list[str] = Field(default_factory=list)
    max_age: int = DEFAULT_MAX_AGE

    @field_validator("allowed_origins", "allowed_headers", "exposed_headers", mode="before")
    @classmethod
    def _split_lists(cls, v: object) -> object:
        return _split(v)

    @field_validator("allowed_methods", mode="before")
    @classmethod
    def _split_methods(cls, v: object) -> object:
        v = _split(v)
        if isinstance(v, list):
            return [str(m).upper() for m in v]
        return v

    def to_policy(self) -> CorsPolicy:
        return CorsPolicy(
            path_pattern=self.path_pattern,
            allowed_origins=tuple(self.allowed_origins),
            allowed_methods=tuple(self.allowed_methods),
            allowed_headers=tuple(self.allowed_headers),
            allow_credentials=self.allow_credentials,
            exposed_headers=tuple(self.exposed_headers),
            max_age=self.max_age,
        )


@config_properties(prefix="filescout.web.cors")
class CorsProperties(CorsMappingProperties):
    """CORS configuration for the whole application."""

    enabled: bool = True
    mappings: list[CorsMappingProperties] = Field(default_factory=list)

    def to_policies(self) -> list[CorsPolicy]:
        """Policies to register, in match order.  Empty when CORS is disabled."""
        if not self.enabled:
            return []
        if self.mappings:
            return [m.to_policy() for m in self.mappings]
        return [self.to_policy()]
