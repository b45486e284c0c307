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
"""Tests for binding CORS configuration into CorsPolicy values."""

from __future__ import annotations

import pytest

from filescout.config.properties import CorsMappingProperties, CorsProperties, WebProperties
from filescout.core.config import Config
from filescout.kernel.exceptions import ConfigurationException
from filescout.web.cors import CorsPolicy

DEFAULT_POLICY = CorsPolicy(
    path_pattern="/**",
    allowed_origins=(
        "http://localhost:3001",
        "https://aquamarine-selkie-7ea2ff.netlify.app",
        "https://filemanagerapp.harshaanc.dev",
    ),
    allowed_methods=("GET", "POST", "PUT", "DELETE"),
    allowed_headers=("*",),
    allow_credentials=True,
)


def _defaults(**overrides) -> Config:
    data = Config.load_defaults()
    return Config(Config._deep_merge(data, overrides))


class TestDefaults:
    def test_packaged_defaults_produce_the_filescout_policy(self):
        policies = _defaults().bind(CorsProperties).to_policies()

        assert policies == [DEFAULT_POLICY]

    def test_packaged_policy_is_valid(self):
        DEFAULT_POLICY.validate()

    def test_web_properties_defaults(self):
        web = _defaults().bind(WebProperties)

        assert web.host == "0.0.0.0"
        assert web.port == 8080
        assert web.debug is False


class TestEnvironmentOverrides:
    def test_origins_from_comma_separated_env(self, monkeypatch):
        monkeypatch.setenv("FILESCOUT_WEB_CORS_ALLOWED_ORIGINS", "https://a.example, https://b.example")

        (policy,) = _defaults().bind(CorsProperties).to_policies()

        assert policy.allowed_origins == ("https://a.example", "https://b.example")
        assert policy.allow_credentials is True

    def test_methods_from_env_are_upper_cased(self, monkeypatch):
        monkeypatch.setenv("FILESCOUT_WEB_CORS_ALLOWED_METHODS", "get,patch")

        (policy,) = _defaults().bind(CorsProperties).to_policies()

        assert policy.allowed_methods == ("GET", "PATCH")

    def test_credentials_and_max_age_from_env(self, monkeypatch):
        monkeypatch.setenv("FILESCOUT_WEB_CORS_ALLOW_CREDENTIALS", "false")
        monkeypatch.setenv("FILESCOUT_WEB_CORS_MAX_AGE", "60")

        (policy,) = _defaults().bind(CorsProperties).to_policies()

        assert policy.allow_credentials is False
        assert policy.max_age == 60

    def test_cors_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("FILESCOUT_WEB_CORS_ENABLED", "false")

        assert _defaults().bind(CorsProperties).to_policies() == []

    def test_invalid_value_is_a_configuration_error(self, monkeypatch):
        monkeypatch.setenv("FILESCOUT_WEB_CORS_MAX_AGE", "forever")

        with pytest.raises(ConfigurationException, match="CorsProperties"):
            _defaults().bind(CorsProperties)


class TestMappings:
    def test_mappings_replace_top_level_policy(self):
        config = _defaults(
            filescout={
                "web": {
                    "cors": {
                        "mappings": [
                            {"path-pattern": "/public/**", "allowed-origins": ["*"]},
                            {
                                "path-pattern": "/api/**",
                                "allowed-origins": "https://files.example.com",
                                "allowed-methods": ["get", "delete"],
                                "allow-credentials": True,
                                "exposed-headers": "X-Total-Count",
                            },
                        ]
                    }
                }
            }
        )

        public, api = config.bind(CorsProperties).to_policies()

        assert public == CorsPolicy(path_pattern="/public/**", allowed_origins=("*",))
        assert api.path_pattern == "/api/**"
        assert api.allowed_origins == ("https://files.example.com",)
        assert api.allowed_methods == ("GET", "DELETE")
        assert api.allow_credentials is True
        assert api.exposed_headers == ("X-Total-Count",)

    def test_mapping_defaults(self):
        mapping = CorsMappingProperties(allowed_origins=["https://files.example.com"])

        assert mapping.to_policy() == CorsPolicy(allowed_origins=("https://files.example.com",))

    def test_binding_does_not_validate_policies(self):
        config = _defaults(filescout={"web": {"cors": {"allowed-origins": ["*"]}}})

        (policy,) = config.bind(CorsProperties).to_policies()

        # Credentials stay enabled from the defaults: rejected only by validate().
        assert policy.allows_any_origin and policy.allow_credentials
