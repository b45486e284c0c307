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
"""Tests for the FileScout CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner
from starlette.applications import Starlette

from filescout.cli.main import cli
from filescout.core.application import FileScoutApplication
from filescout.kernel.exceptions import ConfigurationException
from filescout.web.cors import CorsPolicy


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolate_profiles(monkeypatch):
    # 'run --profile' exports the active profiles; monkeypatch restores the variable.
    monkeypatch.setenv("FILESCOUT_PROFILES_ACTIVE", "")


def _write_cors(directory, cors, name="filescout.yaml"):
    (directory / name).write_text(yaml.safe_dump({"filescout": {"web": {"cors": cors}}}))


class TestCLIGroup:
    def test_help_shows_banner_and_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "FileScout" in result.output
        assert "run" in result.output
        assert "cors" in result.output

    def test_help_shows_project_copyright(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Copyright 2026 The FileScout Authors" in result.output
        assert "Apache 2.0 License" in result.output
        assert "Firefly" not in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(cli, ["deploy"])

        assert result.exit_code != 0


class TestCorsCommand:
    def test_defaults_are_valid(self, runner, tmp_path):
        result = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "Configuration is valid." in result.output
        assert "credentials" in result.output

    def test_wildcard_origin_with_credentials_exits_1(self, runner, tmp_path):
        _write_cors(tmp_path, {"allowed-origins": ["*"], "allow-credentials": True})

        result = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_invalid_path_pattern_exits_1(self, runner, tmp_path):
        _write_cors(tmp_path, {"path-pattern": "/files/{name"})

        result = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_disabled(self, runner, tmp_path):
        _write_cors(tmp_path, {"enabled": False})

        result = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "CORS is disabled" in result.output

    def test_profile_overlay(self, runner, tmp_path):
        _write_cors(tmp_path, {"allowed-origins": ["*"]}, name="filescout-broken.yaml")

        ok = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path)])
        broken = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path), "--profile", "broken"])

        assert ok.exit_code == 0
        assert broken.exit_code == 1

    def test_policies_come_from_the_application_bootstrap(self, runner, tmp_path):
        policy = CorsPolicy(path_pattern="/api/**", allowed_origins=("https://files.example.com",))

        with patch.object(FileScoutApplication, "cors_policies", return_value=[policy]) as cors_policies:
            result = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path)])

        assert result.exit_code == 0, result.output
        cors_policies.assert_called_once_with()
        assert "/api/**" in result.output

    def test_bootstrap_configuration_error_exits_1(self, runner, tmp_path):
        error = ConfigurationException("broken binding", code="CONFIG_INVALID")

        with patch.object(FileScoutApplication, "cors_policies", side_effect=error):
            result = runner.invoke(cli, ["cors", "--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "broken binding" in result.output


class TestRunCommand:
    def test_serves_app_with_uvicorn(self, runner):
        with runner.isolated_filesystem(), patch("filescout.cli.run.uvicorn") as uvicorn:
            result = runner.invoke(cli, ["run", "--port", "9000"])

        assert result.exit_code == 0, result.output
        args, kwargs = uvicorn.run.call_args
        assert isinstance(args[0], Starlette)
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000

    def test_reload_uses_import_string(self, runner):
        with runner.isolated_filesystem(), patch("filescout.cli.run.uvicorn") as uvicorn:
            result = runner.invoke(cli, ["run", "--reload", "--host", "127.0.0.1"])

        assert result.exit_code == 0, result.output
        uvicorn.run.assert_called_once_with(
            "filescout.main:app", host="127.0.0.1", port=8080, reload=True, log_level="warning"
        )

    def test_invalid_configuration_exits_1(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path), patch("filescout.cli.run.uvicorn") as uvicorn:
            _write_cors(Path.cwd(), {"allowed-origins": ["*"]})
            result = runner.invoke(cli, ["run"])

        assert result.exit_code == 1
        assert "Startup failed" in result.output
        uvicorn.run.assert_not_called()
