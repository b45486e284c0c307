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
"""Application bootstrap — builds the FileScout ASGI application from configuration."""

from __future__ import annotations

import os
import platform
import time
from pathlib import Path
from typing import Any

from starlette.applications import Starlette

from filescout import __version__
from filescout.config.properties import CorsProperties, WebProperties
from filescout.core.config import Config
from filescout.kernel.exceptions import ConfigurationException
from filescout.logging.port import LoggingPort
from filescout.logging.structlog_adapter import StructlogAdapter
from filescout.web.adapters.starlette.app import create_app
from filescout.web.cors import CorsPolicy


class FileScoutApplication:
    """Loads configuration and produces the ASGI application.

    Startup sequence:
    1. Load configuration (defaults, project files, profile overlays)
    2. Configure the logging port (structlog unless another is given) from
       ``filescout.logging``
    3. Bind ``filescout.web`` and ``filescout.web.cors`` properties
    4. Build the Starlette app, registering and validating CORS policies
    5. Log ``application_started``

    Any :class:`ConfigurationException` is logged as ``application_failed``
    and re-raised; the process must not serve requests with a broken policy.
    """

    def __init__(
        self,
        config: Config | None = None,
        base_dir: str | Path | None = None,
        profiles: list[str] | None = None,
        logging_port: LoggingPort | None = None,
    ) -> None:
        if config is None:
            active_profiles = Config.resolve_active_profiles(profiles)
            config = Config.from_sources(base_dir or Path.cwd(), active_profiles=active_profiles)
            self.active_profiles = active_profiles
        else:
            self.active_profiles = list(profiles or [])
        self.config = config
        self._name: str = str(config.get("filescout.app.name", "filescout"))
        self._startup_time: float = 0.0

        self._logging: LoggingPort = logging_port or StructlogAdapter()
        self._logging.configure(self.config)
        self._logger = self._logging.get_logger("filescout.core")

    @property
    def startup_time_seconds(self) -> float:
        return self._startup_time

    @property
    def web_properties(self) -> WebProperties:
        return self.config.bind(WebProperties)

    def cors_policies(self) -> list[CorsPolicy]:
        """CORS policies described by configuration, validated."""
        policies = self.config.bind(CorsProperties).to_policies()
        for policy in policies:
            policy.validate()
        return policies

    def create_app(self, **kwargs: Any) -> Starlette:
        """Build the Starlette application.

        Keyword arguments are forwarded to
        :func:`filescout.web.adapters.starlette.app.create_app`.

        Raises:
            ConfigurationException: configuration cannot be bound or a CORS
                policy is invalid.
        """
        start = time.perf_counter()
        self._logger.info(
            "starting_application",
            app=self._name,
            version=__version__,
            python=platform.python_version(),
            pid=os.getpid(),
        )
        if self.active_profiles:
            self._logger.info("active_profiles", profiles=self.active_profiles)
        for source in self.config.loaded_sources:
            self._logger.info("loaded_config", source=source)

        try:
            web = self.web_properties
            policies = self.cors_policies()
            app = create_app(cors=policies, debug=web.debug, **kwargs)
        except ConfigurationException as exc:
            self._logger.error(
                "application_failed",
                app=self._name,
                error=str(exc),
                code=exc.code,
                context=exc.context,
            )
            raise

        if not policies:
            self._logger.info("cors_disabled")

        self._startup_time = time.perf_counter() - start
        self._logger.info(
            "application_started",
            app=self._name,
            startup_time_s=round(self._startup_time, 3),
            cors_policies=len(policies),
        )
        return app
