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
"""'filescout run' — serve the FileScout application with uvicorn."""

from __future__ import annotations

import os

import click
import uvicorn

from filescout.cli.console import console
from filescout.core.config import ACTIVE_PROFILES_KEY, env_key_for
from filescout.kernel.exceptions import ConfigurationException


@click.command()
@click.option("--host", default=None, help="Bind address (default: filescout.web.host).")
@click.option("--port", default=None, type=int, help="Port number (default: filescout.web.port).")
@click.option("--reload", "use_reload", is_flag=True, help="Enable auto-reload for development.")
@click.option("--profile", "profiles", multiple=True, help="Active profile (repeatable).")
def run_command(host: str | None, port: int | None, use_reload: bool, profiles: tuple[str, ...]) -> None:
    """Start the FileScout application server."""
    from filescout.core.application import FileScoutApplication

    if profiles:
        # Reload workers re-import filescout.main and read profiles from the environment.
        os.environ[env_key_for(ACTIVE_PROFILES_KEY)] = ",".join(profiles)

    try:
        application = FileScoutApplication(profiles=list(profiles))
        web = application.web_properties
        if use_reload:
            application.cors_policies()
            app = None
        else:
            app = application.create_app()
    except ConfigurationException as exc:
        console.print(f"[error]Startup failed:[/error] {exc}")
        raise SystemExit(1) from None

    host = host or web.host
    port = port or web.port

    if use_reload:
        uvicorn.run("filescout.main:app", host=host, port=port, reload=True, log_level="warning")
        return

    uvicorn.run(app, host=host, port=port, log_level="warning")
