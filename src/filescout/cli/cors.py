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
"""'filescout cors' — validate CORS configuration and print the effective policies."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from filescout.cli.console import console
from filescout.kernel.exceptions import ConfigurationException


@click.command()
@click.option("--profile", "profiles", multiple=True, help="Active profile (repeatable).")
@click.option(
    "--config-dir",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding filescout.yaml.",
)
def cors_command(profiles: tuple[str, ...], config_dir: Path) -> None:
    """Validate the CORS configuration and show the policies that would be registered."""
    from filescout.core.application import FileScoutApplication

    try:
        policies = FileScoutApplication(base_dir=config_dir, profiles=list(profiles)).cors_policies()
    except ConfigurationException as exc:
        console.print(f"[error]Invalid configuration:[/error] {exc}")
        raise SystemExit(1) from None

    if not policies:
        console.print("[warning]CORS is disabled (filescout.web.cors.enabled=false).[/warning]")
        return

    table = Table(title="[filescout]CORS policies[/filescout]", border_style="dim", show_lines=True)
    table.add_column("Path", style="bold")
    table.add_column("Origins")
    table.add_column("Methods")
    table.add_column("Headers")
    table.add_column("Credentials")
    table.add_column("Max age", style="dim")

    for policy in policies:
        table.add_row(
            policy.path_pattern,
            "\n".join(policy.allowed_origins),
            ", ".join(policy.allowed_methods),
            ", ".join(policy.allowed_headers),
            "yes" if policy.allow_credentials else "no",
            f"{policy.max_age}s",
        )
        if policy.allow_credentials and policy.allows_any_header:
            console.print(
                f"[warning]![/warning] {policy.path_pattern}: allowed headers '*' with credentials; "
                "preflights echo the requested headers"
            )

    console.print(table)
    console.print("[success]Configuration is valid.[/success]")
