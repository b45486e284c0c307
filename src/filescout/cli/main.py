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
"""FileScout CLI entry point."""

from __future__ import annotations

import click

from filescout.cli.console import print_banner


class FileScoutCLI(click.Group):
    """Click group that shows the FileScout banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=FileScoutCLI)
@click.version_option(package_name="filescout")
def cli() -> None:
    """FileScout web layer CLI."""


from filescout.cli.cors import cors_command  # noqa: E402
from filescout.cli.run import run_command  # noqa: E402

cli.add_command(run_command, name="run")
cli.add_command(cors_command, name="cors")
