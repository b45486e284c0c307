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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

FILESCOUT_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "filescout": "bold magenta",
    "dim": "dim",
})

console = Console(theme=FILESCOUT_THEME)


def print_banner() -> None:
    from filescout import __version__

    console.print(f"[filescout]FileScout[/filescout] [dim]:: web layer :: (v{__version__})[/dim]")
    console.print("[dim]Copyright 2026 The FileScout Authors | Apache 2.0 License[/dim]\n")
