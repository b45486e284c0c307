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
"""Web subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from filescout.core.config import config_properties


@config_properties(prefix="filescout.web")
@dataclass
class WebProperties:
    """Configuration for the web subsystem (filescout.web.*)."""

    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
