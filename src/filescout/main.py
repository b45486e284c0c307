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
"""ASGI entry point: ``uvicorn filescout.main:app``.

Configuration is read from the working directory (``filescout.yaml``) and
``FILESCOUT_*`` environment variables when this module is imported.
"""

from filescout.core.application import FileScoutApplication

app = FileScoutApplication().create_app()
