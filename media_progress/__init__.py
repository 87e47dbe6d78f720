# Copyright 2026 Google LLC
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
#
from media_progress import version as package_version

from media_progress.config import Settings
from media_progress.exceptions import CellDecodeError
from media_progress.exceptions import InvalidIdentityError
from media_progress.exceptions import MediaProgressError
from media_progress.exceptions import RowNotFoundError
from media_progress.model import MediaProgress
from media_progress.repository import MediaProgressRepository
from media_progress.repository import WriteResult
from media_progress.repository import open_repository

__version__: str = package_version.__version__

__all__ = (
    "Settings",
    "MediaProgress",
    "MediaProgressRepository",
    "WriteResult",
    "open_repository",
    "MediaProgressError",
    "InvalidIdentityError",
    "RowNotFoundError",
    "CellDecodeError",
)
