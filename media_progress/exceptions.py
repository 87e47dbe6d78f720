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
from __future__ import annotations


class MediaProgressError(Exception):
    """Base class for errors raised by media_progress."""


class InvalidIdentityError(MediaProgressError, ValueError):
    """
    Raised when an identity field cannot be encoded into a row key.

    Row keys are the `#`-joined identity fields with no escaping, so a field
    containing the delimiter would silently collide with another record.
    """

    def __init__(self, field_name: str, value: str, delimiter: str = "#"):
        super().__init__(
            f"{field_name}={value!r} must not contain the row key delimiter {delimiter!r}"
        )
        self.field_name = field_name
        self.value = value


class RowNotFoundError(MediaProgressError, LookupError):
    """
    Raised when no row exists at the requested key.

    Covers both an empty read result and a NotFound status from the
    backend. In the latter case the original error is attached as __cause__.
    """

    def __init__(self, row_key: bytes, table_id: str | None = None):
        location = f" on {table_id}" if table_id else ""
        super().__init__(f"row {row_key!r} not found{location}")
        self.row_key = row_key
        self.table_id = table_id


class CellDecodeError(MediaProgressError, ValueError):
    """Raised when a stored row cannot be decoded into a MediaProgress."""

    def __init__(
        self,
        message: str,
        row_key: bytes | None = None,
        column: str | None = None,
        value: bytes | None = None,
    ):
        super().__init__(message)
        self.row_key = row_key
        self.column = column
        self.value = value
