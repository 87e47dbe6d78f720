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
"""
Row key and cell encoding for media progress records.

Row key: ``user_id#data_type#title_id#media_id``

Cells, all in column family ``data`` and written at version 0:
  - ``milliseconds``: decimal ASCII of MediaProgress.milliseconds_played
  - ``event_at``: decimal ASCII of MediaProgress.event_at

Existing rows were written with this layout, so any change here breaks
compatibility with stored data.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING

from google.cloud.bigtable.data import RowRange
from google.cloud.bigtable.data import SetCell

from media_progress._helpers import INT64_MAX
from media_progress._helpers import INT64_MIN
from media_progress._helpers import ROW_KEY_DELIMITER
from media_progress._helpers import _validate_identity_field
from media_progress._helpers import _validate_int64
from media_progress.exceptions import CellDecodeError
from media_progress.model import MediaProgress

if TYPE_CHECKING:
    from google.cloud.bigtable.data.row import Row

COLUMN_FAMILY = "data"
MILLISECONDS_COLUMN = b"milliseconds"
EVENT_AT_COLUMN = b"event_at"

# every cell is written at this fixed version, leaving ordering to the store
CELL_TIMESTAMP_MICROS = 0

_IDENTITY_FIELDS = ("user_id", "data_type", "title_id", "media_id")
_DECIMAL_RE = re.compile(rb"[+-]?[0-9]+")


def encode_row_key(user_id: str, data_type: str, title_id: str, media_id: str) -> bytes:
    """
    Build the row key for a single record.

    Raises:
      - InvalidIdentityError: if any field contains the delimiter
    """
    values = (user_id, data_type, title_id, media_id)
    for name, value in zip(_IDENTITY_FIELDS, values):
        _validate_identity_field(name, value)
    return ROW_KEY_DELIMITER.join(values).encode("utf-8")


def encode_row_prefix(user_id: str, data_type: str, title_id: str) -> bytes:
    """
    Build the row key prefix shared by every media unit of a title.

    The prefix ends with the delimiter, so "title_1" does not also
    match rows of "title_10".
    """
    values = (user_id, data_type, title_id)
    for name, value in zip(_IDENTITY_FIELDS, values):
        _validate_identity_field(name, value)
    return (ROW_KEY_DELIMITER.join(values) + ROW_KEY_DELIMITER).encode("utf-8")


def _prefix_successor(prefix: bytes) -> bytes | None:
    """
    Return the smallest key greater than every key starting with prefix.

    Returns None when no such key exists (empty or all 0xff prefix).
    """
    stripped = prefix.rstrip(b"\xff")
    if not stripped:
        return None
    return stripped[:-1] + bytes([stripped[-1] + 1])


def prefix_row_range(prefix: bytes) -> RowRange:
    """Row range covering every key that starts with prefix."""
    end_key = _prefix_successor(prefix)
    if end_key is None:
        return RowRange(start_key=prefix or None)
    return RowRange(start_key=prefix, end_key=end_key)


def encode_int64(value: int) -> bytes:
    _validate_int64("value", value)
    return str(value).encode("ascii")


def decode_int64(
    value: bytes, row_key: bytes | None = None, column: str | None = None
) -> int:
    """
    Parse a cell value written by encode_int64.

    Raises:
      - CellDecodeError: if value is not a base-10 integer literal in the
            signed 64-bit range
    """
    if not _DECIMAL_RE.fullmatch(value):
        raise CellDecodeError(
            f"cell {column} of row {row_key!r} holds {value!r}, not a decimal integer",
            row_key=row_key,
            column=column,
            value=value,
        )
    parsed = int(value)
    if not INT64_MIN <= parsed <= INT64_MAX:
        raise CellDecodeError(
            f"cell {column} of row {row_key!r} holds {value!r}, outside the signed 64-bit range",
            row_key=row_key,
            column=column,
            value=value,
        )
    return parsed


def build_mutations(progress: MediaProgress) -> list[SetCell]:
    """Set both progress cells in a single row mutation."""
    return [
        SetCell(
            COLUMN_FAMILY,
            MILLISECONDS_COLUMN,
            encode_int64(progress.milliseconds_played),
            timestamp_micros=CELL_TIMESTAMP_MICROS,
        ),
        SetCell(
            COLUMN_FAMILY,
            EVENT_AT_COLUMN,
            encode_int64(progress.event_at),
            timestamp_micros=CELL_TIMESTAMP_MICROS,
        ),
    ]


def split_row_key(row_key: bytes) -> tuple[str, str, str, str]:
    try:
        parts = row_key.decode("utf-8").split(ROW_KEY_DELIMITER)
    except UnicodeDecodeError as e:
        raise CellDecodeError(
            f"row key {row_key!r} is not valid utf-8", row_key=row_key
        ) from e
    if len(parts) != len(_IDENTITY_FIELDS):
        raise CellDecodeError(
            f"row key {row_key!r} has {len(parts)} parts, expected {len(_IDENTITY_FIELDS)}",
            row_key=row_key,
        )
    return parts[0], parts[1], parts[2], parts[3]


def decode_row(row: "Row") -> MediaProgress:
    """
    Convert a row read from the table back into a MediaProgress.

    When a column holds several versions, the newest one is used.

    Raises:
      - CellDecodeError: if the row key does not have four parts, a column
            is missing, or a cell value is not a decimal integer
    """
    row_key = row.row_key
    user_id, data_type, title_id, media_id = split_row_key(row_key)
    latest: dict[bytes, bytes] = {}
    # cells arrive in native order: newest version first within a column
    for cell in row:
        if cell.family != COLUMN_FAMILY:
            continue
        latest.setdefault(cell.qualifier, cell.value)
    values = {}
    for column in (MILLISECONDS_COLUMN, EVENT_AT_COLUMN):
        column_name = f"{COLUMN_FAMILY}:{column.decode()}"
        if column not in latest:
            raise CellDecodeError(
                f"row {row_key!r} has no {column_name} cell",
                row_key=row_key,
                column=column_name,
            )
        values[column] = decode_int64(latest[column], row_key, column_name)
    return MediaProgress(
        user_id=user_id,
        data_type=data_type,
        title_id=title_id,
        media_id=media_id,
        milliseconds_played=values[MILLISECONDS_COLUMN],
        event_at=values[EVENT_AT_COLUMN],
    )
