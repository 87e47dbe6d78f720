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

from media_progress.exceptions import InvalidIdentityError

"""
Helper functions shared by the model and the row key codec.
"""

# separator between identity fields in a row key
ROW_KEY_DELIMITER = "#"

# cell values are signed 64-bit integers
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _validate_identity_field(field_name: str, value: str) -> str:
    """
    Check that an identity field can be placed in a row key.

    Raises:
      - TypeError: if value is not a string
      - InvalidIdentityError: if value contains the row key delimiter
    """
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string, got {type(value).__name__}")
    if ROW_KEY_DELIMITER in value:
        raise InvalidIdentityError(field_name, value, ROW_KEY_DELIMITER)
    return value


def _validate_int64(field_name: str, value: int) -> int:
    # bool is an int subclass, but never a valid offset or timestamp
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field_name} must be an int, got {type(value).__name__}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"{field_name}={value} is outside the signed 64-bit range")
    return value
