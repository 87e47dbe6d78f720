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

import math

from google.cloud.bigtable.data import row_filters

from media_progress.row_key import COLUMN_FAMILY
from media_progress.row_key import EVENT_AT_COLUMN
from media_progress.row_key import encode_int64

# exclusive upper bound of the event_at value range checked before a
# conditional insert
EVENT_AT_RANGE_END = b"99999999999999999"


def newer_event_filter(now: float) -> row_filters.RowFilterChain:
    """
    Predicate matching rows that already hold an event at or after `now`.

    Selects data:event_at cells whose value lies in
    [str(floor(now)), EVENT_AT_RANGE_END). Values are compared as bytes by
    the backend, so decimal strings of different widths do not order
    numerically.
    """
    start = encode_int64(math.floor(now))
    return row_filters.RowFilterChain(
        filters=[
            row_filters.FamilyNameRegexFilter(COLUMN_FAMILY),
            row_filters.ColumnQualifierRegexFilter(EVENT_AT_COLUMN),
            row_filters.ValueRangeFilter(
                start_value=start,
                end_value=EVENT_AT_RANGE_END,
                inclusive_start=True,
                inclusive_end=False,
            ),
        ]
    )
