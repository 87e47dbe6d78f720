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

from dataclasses import dataclass, asdict
from typing import Any

from media_progress._helpers import _validate_identity_field
from media_progress._helpers import _validate_int64


@dataclass(frozen=True)
class MediaProgress:
    """
    Playback progress of one user on one media unit.

    The tuple (user_id, data_type, title_id, media_id) identifies the record.
    None of the identity fields may contain the row key delimiter.

    Args:
      - user_id: owner of the progress record
      - data_type: logical partition, e.g. "AUDIO" or "VIDEO". Not validated
            against a fixed set of values
      - title_id: content title, e.g. a show or podcast
      - media_id: media unit within the title, e.g. an episode
      - milliseconds_played: playback offset, in milliseconds
      - event_at: unix timestamp (seconds) of the progress event
    Raises:
      - InvalidIdentityError: if an identity field contains the delimiter
      - ValueError: if an integer field is outside the signed 64-bit range
    """

    user_id: str
    data_type: str
    title_id: str
    media_id: str
    milliseconds_played: int
    event_at: int

    def __post_init__(self):
        _validate_identity_field("user_id", self.user_id)
        _validate_identity_field("data_type", self.data_type)
        _validate_identity_field("title_id", self.title_id)
        _validate_identity_field("media_id", self.media_id)
        _validate_int64("milliseconds_played", self.milliseconds_played)
        _validate_int64("event_at", self.event_at)

    @property
    def identity(self) -> tuple[str, str, str, str]:
        return (self.user_id, self.data_type, self.title_id, self.media_id)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
