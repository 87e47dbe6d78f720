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
Example scenarios run by the command line interface.

Each scenario uses a fixed set of records, timestamped relative to `now`
(unix seconds).
"""
from __future__ import annotations

import json
import sys
from typing import IO

from media_progress.model import MediaProgress
from media_progress.repository import MediaProgressRepository
from media_progress.repository import WriteResult

MINUTE = 60
HOUR = 60 * MINUTE


def _print_json(value, out: IO[str] | None) -> None:
    print(json.dumps(value), file=out if out is not None else sys.stdout)


def insert_one_example(repo: MediaProgressRepository, now: int) -> MediaProgress:
    progress = MediaProgress(
        user_id="user_1",
        data_type="AUDIO",
        title_id="pod_1",
        media_id="media_4",
        milliseconds_played=1111111111,
        event_at=now,
    )
    repo.insert(progress)
    return progress


def insert_conditional_example(
    repo: MediaProgressRepository, now: int
) -> tuple[bool, bool]:
    """
    Write a progress event a minute in the future, then try to overwrite it
    with an older one. The second write is expected to be skipped.
    """
    newer = MediaProgress(
        user_id="user_3",
        data_type="VIDEO",
        title_id="title_1",
        media_id="media_1",
        milliseconds_played=2222222222,
        event_at=now + MINUTE,
    )
    older = MediaProgress(
        user_id="user_3",
        data_type="VIDEO",
        title_id="title_1",
        media_id="media_1",
        milliseconds_played=3333333333,
        event_at=now,
    )
    return repo.insert_conditional(newer), repo.insert_conditional(older)


def batch_example_records(now: int) -> list[MediaProgress]:
    return [
        MediaProgress("user_1", "AUDIO", "pod_1", "media_4", 4444444444, now),
        MediaProgress("user_1", "VIDEO", "title_1", "media_1", 5555555555, now - HOUR),
        MediaProgress("user_1", "VIDEO", "title_1", "media_2", 6666666666, now - 2 * HOUR),
        MediaProgress("user_1", "VIDEO", "title_2", "media_3", 7777777777, now - 3 * HOUR),
        MediaProgress("user_2", "VIDEO", "title_4", "media_1", 8888888888, now - 4 * HOUR),
    ]


def insert_batch_example(repo: MediaProgressRepository, now: int) -> list[WriteResult]:
    return repo.insert_batch(batch_example_records(now))


def read_one_example(
    repo: MediaProgressRepository, out: IO[str] | None = None
) -> MediaProgress:
    progress = repo.read_one("user_1", "VIDEO", "title_1", "media_1")
    _print_json(progress.to_dict(), out)
    return progress


def read_multiple_example(
    repo: MediaProgressRepository, out: IO[str] | None = None
) -> list[MediaProgress]:
    progress_list = repo.read_multiple(
        "user_1", "VIDEO", "title_1", ["media_1", "media_2"]
    )
    _print_json([p.to_dict() for p in progress_list], out)
    return progress_list


def read_partial_key_example(
    repo: MediaProgressRepository, out: IO[str] | None = None
) -> list[MediaProgress]:
    progress_list = repo.read_by_partial_key("user_1", "VIDEO", "title_1")
    _print_json([p.to_dict() for p in progress_list], out)
    return progress_list


def delete_example(repo: MediaProgressRepository) -> None:
    repo.delete("user_1", "VIDEO", "title_1", "media_1")
