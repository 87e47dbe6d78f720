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

import os
import time
import uuid

import pytest
from google.cloud.environment_vars import BIGTABLE_EMULATOR

from media_progress.exceptions import RowNotFoundError
from media_progress.model import MediaProgress

pytestmark = pytest.mark.skipif(
    not os.getenv(BIGTABLE_EMULATOR), reason=f"{BIGTABLE_EMULATOR} is not set"
)


@pytest.fixture
def user_id():
    """Unique user per test, so tests do not see each other's rows"""
    return f"user-{uuid.uuid4().hex[:8]}"


def _progress(user_id, media_id="media_1", **kwargs):
    fields = dict(
        user_id=user_id,
        data_type="VIDEO",
        title_id="title_1",
        media_id=media_id,
        milliseconds_played=1000,
        event_at=1700000000,
    )
    fields.update(kwargs)
    return MediaProgress(**fields)


def test_insert_read_one(repository, user_id):
    progress = _progress(user_id)
    repository.insert(progress)
    assert repository.read_one(user_id, "VIDEO", "title_1", "media_1") == progress


def test_read_missing(repository, user_id):
    with pytest.raises(RowNotFoundError):
        repository.read_one(user_id, "VIDEO", "title_1", "missing")


def test_batch_prefix_scan(repository, user_id):
    records = [_progress(user_id, f"media_{idx}", milliseconds_played=idx) for idx in range(3)]
    other_title = _progress(user_id, title_id="title_10")
    results = repository.insert_batch(records + [other_title])
    assert all(result.ok for result in results)
    got = repository.read_by_partial_key(user_id, "VIDEO", "title_1")
    assert sorted(got, key=lambda p: p.media_id) == records


def test_read_multiple(repository, user_id):
    repository.insert_batch([_progress(user_id, f"media_{idx}") for idx in range(3)])
    got = repository.read_multiple(user_id, "VIDEO", "title_1", ["media_0", "media_2", "nope"])
    assert sorted(p.media_id for p in got) == ["media_0", "media_2"]


def test_conditional(repository, user_id):
    now = int(time.time())
    newer = _progress(user_id, milliseconds_played=2, event_at=now + 60)
    older = _progress(user_id, milliseconds_played=3, event_at=now)
    assert repository.insert_conditional(newer) is True
    assert repository.insert_conditional(older) is False
    assert repository.read_one(user_id, "VIDEO", "title_1", "media_1") == newer


def test_delete(repository, user_id):
    repository.insert(_progress(user_id))
    repository.delete(user_id, "VIDEO", "title_1", "media_1")
    with pytest.raises(RowNotFoundError):
        repository.read_one(user_id, "VIDEO", "title_1", "media_1")
