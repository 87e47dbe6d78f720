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
"""
Fixtures for system tests against the Bigtable emulator.

Start the emulator and export BIGTABLE_EMULATOR_HOST before running, e.g.
    gcloud beta emulators bigtable start --host-port=localhost:8086
    export BIGTABLE_EMULATOR_HOST=localhost:8086
"""
import os
import uuid

import pytest

from media_progress.config import Settings
from media_progress.repository import open_repository
from media_progress.row_key import COLUMN_FAMILY


@pytest.fixture(scope="session")
def project_id():
    return os.getenv("MEDIA_PROGRESS_PROJECT", "local")


@pytest.fixture(scope="session")
def instance_id():
    return os.getenv("MEDIA_PROGRESS_INSTANCE", "local-instance")


@pytest.fixture(scope="session")
def table_id(project_id, instance_id):
    """
    Creates a temporary table with the progress column family
    """
    from google.cloud.bigtable.client import Client

    table_id = f"media-progress-{uuid.uuid4().hex[:8]}"
    admin_client = Client(project=project_id, admin=True)
    table = admin_client.instance(instance_id).table(table_id)
    table.create()
    table.column_family(COLUMN_FAMILY).create()
    yield table_id
    table.delete()


@pytest.fixture(scope="session")
def settings(project_id, instance_id, table_id):
    # the emulator does not know about app profiles
    return Settings(
        project=project_id,
        instance_id=instance_id,
        table_id=table_id,
        app_profile_id=None,
        read_timeout=10.0,
        write_timeout=10.0,
    )


@pytest.fixture
def repository(settings):
    with open_repository(settings) as repo:
        yield repo
