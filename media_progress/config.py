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

import dataclasses
import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "MEDIA_PROGRESS_"

DEFAULT_PROJECT = "local"
DEFAULT_INSTANCE = "local-instance"
DEFAULT_TABLE = "media_progress"
DEFAULT_APP_PROFILE = "default"
DEFAULT_READ_TIMEOUT = 1.0
DEFAULT_WRITE_TIMEOUT = 1.0


def _parse_timeout(name: str, raw: str | float | None) -> float | None:
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Connection and timeout settings for the media progress table.

    Args:
      - project: Google Cloud project id
      - instance_id: Bigtable instance id
      - table_id: table holding the progress rows
      - app_profile_id: app profile used for every request. None uses the
            instance default
      - read_timeout: operation timeout for reads, in seconds
      - write_timeout: operation timeout for writes, in seconds
      - attempt_timeout: timeout for a single rpc attempt within an
            operation, in seconds. None uses the operation timeout
    """

    project: str = DEFAULT_PROJECT
    instance_id: str = DEFAULT_INSTANCE
    table_id: str = DEFAULT_TABLE
    app_profile_id: str | None = DEFAULT_APP_PROFILE
    read_timeout: float = DEFAULT_READ_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    attempt_timeout: float | None = None

    def __post_init__(self):
        for name in ("read_timeout", "write_timeout"):
            if _parse_timeout(name, getattr(self, name)) is None:
                raise ValueError(f"{name} is required")
        _parse_timeout("attempt_timeout", self.attempt_timeout)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Load settings from MEDIA_PROGRESS_* environment variables.

        Unset or empty variables keep their default.
        """
        environ = os.environ if environ is None else environ

        def get(name: str, default):
            value = environ.get(ENV_PREFIX + name)
            return default if value in (None, "") else value

        return cls(
            project=get("PROJECT", DEFAULT_PROJECT),
            instance_id=get("INSTANCE", DEFAULT_INSTANCE),
            table_id=get("TABLE", DEFAULT_TABLE),
            app_profile_id=get("APP_PROFILE", DEFAULT_APP_PROFILE),
            read_timeout=_parse_timeout(
                ENV_PREFIX + "READ_TIMEOUT", get("READ_TIMEOUT", DEFAULT_READ_TIMEOUT)
            ),
            write_timeout=_parse_timeout(
                ENV_PREFIX + "WRITE_TIMEOUT",
                get("WRITE_TIMEOUT", DEFAULT_WRITE_TIMEOUT),
            ),
            attempt_timeout=_parse_timeout(
                ENV_PREFIX + "ATTEMPT_TIMEOUT", get("ATTEMPT_TIMEOUT", None)
            ),
        )

    def replace(self, **overrides) -> Settings:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)
