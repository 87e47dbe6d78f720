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

import datetime
import json
import logging
import sys
from typing import IO

LOGGER_NAME = "media_progress"

LOG_FORMATS = ("json", "text")

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Formats each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["error"] = repr(record.exc_info[1])
        return json.dumps(entry)


def configure_logging(
    level: int | str = logging.INFO,
    fmt: str = "json",
    stream: IO[str] | None = None,
) -> logging.Logger:
    """
    Set up the media_progress logger with a single stream handler.

    Returns the configured logger, to be passed to the components that log.
    Call shutdown_logging when done.

    Args:
      - level: minimum level emitted
      - fmt: "json" for one JSON object per line, "text" for plain text
      - stream: destination stream. Defaults to stdout
    """
    if fmt not in LOG_FORMATS:
        raise ValueError(f"fmt must be one of {LOG_FORMATS}, got {fmt!r}")
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    shutdown_logging(logger)
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def shutdown_logging(logger: logging.Logger) -> None:
    """Flush and detach every handler attached to logger."""
    for handler in list(logger.handlers):
        handler.flush()
        logger.removeHandler(handler)
        handler.close()
