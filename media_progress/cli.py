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

import argparse
import time
from typing import Callable, IO, Sequence

from google.api_core import exceptions as core_exceptions
from google.cloud.bigtable.data.exceptions import MutationsExceptionGroup

from media_progress import examples
from media_progress.config import Settings
from media_progress.exceptions import MediaProgressError
from media_progress.logs import LOG_FORMATS
from media_progress.logs import configure_logging
from media_progress.logs import shutdown_logging
from media_progress.repository import MediaProgressRepository
from media_progress.repository import open_repository

INSERT_EXAMPLES = ("one", "conditional", "batch")
READ_EXAMPLES = ("one", "multiple", "partialKey")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="media-progress", description="Bigtable media progress examples"
    )
    parser.add_argument("--project", help="Google Cloud project id")
    parser.add_argument("--instance", dest="instance_id", help="Bigtable instance id")
    parser.add_argument("--table", dest="table_id", help="table holding progress rows")
    parser.add_argument("--app-profile", dest="app_profile_id", help="app profile id")
    parser.add_argument("--read-timeout", type=float, help="read timeout in seconds")
    parser.add_argument("--write-timeout", type=float, help="write timeout in seconds")
    parser.add_argument("--log-level", default="INFO", help="minimum log level")
    parser.add_argument("--log-format", default="json", choices=LOG_FORMATS)

    commands = parser.add_subparsers(dest="command", required=True)
    insert = commands.add_parser(
        "insert", help="Insert examples", description="Example to insert items in Bigtable"
    )
    insert.add_argument("example", choices=INSERT_EXAMPLES)
    read = commands.add_parser(
        "read", help="Read examples", description="Example to read items from Bigtable"
    )
    read.add_argument("example", choices=READ_EXAMPLES)
    commands.add_parser(
        "delete", help="Delete examples", description="Example to delete items from Bigtable"
    )
    return parser


def run_example(
    command: str,
    example: str | None,
    repo: MediaProgressRepository,
    now: int,
    out: IO[str] | None = None,
) -> bool:
    """
    Run one example scenario.

    Returns:
      - False if a batch insert reported failed rows, True otherwise
    """
    if command == "insert":
        if example == "one":
            examples.insert_one_example(repo, now)
        elif example == "conditional":
            examples.insert_conditional_example(repo, now)
        elif example == "batch":
            results = examples.insert_batch_example(repo, now)
            return all(result.ok for result in results)
        else:
            raise ValueError(f"invalid option {example!r}")
    elif command == "read":
        if example == "one":
            examples.read_one_example(repo, out)
        elif example == "multiple":
            examples.read_multiple_example(repo, out)
        elif example == "partialKey":
            examples.read_partial_key_example(repo, out)
        else:
            raise ValueError(f"invalid option {example!r}")
    elif command == "delete":
        examples.delete_example(repo)
    else:
        raise ValueError(f"invalid command {command!r}")
    return True


def main(
    argv: Sequence[str] | None = None,
    *,
    repository_factory=open_repository,
    clock: Callable[[], float] = time.time,
    out: IO[str] | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = Settings.from_env().replace(
            project=args.project,
            instance_id=args.instance_id,
            table_id=args.table_id,
            app_profile_id=args.app_profile_id,
            read_timeout=args.read_timeout,
            write_timeout=args.write_timeout,
        )
    except ValueError as e:
        parser.error(str(e))
    try:
        logger = configure_logging(args.log_level, args.log_format)
    except ValueError as e:
        parser.error(str(e))

    try:
        with repository_factory(settings, logger=logger) as repo:
            ok = run_example(
                args.command, getattr(args, "example", None), repo, int(clock()), out
            )
    except (
        MediaProgressError,
        MutationsExceptionGroup,
        core_exceptions.GoogleAPICallError,
    ) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    finally:
        shutdown_logging(logger)
    return 0 if ok else 1
