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

import contextlib
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence, TYPE_CHECKING

from google.api_core import exceptions as core_exceptions
from google.cloud.bigtable.data import BigtableDataClient
from google.cloud.bigtable.data import DeleteAllFromRow
from google.cloud.bigtable.data import ReadRowsQuery
from google.cloud.bigtable.data import RowMutationEntry
from google.cloud.bigtable.data.exceptions import FailedMutationEntryError
from google.cloud.bigtable.data.exceptions import MutationsExceptionGroup

from media_progress.config import Settings
from media_progress.exceptions import RowNotFoundError
from media_progress.filters import newer_event_filter
from media_progress.model import MediaProgress
from media_progress.row_key import build_mutations
from media_progress.row_key import decode_row
from media_progress.row_key import encode_row_key
from media_progress.row_key import encode_row_prefix
from media_progress.row_key import prefix_row_range

if TYPE_CHECKING:
    from google.cloud.bigtable.data import Table

LOGGER = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """
    Outcome of writing one record in a batch.

    `error` holds the cause reported by the backend for this row, or None
    when the row was written.
    """

    progress: MediaProgress
    row_key: bytes
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MediaProgressRepository:
    """
    Reads and writes MediaProgress records in a Bigtable table.

    Every call is bounded by its own operation timeout: read_timeout for
    reads, write_timeout for writes. Retries of transient errors within that
    timeout are handled by the data client. Conditional writes are never
    retried.

    Args:
      - table: an open data client Table
      - read_timeout: operation timeout for reads, in seconds
      - write_timeout: operation timeout for writes, in seconds
      - attempt_timeout: timeout of a single rpc attempt, in seconds. If
            None, each attempt may use the whole operation timeout
      - logger: destination for operation logs. Defaults to this module's
            logger
      - clock: returns the current unix time in seconds. Used by
            insert_conditional
    """

    def __init__(
        self,
        table: "Table",
        *,
        read_timeout: float = 1.0,
        write_timeout: float = 1.0,
        attempt_timeout: float | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._table = table
        self._read_timeout = read_timeout
        self._write_timeout = write_timeout
        self._attempt_timeout = attempt_timeout
        self._logger = logger if logger is not None else LOGGER
        self._clock = clock

    @property
    def table_id(self) -> str:
        return self._table.table_id

    def insert(self, progress: MediaProgress) -> None:
        """Write both progress cells in a single atomic row mutation."""
        row_key = encode_row_key(*progress.identity)
        try:
            self._table.mutate_row(
                row_key,
                build_mutations(progress),
                operation_timeout=self._write_timeout,
                attempt_timeout=self._attempt_timeout,
            )
        except Exception:
            self._logger.exception("error when insert on %s", self.table_id)
            raise
        self._logger.info(
            "successfully wrote row %s on %s", row_key.decode(), self.table_id
        )

    def insert_conditional(self, progress: MediaProgress) -> bool:
        """
        Write the record unless the row already holds a recent event.

        The write is skipped when the row has a data:event_at value at or
        after the current time (see filters.newer_event_filter).

        Returns:
          - True if the mutation was applied, False if it was skipped
        """
        row_key = encode_row_key(*progress.identity)
        predicate = newer_event_filter(self._clock())
        try:
            predicate_matched = self._table.check_and_mutate_row(
                row_key,
                predicate,
                true_case_mutations=None,
                false_case_mutations=build_mutations(progress),
                operation_timeout=self._write_timeout,
            )
        except Exception:
            self._logger.exception("error when insert on %s", self.table_id)
            raise
        if predicate_matched:
            self._logger.info(
                "mutation not applied row %s on %s", row_key.decode(), self.table_id
            )
        else:
            self._logger.info(
                "mutation applied row %s on %s", row_key.decode(), self.table_id
            )
        return not predicate_matched

    def insert_batch(self, progress_list: Sequence[MediaProgress]) -> list[WriteResult]:
        """
        Write many records in a single bulk request.

        Returns:
          - one WriteResult per input record, in input order. Rows rejected
            by the backend carry their error instead of raising
        Raises:
          - MutationsExceptionGroup: if a failure cannot be attributed to a
            single row
        """
        results = [
            WriteResult(progress, encode_row_key(*progress.identity))
            for progress in progress_list
        ]
        if not results:
            return results
        entries = [
            RowMutationEntry(result.row_key, build_mutations(result.progress))
            for result in results
        ]
        try:
            self._table.bulk_mutate_rows(
                entries,
                operation_timeout=self._write_timeout,
                attempt_timeout=self._attempt_timeout,
            )
        except MutationsExceptionGroup as group:
            for exc in group.exceptions:
                if not isinstance(exc, FailedMutationEntryError) or exc.index is None:
                    self._logger.exception("error when insert on %s", self.table_id)
                    raise
                results[exc.index].error = exc.__cause__ or exc
        except Exception:
            self._logger.exception("error when insert on %s", self.table_id)
            raise
        written = [r.row_key.decode() for r in results if r.ok]
        if written:
            self._logger.info(
                "successfully wrote row keys %s on %s", written, self.table_id
            )
        for result in results:
            if not result.ok:
                self._logger.error(
                    "failed to write row %s on %s: %r",
                    result.row_key.decode(),
                    self.table_id,
                    result.error,
                )
        return results

    def delete(self, user_id: str, data_type: str, title_id: str, media_id: str) -> None:
        """Delete every column and version of a record's row."""
        row_key = encode_row_key(user_id, data_type, title_id, media_id)
        try:
            self._table.mutate_row(
                row_key,
                DeleteAllFromRow(),
                operation_timeout=self._write_timeout,
                attempt_timeout=self._attempt_timeout,
            )
        except Exception:
            self._logger.exception("error when delete on %s", self.table_id)
            raise
        self._logger.info(
            "successfully deleted row %s on %s", row_key.decode(), self.table_id
        )

    def read_one(
        self, user_id: str, data_type: str, title_id: str, media_id: str
    ) -> MediaProgress:
        """
        Read a single record.

        Raises:
          - RowNotFoundError: if the row does not exist
          - CellDecodeError: if the stored cells cannot be decoded
        """
        row_key = encode_row_key(user_id, data_type, title_id, media_id)
        try:
            row = self._table.read_row(
                row_key,
                operation_timeout=self._read_timeout,
                attempt_timeout=self._attempt_timeout,
            )
        except core_exceptions.NotFound as e:
            raise RowNotFoundError(row_key, self.table_id) from e
        if row is None or len(row) == 0:
            raise RowNotFoundError(row_key, self.table_id)
        return decode_row(row)

    def iter_multiple(
        self, user_id: str, data_type: str, title_id: str, media_ids: Iterable[str]
    ) -> Iterator[MediaProgress]:
        """
        Lazily read the records of several media units of one title.

        Records are yielded in the order returned by the backend, which may
        differ from the order of media_ids. The first row that cannot be
        decoded raises CellDecodeError and ends the iteration.
        """
        row_keys = [
            encode_row_key(user_id, data_type, title_id, media_id)
            for media_id in media_ids
        ]
        if not row_keys:
            # an empty query would scan the whole table
            return iter(())
        return self._iter_query(ReadRowsQuery(row_keys=row_keys))

    def read_multiple(
        self, user_id: str, data_type: str, title_id: str, media_ids: Iterable[str]
    ) -> list[MediaProgress]:
        return list(self.iter_multiple(user_id, data_type, title_id, media_ids))

    def iter_by_partial_key(
        self, user_id: str, data_type: str, title_id: str
    ) -> Iterator[MediaProgress]:
        """
        Lazily read every record of a title with a row key prefix scan.

        The first row that cannot be decoded raises CellDecodeError and ends
        the iteration.
        """
        prefix = encode_row_prefix(user_id, data_type, title_id)
        return self._iter_query(ReadRowsQuery(row_ranges=[prefix_row_range(prefix)]))

    def read_by_partial_key(
        self, user_id: str, data_type: str, title_id: str
    ) -> list[MediaProgress]:
        return list(self.iter_by_partial_key(user_id, data_type, title_id))

    def _iter_query(self, query: ReadRowsQuery) -> Iterator[MediaProgress]:
        self._logger.debug("reading rows on %s", self.table_id)
        rows = self._table.read_rows_stream(
            query,
            operation_timeout=self._read_timeout,
            attempt_timeout=self._attempt_timeout,
        )
        for row in rows:
            yield decode_row(row)


@contextlib.contextmanager
def open_repository(
    settings: Settings,
    logger: logging.Logger | None = None,
    client: BigtableDataClient | None = None,
) -> Iterator[MediaProgressRepository]:
    """
    Open a repository on the table described by settings.

    The data client and table are closed on exit. When a client is passed
    in, it is left open for the caller to close.

    Example:
        with open_repository(Settings.from_env()) as repo:
            repo.read_one("user_1", "VIDEO", "title_1", "media_1")
    """
    with contextlib.ExitStack() as stack:
        if client is None:
            client = stack.enter_context(BigtableDataClient(project=settings.project))
        table = stack.enter_context(
            client.get_table(
                settings.instance_id,
                settings.table_id,
                app_profile_id=settings.app_profile_id,
            )
        )
        yield MediaProgressRepository(
            table,
            read_timeout=settings.read_timeout,
            write_timeout=settings.write_timeout,
            attempt_timeout=settings.attempt_timeout,
            logger=logger,
        )
