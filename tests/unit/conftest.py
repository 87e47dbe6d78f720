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
Fixtures for unit tests.

FakeTable stands in for a data client Table, keeping rows in memory and
returning real Row and Cell objects.
"""
from __future__ import annotations

import re

import pytest

from google.cloud.bigtable.data import DeleteAllFromRow
from google.cloud.bigtable.data import SetCell
from google.cloud.bigtable.data.exceptions import FailedMutationEntryError
from google.cloud.bigtable.data.exceptions import MutationsExceptionGroup
from google.cloud.bigtable.data.row import Cell
from google.cloud.bigtable.data.row import Row


def make_row(row_key, cells):
    """
    Build a Row from {(family, qualifier): value or [values newest first]}.
    """
    if isinstance(row_key, str):
        row_key = row_key.encode()
    cell_list = []
    for (family, qualifier), values in sorted(cells.items()):
        if isinstance(qualifier, str):
            qualifier = qualifier.encode()
        if not isinstance(values, list):
            values = [values]
        for idx, value in enumerate(values):
            cell_list.append(Cell(value, row_key, family, qualifier, len(values) - idx))
    return Row(row_key, cell_list)


class FakeTable:
    def __init__(self, table_id="media_progress"):
        self.table_id = table_id
        # row_key -> {(family, qualifier): {timestamp_micros: value}}
        self.rows = {}
        self.calls = []
        # rows rejected by bulk_mutate_rows: row_key -> cause
        self.bulk_failures = {}

    def _apply(self, row_key, mutation):
        if isinstance(mutation, DeleteAllFromRow):
            self.rows.pop(row_key, None)
        elif isinstance(mutation, SetCell):
            column = (mutation.family, mutation.qualifier)
            versions = self.rows.setdefault(row_key, {}).setdefault(column, {})
            versions[mutation.timestamp_micros] = mutation.new_value
        else:
            raise NotImplementedError(type(mutation))

    def _to_row(self, row_key):
        columns = self.rows.get(row_key)
        if not columns:
            return None
        cells = []
        for (family, qualifier), versions in sorted(columns.items()):
            for timestamp in sorted(versions, reverse=True):
                cells.append(
                    Cell(versions[timestamp], row_key, family, qualifier, timestamp)
                )
        return Row(row_key, cells)

    def _matches(self, row_key, predicate):
        family_filter, qualifier_filter, value_filter = predicate.filters
        row = self._to_row(row_key)
        if row is None:
            return False
        for cell in row:
            if not re.fullmatch(family_filter.regex, cell.family.encode()):
                continue
            if not re.fullmatch(qualifier_filter.regex, cell.qualifier):
                continue
            above_start = (
                cell.value >= value_filter.start_value
                if value_filter.inclusive_start
                else cell.value > value_filter.start_value
            )
            below_end = (
                cell.value <= value_filter.end_value
                if value_filter.inclusive_end
                else cell.value < value_filter.end_value
            )
            if above_start and below_end:
                return True
        return False

    def mutate_row(self, row_key, mutations, **kwargs):
        self.calls.append(("mutate_row", row_key, kwargs))
        if not isinstance(mutations, list):
            mutations = [mutations]
        for mutation in mutations:
            self._apply(row_key, mutation)

    def check_and_mutate_row(
        self, row_key, predicate, *, true_case_mutations=None, false_case_mutations=None, **kwargs
    ):
        self.calls.append(("check_and_mutate_row", row_key, kwargs))
        matched = self._matches(row_key, predicate)
        mutations = true_case_mutations if matched else false_case_mutations
        for mutation in mutations or []:
            self._apply(row_key, mutation)
        return matched

    def bulk_mutate_rows(self, entries, **kwargs):
        self.calls.append(("bulk_mutate_rows", [e.row_key for e in entries], kwargs))
        errors = []
        for idx, entry in enumerate(entries):
            cause = self.bulk_failures.get(entry.row_key)
            if cause is not None:
                error = FailedMutationEntryError(idx, entry, cause)
                error.__cause__ = cause
                errors.append(error)
                continue
            for mutation in entry.mutations:
                self._apply(entry.row_key, mutation)
        if errors:
            raise MutationsExceptionGroup(errors, len(entries))

    def read_row(self, row_key, **kwargs):
        self.calls.append(("read_row", row_key, kwargs))
        return self._to_row(row_key)

    def _in_range(self, row_key, row_range):
        if row_range.start_key is not None:
            if row_range.start_is_inclusive and row_key < row_range.start_key:
                return False
            if not row_range.start_is_inclusive and row_key <= row_range.start_key:
                return False
        if row_range.end_key is not None:
            if row_range.end_is_inclusive and row_key > row_range.end_key:
                return False
            if not row_range.end_is_inclusive and row_key >= row_range.end_key:
                return False
        return True

    def read_rows_stream(self, query, **kwargs):
        self.calls.append(("read_rows_stream", query, kwargs))
        keys = set(query.row_keys)
        for row_range in query.row_ranges:
            keys.update(k for k in self.rows if self._in_range(k, row_range))
        for row_key in sorted(keys):
            row = self._to_row(row_key)
            if row is not None:
                yield row


@pytest.fixture
def fake_table():
    return FakeTable()


@pytest.fixture
def repository(fake_table):
    from media_progress.repository import MediaProgressRepository

    return MediaProgressRepository(fake_table, clock=lambda: 1700000000.5)


@pytest.fixture
def row_factory():
    return make_row
