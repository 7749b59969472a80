"""In-memory row buffers for the three groups of ``ror`` tables.

Each buffer owns the rows of a fixed set of tables. ``add`` only appends;
``flush`` writes every owned table through the batch loader and always
empties the buffer afterwards, whether or not the write succeeded, so a
batch can never be inserted twice.
"""

from __future__ import annotations

from typing import ClassVar, Dict, Tuple

from sqlalchemy import Table
from sqlalchemy.ext.asyncio import AsyncConnection

from . import tables
from .loader import store_tables
from .mappings.common import Rows
from .mappings.registry import BUILDERS_BY_TABLE
from .models import RorRecord


class DataBuffer:
    TABLES: ClassVar[Tuple[Table, ...]] = ()

    def __init__(self) -> None:
        self._rows: Dict[str, Rows] = {}
        self.records = 0
        self.reset()

    def reset(self) -> None:
        self._rows = {table.name: [] for table in self.TABLES}
        self.records = 0

    def add(self, record: RorRecord, ror_id: str) -> None:
        for table in self.TABLES:
            self._rows[table.name].extend(BUILDERS_BY_TABLE[table.name](record, ror_id))
        self.records += 1

    def rows(self, table_name: str) -> Rows:
        return self._rows[table_name]

    def row_counts(self) -> Dict[str, int]:
        return {name: len(rows) for name, rows in self._rows.items()}

    async def flush(self, conn: AsyncConnection) -> Dict[str, int]:
        batches = [(table, self._rows[table.name]) for table in self.TABLES]
        try:
            return await store_tables(conn, batches)
        finally:
            self.reset()


class CoreDataBuffer(DataBuffer):
    """One core_data and one admin_data row per record."""

    TABLES = (tables.core_data, tables.admin_data)


class RequiredDataBuffer(DataBuffer):
    """Names and organisation types, present on practically every record."""

    TABLES = (tables.names, tables.org_type)


class NonRequiredDataBuffer(DataBuffer):
    """Optional repeating data: locations, external ids, links, relationships, domains."""

    TABLES = (
        tables.locations,
        tables.external_ids,
        tables.links,
        tables.relationships,
        tables.domains,
    )


def new_buffers() -> Tuple[CoreDataBuffer, RequiredDataBuffer, NonRequiredDataBuffer]:
    return CoreDataBuffer(), RequiredDataBuffer(), NonRequiredDataBuffer()
