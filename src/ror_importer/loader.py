"""Batch loader: one multi-row INSERT per table per flush."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Dict, Mapping, Tuple

from sqlalchemy import Table, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from .errors import StorageError

LOGGER = logging.getLogger("ror_importer.loader")


async def insert_rows(
    conn: AsyncConnection, table: Table, rows: Sequence[Mapping[str, Any]]
) -> int:
    """Insert ``rows`` into ``table`` with a single multi-row statement.

    Rows keep their buffered order. Nothing is executed for an empty batch.
    """
    if not rows:
        return 0
    try:
        await conn.execute(insert(table).values(list(rows)))
    except SQLAlchemyError as exc:
        reason = getattr(exc, "orig", None) or exc
        LOGGER.error("Insert of %s rows into %s failed: %s", len(rows), table.name, reason)
        raise StorageError(table.name, str(reason)) from exc
    LOGGER.debug("Inserted %s rows into %s", len(rows), table.name)
    return len(rows)


async def store_tables(
    conn: AsyncConnection,
    batches: Sequence[Tuple[Table, Sequence[Mapping[str, Any]]]],
) -> Dict[str, int]:
    """Write each table's buffered rows in the given order.

    The first failing table raises ``StorageError``; tables after it are not
    attempted.
    """
    written: Dict[str, int] = {}
    for table, rows in batches:
        written[table.name] = await insert_rows(conn, table, rows)
    return written
