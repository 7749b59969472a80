"""Post-import row counts and admin counter verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from .tables import ADMIN_COUNTERS, ALL_TABLES, TABLES_BY_NAME, admin_data

LOGGER = logging.getLogger("ror_importer.summary")

MAX_REPORTED_MISMATCHES = 20


@dataclass(frozen=True)
class CounterMismatch:
    ror_id: str
    counter: str
    recorded: int
    actual: int


async def summarise_import(conn: AsyncConnection) -> Dict[str, int]:
    """Count the rows of every ``ror`` table and log the totals."""
    counts: Dict[str, int] = {}
    for table in ALL_TABLES:
        result = await conn.execute(select(func.count()).select_from(table))
        counts[table.name] = result.scalar_one()

    LOGGER.info("************************************")
    LOGGER.info("Total record numbers for each table:")
    LOGGER.info("************************************")
    for name, count in counts.items():
        LOGGER.info("Total records in ror.%s: %s", name, count)
    LOGGER.info("************************************")
    return counts


async def verify_admin_counters(conn: AsyncConnection) -> List[CounterMismatch]:
    """Compare every admin_data counter with the rows in its detail table."""
    counter_columns = [admin_data.c[name] for name in ADMIN_COUNTERS]
    result = await conn.execute(select(admin_data.c.id, *counter_columns))
    recorded = {row.id: row._mapping for row in result}

    mismatches: List[CounterMismatch] = []
    for counter, (table_name, column, value) in ADMIN_COUNTERS.items():
        table = TABLES_BY_NAME[table_name]
        stmt = select(table.c.id, func.count()).group_by(table.c.id)
        if column is not None:
            condition = (
                table.c[column].is_not(None) if value is None else table.c[column] == value
            )
            stmt = stmt.where(condition)
        actual = {ror_id: count for ror_id, count in (await conn.execute(stmt)).all()}

        for ror_id, counters in recorded.items():
            found = actual.get(ror_id, 0)
            if counters[counter] != found:
                mismatches.append(
                    CounterMismatch(ror_id, counter, counters[counter], found)
                )

    for mismatch in mismatches[:MAX_REPORTED_MISMATCHES]:
        LOGGER.warning(
            "Counter %s for %s is %s but %s rows were stored",
            mismatch.counter,
            mismatch.ror_id,
            mismatch.recorded,
            mismatch.actual,
        )
    if len(mismatches) > MAX_REPORTED_MISMATCHES:
        LOGGER.warning("... and %s further counter mismatches", len(mismatches) - MAX_REPORTED_MISMATCHES)
    if not mismatches:
        LOGGER.info("Admin counters match the stored detail rows")
    return mismatches
