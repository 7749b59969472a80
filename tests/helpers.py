"""Plain helpers shared by the storage tests."""

from __future__ import annotations

import re

from sqlalchemy import func, literal_column, select
from sqlalchemy.ext.asyncio import AsyncEngine

from ror_importer.tables import TABLES_BY_NAME


def inserts_into(executed: list, table_name: str) -> list:
    """Return the recorded INSERT statements that target ``table_name``."""
    # SQLite may qualify the table with its "main" schema.
    pattern = re.compile(rf"INSERT INTO (?:\w+\.)?{re.escape(table_name)} ")
    return [
        (stmt, params)
        for stmt, params in executed
        if pattern.match(stmt.replace('"', ""))
    ]


async def count_rows(engine: AsyncEngine, table_name: str) -> int:
    async with engine.connect() as conn:
        result = await conn.execute(
            select(func.count()).select_from(TABLES_BY_NAME[table_name])
        )
        return result.scalar_one()


async def fetch_rows(engine: AsyncEngine, table_name: str, *columns: str) -> list:
    """Return rows of ``table_name`` in insertion order."""
    table = TABLES_BY_NAME[table_name]
    selected = [table.c[name] for name in columns] or [table]
    async with engine.connect() as conn:
        result = await conn.execute(
            select(*selected).order_by(literal_column("rowid"))
        )
        return [tuple(row) for row in result]

# Environment variables read by the configuration layer.
ENV_VARS = (
    "PG_DSN",
    "POSTGRES_DB",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "DATABASE_CONNECT_TIMEOUT",
    "DB_POOL_SIZE",
    "DATA_FOLDER_PATH",
    "LOG_FOLDER_PATH",
    "SRC_FILE_NAME",
    "DATA_VERSION",
    "DATA_DATE",
    "LOG_LEVEL",
    "ROR_BATCH_SIZE",
    "ROR_MAX_RECORDS",
    "ROR_ATOMIC_BATCHES",
)
