"""
Utilities to (re)create the ``ror`` import tables in PostgreSQL.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import psycopg

DEFAULT_SCHEMA_PATH = Path(__file__).with_name("create_ror_tables.sql")
SENTINEL_TABLE = "ror.core_data"

LOGGER = logging.getLogger("ror_importer.schema")


def tables_exist(dsn: str, table: str = SENTINEL_TABLE) -> bool:
    """Return True if the sentinel table already exists."""
    with psycopg.connect(dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT to_regclass(%s)", (table,))
            return cur.fetchone()[0] is not None


def create_ror_tables(dsn: str, sql_path: Optional[Path] = None) -> None:
    """
    Execute the table creation script against the given database.

    The script drops and recreates every ``ror`` table, so any rows from a
    previous import are discarded.
    """
    path = sql_path or DEFAULT_SCHEMA_PATH
    ddl = path.read_text(encoding="utf-8")

    with psycopg.connect(dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            cur.execute(ddl)
    LOGGER.info("Tables created for ror schema from %s", path.name)
