"""Shared fixtures for the ror_importer test suite.

Storage tests run against a SQLite file through aiosqlite; the ``ror``
schema is translated away so the same Table objects work unchanged.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable

import pytest
from rich.console import Console
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from ror_importer.tables import metadata

FULL_RECORD: dict[str, Any] = {
    "id": "https://ror.org/0abc123xy",
    "names": [
        {"value": "Example University", "types": ["ror_display", "label"], "lang": "en"},
        {"value": "Universidad de Ejemplo", "types": ["label"], "lang": "es"},
        {"value": "EU", "types": ["acronym"], "lang": None},
        {"value": "Example Uni", "types": ["alias"]},
    ],
    "status": "active",
    "established": 1891,
    "locations": [
        {
            "geonames_id": 5368361,
            "geonames_details": {
                "name": "Los Angeles",
                "lat": 34.05223,
                "lng": -118.24368,
                "country_code": "US",
                "country_name": "United States",
                "country_subdivision_code": "CA",
            },
        }
    ],
    "external_ids": [
        {"type": "isni", "all": ["0000 0001 2153 2602"], "preferred": "0000 0001 2153 2602"},
        {"type": "grid", "all": ["grid.1234.5"], "preferred": "grid.1234.5"},
        {"type": "wikidata", "all": ["Q123", "Q456"], "preferred": None},
        {"type": "fundref", "all": ["100000001"], "preferred": "100000002"},
    ],
    "links": [
        {"type": "website", "value": "https://example.edu"},
        {"type": "wikipedia", "value": "https://en.wikipedia.org/wiki/Example_University"},
    ],
    "types": ["education", "funder"],
    "relationships": [
        {"type": "parent", "id": "https://ror.org/05parent1", "label": "Example System"},
        {"type": "child", "id": "https://ror.org/05child01", "label": "Example Lab"},
        {"type": "related", "id": "https://ror.org/05relat01", "label": "Example Hospital"},
    ],
    "domains": ["example.edu"],
    "admin": {
        "created": {"date": "2018-11-14", "schema_version": "1.0"},
        "last_modified": {"date": "2024-12-11", "schema_version": "2.1"},
    },
}


def _make_record(suffix: str = "0abc123xy", **overrides: Any) -> dict[str, Any]:
    record = copy.deepcopy(FULL_RECORD)
    record["id"] = f"https://ror.org/{suffix}"
    record.update(overrides)
    return record


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """Return a factory for full ROR records with a chosen identifier suffix."""
    return _make_record


@pytest.fixture
def full_record() -> dict[str, Any]:
    return _make_record()


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[..., Path]:
    """Write records (or raw text) to a JSON file and return its path."""

    def _write(content: Any, name: str = "v1.58 2024-12-11.json") -> Path:
        path = tmp_path / name
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def quiet_console() -> Console:
    return Console(quiet=True)


@pytest.fixture
def make_engine(tmp_path: Path) -> Callable[[], Any]:
    """Return a coroutine factory for a SQLite engine with the ror tables.

    Call it inside the test's event loop and dispose the engine there.
    """

    async def _make() -> AsyncEngine:
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'ror.db'}",
            execution_options={"schema_translate_map": {"ror": None}},
        )
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        return engine

    return _make


@pytest.fixture
def statement_log() -> Callable[[AsyncEngine], list]:
    """Attach a recorder of (statement, parameters) pairs to an engine."""

    def _attach(engine: AsyncEngine) -> list:
        executed: list = []

        @event.listens_for(engine.sync_engine, "before_cursor_execute")
        def _record(conn, cursor, statement, parameters, context, executemany):
            executed.append((statement, parameters))

        return executed

    return _attach

