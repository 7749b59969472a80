from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .config import DatabaseConfig
from .errors import DatabaseUnavailableError

LOGGER = logging.getLogger("ror_importer.db")


class DatabaseSession:
    """Manage the SQLAlchemy async engine used for one import run."""

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: Optional[AsyncEngine] = None

    async def open(self) -> AsyncEngine:
        if self._engine is not None:
            return self._engine

        deadline = time.time() + self._config.connect_timeout
        attempts = 0
        while True:
            attempts += 1
            async_engine = create_async_engine(
                self._config.url, pool_size=self._config.pool_size
            )
            try:
                LOGGER.info("Creating SQLAlchemy engine (attempt %s)", attempts)
                async with async_engine.connect() as connection:
                    await connection.execute(text("SELECT 1"))
                self._engine = async_engine
                LOGGER.info("Connected to database %s", self._config.database)
                break
            except (OperationalError, OSError) as exc:
                await async_engine.dispose()
                if time.time() >= deadline:
                    raise DatabaseUnavailableError(
                        f"Database connection timed out after {attempts} attempts"
                    ) from exc
                LOGGER.warning("Database not ready yet (%s), retrying...", exc)
                await asyncio.sleep(min(2 * attempts, 10))

        return self._engine

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Engine not initialised; call open()")
        return self._engine

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None

    async def __aenter__(self) -> AsyncEngine:
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()
