"""Drive a ROR JSON dump through the buffers and into the ``ror`` tables."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncEngine

from .accumulators import DataBuffer, new_buffers
from .config import DEFAULT_BATCH_SIZE
from .errors import SourceFileError, StorageError
from .identifiers import extract_id_from
from .mappings.common import report_data_quality
from .models import RorRecord, decode_records

LOGGER = logging.getLogger("ror_importer.import")


class ImportStage(str, Enum):
    IDLE = "idle"
    STREAM_OPEN = "stream_open"
    ACCUMULATING = "accumulating"
    FLUSHING = "flushing"
    FINAL_FLUSH = "final_flush"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ImportResult:
    source: Optional[Path] = None
    records_found: int = 0
    records_processed: int = 0
    # Records whose rows reached every table; partial group commits are not counted.
    records_flushed: int = 0
    batches: int = 0
    warnings: int = 0
    rows_written: Counter = field(default_factory=Counter)
    stage: ImportStage = ImportStage.IDLE


def read_source(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise SourceFileError(path, "file does not exist") from exc
    except IsADirectoryError as exc:
        raise SourceFileError(path, "path is a directory") from exc
    except OSError as exc:
        raise SourceFileError(path, exc.strerror or str(exc)) from exc


async def load_records(path: Path) -> list[RorRecord]:
    """Read and decode the whole source file before anything is written."""
    data = await asyncio.to_thread(read_source, path)
    LOGGER.info("Read %s bytes from %s", len(data), path)
    records = decode_records(data)
    LOGGER.info("Parsed the data into %s ROR records", len(records))
    return records


async def flush_buffers(
    engine: AsyncEngine, buffers: Sequence[DataBuffer], atomic: bool = True
) -> Dict[str, int]:
    """Flush the buffers one after another.

    With ``atomic`` the three groups share one transaction; otherwise each
    group commits on its own and earlier groups stay written when a later one
    fails.
    """
    written: Dict[str, int] = {}
    try:
        if atomic:
            async with engine.begin() as conn:
                for buffer in buffers:
                    written.update(await buffer.flush(conn))
        else:
            for buffer in buffers:
                async with engine.begin() as conn:
                    written.update(await buffer.flush(conn))
    finally:
        # Groups after a failing one were never flushed; drop their rows too.
        for buffer in buffers:
            buffer.reset()
    return written


async def import_data(
    source_path: Path,
    engine: AsyncEngine,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_records: Optional[int] = None,
    atomic_batches: bool = True,
    console: Optional[Console] = None,
) -> ImportResult:
    """Read, decode and import every record of ``source_path``.

    The whole file is decoded before the first row is written, so I/O and
    decode failures leave the database untouched.
    """
    try:
        records = await load_records(source_path)
    except Exception:
        LOGGER.error("Import aborted during %s", ImportStage.STREAM_OPEN.value)
        raise
    return await import_records(
        records,
        engine,
        source=source_path,
        batch_size=batch_size,
        max_records=max_records,
        atomic_batches=atomic_batches,
        console=console,
    )


async def import_records(
    records: Sequence[RorRecord],
    engine: AsyncEngine,
    *,
    source: Optional[Path] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_records: Optional[int] = None,
    atomic_batches: bool = True,
    console: Optional[Console] = None,
) -> ImportResult:
    """Import decoded records into the ``ror`` tables.

    Rows are flushed every ``batch_size`` records and once more at the end.
    ``max_records`` limits the run to the first records and is meant for
    development runs only.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    if max_records is not None and max_records < 0:
        raise ValueError("max_records must not be negative")

    active_console = console or Console()
    result = ImportResult(
        source=source, records_found=len(records), stage=ImportStage.STREAM_OPEN
    )

    if max_records is not None and max_records < len(records):
        LOGGER.warning(
            "Record limit in force: importing %s of %s records",
            max_records,
            len(records),
        )
        records = records[:max_records]

    buffers = new_buffers()
    try:
        with active_console.status("Importing ROR records...") as status:
            for record in records:
                result.stage = ImportStage.ACCUMULATING
                ror_id = extract_id_from(record.id)
                result.warnings += report_data_quality(record, ror_id)
                for buffer in buffers:
                    buffer.add(record, ror_id)
                result.records_processed += 1

                if result.records_processed % batch_size == 0:
                    result.stage = ImportStage.FLUSHING
                    await _flush_batch(engine, buffers, atomic_batches, result)
                    LOGGER.info("%s records processed", result.records_flushed)
                    status.update(
                        f"Imported {result.records_flushed} of {result.records_found} records"
                    )

            result.stage = ImportStage.FINAL_FLUSH
            await _flush_batch(engine, buffers, atomic_batches, result)
    except StorageError as exc:
        exc.records_found = result.records_found
        exc.records_flushed = result.records_flushed
        LOGGER.error(
            "Import aborted during %s after %s of %s records were fully stored"
            " (rows of the failing batch committed by earlier groups are not counted)",
            result.stage.value,
            result.records_flushed,
            result.records_found,
        )
        result.stage = ImportStage.FAILED
        raise
    except Exception:
        LOGGER.error("Import aborted during %s", result.stage.value)
        result.stage = ImportStage.FAILED
        raise

    result.stage = ImportStage.DONE
    LOGGER.info("Total records processed: %s", result.records_flushed)
    return result


async def _flush_batch(
    engine: AsyncEngine,
    buffers: Sequence[DataBuffer],
    atomic: bool,
    result: ImportResult,
) -> None:
    pending = buffers[0].records
    written = await flush_buffers(engine, buffers, atomic=atomic)
    result.rows_written.update(written)
    result.records_flushed += pending
    if pending:
        result.batches += 1
