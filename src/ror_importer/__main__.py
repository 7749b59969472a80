from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

import psycopg
from rich.console import Console

from .config import CliArgs, Settings
from .db_connector import DatabaseSession
from .errors import (ConfigError, DatabaseUnavailableError, DecodeError,
                     SourceFileError, StorageError)
from .importer import import_records, load_records
from .logging_utils import get_logger, log_file_name, setup_logging
from .schema_init import create_ror_tables, tables_exist
from .summary import summarise_import, verify_admin_counters

console = Console(stderr=True)
LOGGER = get_logger("ror_importer.cli")

EXIT_CONFIG = 1
EXIT_SOURCE = 2
EXIT_DECODE = 3
EXIT_STORAGE = 4
EXIT_OTHER = 5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ror-importer",
        description="Load a ROR v2 JSON dump into the ror schema of a PostgreSQL database",
    )
    parser.add_argument("-f", "--folder", dest="data_folder", help="Folder holding the source file")
    parser.add_argument("-s", "--source", dest="source_file", help="Source JSON file name")
    parser.add_argument("-v", "--data-version", help="Data version, e.g. v1.58")
    parser.add_argument("-d", "--data-date", help="Data date as YYYY-MM-DD")
    parser.add_argument("-r", "--import", dest="import_ror", action="store_true",
                        help="Import the source file (default when no other action is given)")
    parser.add_argument("-c", "--create-tables", action="store_true",
                        help="(Re)create the ror tables")
    parser.add_argument("-x", "--summary", dest="summarise", action="store_true",
                        help="Report table row counts and check admin counters")
    parser.add_argument("-k", "--keep-tables", action="store_true",
                        help="Import into the existing ror tables instead of recreating them")
    parser.add_argument("-t", "--test-run", action="store_true",
                        help="Use test version v99 and date 2030-01-01")
    parser.add_argument("--batch-size", type=int, help="Records per flush (default 200)")
    parser.add_argument("--max-records", type=int,
                        help="Stop after this many records (development only)")
    return parser


def parse_cli(argv: Optional[Sequence[str]] = None) -> CliArgs:
    args = build_parser().parse_args(argv)
    return CliArgs(
        data_folder=args.data_folder,
        source_file=args.source_file,
        data_version=args.data_version,
        data_date=args.data_date,
        batch_size=args.batch_size,
        max_records=args.max_records,
        import_ror=args.import_ror,
        create_tables=args.create_tables,
        summarise=args.summarise,
        keep_tables=args.keep_tables,
        test_run=args.test_run,
    )


def log_startup_params(settings: Settings) -> None:
    LOGGER.info("PROGRAM START")
    LOGGER.info("************************************")
    LOGGER.info("data_folder: %s", settings.data_folder)
    LOGGER.info("log_folder: %s", settings.log_folder)
    LOGGER.info("source_file_name: %s", settings.source_file_name)
    LOGGER.info("data_version: %s", settings.data_version)
    LOGGER.info("data_date: %s", settings.data_date)
    LOGGER.info("database: %s", settings.database.database)
    LOGGER.info("batch_size: %s", settings.batch_size)
    LOGGER.info("max_records: %s", settings.max_records)
    LOGGER.info("atomic_batches: %s", settings.atomic_batches)
    LOGGER.info("import_ror: %s", settings.flags.import_ror)
    LOGGER.info("create_tables: %s", settings.flags.create_tables)
    LOGGER.info("summarise: %s", settings.flags.summarise)
    LOGGER.info("************************************")


async def run(settings: Settings) -> None:
    flags = settings.flags
    records = None
    if flags.import_ror:
        # Decode before touching the database so a bad file never drops tables.
        records = await load_records(settings.source_path)

    recreate = flags.create_tables or (flags.import_ror and not flags.keep_tables)
    if recreate:
        await asyncio.to_thread(create_ror_tables, settings.database.dsn)
    elif not await asyncio.to_thread(tables_exist, settings.database.dsn):
        raise ConfigError("The ror tables do not exist; run with --create-tables first")

    if records is None and not flags.summarise:
        return

    async with DatabaseSession(settings.database) as engine:
        if records is not None:
            result = await import_records(
                records,
                engine,
                source=settings.source_path,
                batch_size=settings.batch_size,
                max_records=settings.max_records,
                atomic_batches=settings.atomic_batches,
                console=console,
            )
            LOGGER.info(
                "Imported ROR %s (%s): %s of %s records in %s batches, %s data quality warnings",
                settings.data_version,
                settings.data_date,
                result.records_flushed,
                result.records_found,
                result.batches,
                result.warnings,
            )
        async with engine.connect() as conn:
            await summarise_import(conn)
            await verify_admin_counters(conn)


def main(argv: Optional[Sequence[str]] = None) -> None:
    setup_logging(console=console)
    try:
        settings = Settings.from_env(parse_cli(argv))
    except ConfigError as exc:
        LOGGER.error("Configuration error: %s", exc)
        sys.exit(EXIT_CONFIG)

    log_file = None
    if settings.log_folder is not None:
        log_file = settings.log_folder / log_file_name(settings.source_file_name)
    setup_logging(settings.log_level, log_file=log_file, console=console)
    log_startup_params(settings)

    try:
        asyncio.run(run(settings))
    except ConfigError as exc:
        LOGGER.error("Configuration error: %s", exc)
        sys.exit(EXIT_CONFIG)
    except SourceFileError as exc:
        LOGGER.error("Source file error: %s", exc)
        sys.exit(EXIT_SOURCE)
    except DecodeError as exc:
        LOGGER.error("Source data could not be decoded: %s", exc)
        sys.exit(EXIT_DECODE)
    except StorageError as exc:
        LOGGER.error("Storage error: %s", exc)
        LOGGER.error(
            "%s of %s records had been stored before the failure",
            exc.records_flushed,
            exc.records_found,
        )
        sys.exit(EXIT_STORAGE)
    except (DatabaseUnavailableError, psycopg.Error) as exc:
        LOGGER.error("Database error: %s", exc)
        sys.exit(EXIT_STORAGE)
    except Exception:  # pragma: no cover - guard for CLI usage
        LOGGER.exception("Import failed")
        sys.exit(EXIT_OTHER)


if __name__ == "__main__":
    main()
