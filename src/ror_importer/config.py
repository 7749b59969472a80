"""Configuration loading for the ROR importer.

Values come from the environment (optionally a ``.env`` file); command line
arguments, when given, take precedence over their environment counterparts.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .errors import ConfigError

DEFAULT_DB_NAME = "ror"
DEFAULT_BATCH_SIZE = 200
DEFAULT_DB_CONNECT_TIMEOUT = 60.0
DEFAULT_DB_POOL_SIZE = 5
TEST_RUN_VERSION = "v99"
TEST_RUN_DATE = "2030-01-01"

_COMPLIANT_FILE_NAME = re.compile(r"^v[0-9]+(\.[0-9]+){0,2}(-| )20[0-9]{2}-?[01][0-9]-?[0-3][0-9]")
_VERSION = re.compile(r"^v[0-9]+(\.[0-9]+){0,2}")
_DATE = re.compile(r"20[0-9]{2}-?[01][0-9]-?[0-3][0-9]")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _int(value: Optional[str], default: Optional[int]) -> Optional[int]:
    try:
        return int(value) if value else default
    except ValueError:
        return default


def _float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value else default
    except ValueError:
        return default


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return default


def is_compliant_file_name(name: str) -> bool:
    """True for names like ``v1.58 2024-12-11.json`` or ``v1.59-20250123-ror.json``."""
    return _COMPLIANT_FILE_NAME.match(name) is not None


def get_data_version(name: str) -> str:
    match = _VERSION.match(name)
    return match.group(0).strip() if match else ""


def get_data_date(name: str) -> str:
    """Return the ``YYYY-MM-DD`` date embedded in ``name``, or ``""``."""
    match = _DATE.search(name)
    if not match:
        return ""
    try:
        return datetime.strptime(match.group(0).replace("-", ""), "%Y%m%d").date().isoformat()
    except ValueError:
        return ""


def _valid_date(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date().isoformat()
    except ValueError:
        return ""


@dataclass(frozen=True)
class DatabaseConfig:
    url: str
    dsn: str
    database: str
    connect_timeout: float = DEFAULT_DB_CONNECT_TIMEOUT
    pool_size: int = DEFAULT_DB_POOL_SIZE

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        pg_dsn = os.getenv("PG_DSN")
        if not pg_dsn:
            db = os.getenv("POSTGRES_DB", DEFAULT_DB_NAME)
            user = os.getenv("POSTGRES_USER", "postgres")
            password = os.getenv("POSTGRES_PASSWORD", "postgres")
            host = os.getenv("POSTGRES_HOST", "localhost")
            port = os.getenv("POSTGRES_PORT", "5432")
            pg_dsn = f"postgresql://{user}:{password}@{host}:{port}/{db}"

        try:
            url = make_url(pg_dsn)
        except ArgumentError as exc:
            raise ConfigError(f"Invalid database DSN: {exc}") from exc

        return cls(
            # asyncpg for the import itself, plain libpq DSN for psycopg DDL runs.
            url=url.set(drivername="postgresql+asyncpg").render_as_string(hide_password=False),
            dsn=url.set(drivername="postgresql").render_as_string(hide_password=False),
            database=url.database or DEFAULT_DB_NAME,
            connect_timeout=_float(
                os.getenv("DATABASE_CONNECT_TIMEOUT"), DEFAULT_DB_CONNECT_TIMEOUT
            ),
            pool_size=max(1, _int(os.getenv("DB_POOL_SIZE"), DEFAULT_DB_POOL_SIZE)),
        )


@dataclass(frozen=True)
class CliArgs:
    """Raw command line values; ``None`` means "not given"."""

    data_folder: Optional[str] = None
    source_file: Optional[str] = None
    data_version: Optional[str] = None
    data_date: Optional[str] = None
    batch_size: Optional[int] = None
    max_records: Optional[int] = None
    import_ror: bool = False
    create_tables: bool = False
    summarise: bool = False
    keep_tables: bool = False
    test_run: bool = False


@dataclass(frozen=True)
class Flags:
    import_ror: bool
    create_tables: bool
    summarise: bool
    keep_tables: bool
    test_run: bool


@dataclass(frozen=True)
class Settings:
    database: DatabaseConfig
    flags: Flags
    data_folder: Optional[Path]
    log_folder: Optional[Path]
    source_file_name: str
    data_version: str
    data_date: str
    log_level: str
    batch_size: int
    max_records: Optional[int]
    atomic_batches: bool

    @property
    def source_path(self) -> Path:
        if self.data_folder is None or not self.source_file_name:
            raise ConfigError("No source file configured")
        return self.data_folder / self.source_file_name

    @classmethod
    def from_env(cls, cli: Optional[CliArgs] = None) -> "Settings":
        load_dotenv()
        cli = cli or CliArgs()

        any_action = cli.import_ror or cli.create_tables or cli.summarise
        flags = Flags(
            import_ror=cli.import_ror or not any_action,
            create_tables=cli.create_tables,
            summarise=cli.summarise,
            keep_tables=cli.keep_tables,
            test_run=cli.test_run,
        )

        folder_value = cli.data_folder or os.getenv("DATA_FOLDER_PATH") or ""
        data_folder = Path(folder_value) if folder_value else None
        if flags.import_ror and (data_folder is None or not data_folder.is_dir()):
            raise ConfigError(
                "Required data folder does not exist or is not accessible: "
                f"{folder_value or '(not set)'}"
            )

        log_value = os.getenv("LOG_FOLDER_PATH")
        log_folder = Path(log_value) if log_value else data_folder

        source_file_name = cli.source_file or os.getenv("SRC_FILE_NAME") or ""
        if flags.import_ror and not source_file_name:
            raise ConfigError(
                "Source file name not provided in either command line or environment"
            )

        data_version, data_date = _resolve_version_and_date(cli, source_file_name)
        if flags.import_ror and not data_version:
            raise ConfigError("Data version not provided in either command line or environment")
        if flags.import_ror and not data_date:
            raise ConfigError("Data date not provided in either command line or environment")

        batch_size = (
            cli.batch_size
            if cli.batch_size is not None
            else _int(os.getenv("ROR_BATCH_SIZE"), DEFAULT_BATCH_SIZE)
        )
        if batch_size < 1:
            raise ConfigError(f"Batch size must be at least 1, got {batch_size}")
        max_records = (
            cli.max_records
            if cli.max_records is not None
            else _int(os.getenv("ROR_MAX_RECORDS"), None)
        )
        if max_records is not None and max_records < 0:
            raise ConfigError(f"Record limit must not be negative, got {max_records}")

        return cls(
            database=DatabaseConfig.from_env(),
            flags=flags,
            data_folder=data_folder,
            log_folder=log_folder,
            source_file_name=source_file_name,
            data_version=data_version,
            data_date=data_date,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            batch_size=batch_size,
            max_records=max_records,
            atomic_batches=_bool(os.getenv("ROR_ATOMIC_BATCHES"), True),
        )


def _resolve_version_and_date(cli: CliArgs, source_file_name: str) -> tuple[str, str]:
    if cli.test_run:
        return TEST_RUN_VERSION, TEST_RUN_DATE

    if is_compliant_file_name(source_file_name):
        version = get_data_version(source_file_name)
        date = get_data_date(source_file_name)
        if version and date:
            return version, date

    version = cli.data_version or os.getenv("DATA_VERSION") or ""
    date = _valid_date(cli.data_date) or _valid_date(os.getenv("DATA_DATE"))
    return version.strip(), date
