"""Exception hierarchy for the ROR importer."""

from __future__ import annotations

from typing import Optional


class RorImportError(Exception):
    """Base exception for ROR importer failures."""


class ConfigError(RorImportError):
    """Raised when run parameters cannot be resolved."""


class SourceFileError(RorImportError):
    """Raised when the source file is missing or unreadable."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Cannot read source file {path}: {reason}")
        self.path = path
        self.reason = reason


class DecodeError(RorImportError):
    """Raised when the source JSON cannot be decoded into ROR records."""

    def __init__(
        self, message: str, index: Optional[int] = None, path: Optional[str] = None
    ) -> None:
        location = []
        if index is not None:
            location.append(f"record {index}")
        if path:
            location.append(f"field '{path}'")
        prefix = f"{', '.join(location)}: " if location else ""
        super().__init__(f"{prefix}{message}")
        self.message = message
        self.index = index
        self.path = path


class StorageError(RorImportError):
    """Raised when a batch insert fails."""

    def __init__(self, table: str, reason: str) -> None:
        super().__init__(f"Batch insert into {table} failed: {reason}")
        self.table = table
        self.reason = reason
        # Filled in by the importer before the error leaves the run.
        self.records_found: Optional[int] = None
        self.records_flushed: Optional[int] = None


class DatabaseUnavailableError(RorImportError):
    """Raised when the database cannot be reached before the connect timeout."""
