"""Load ROR (Research Organization Registry) JSON dumps into PostgreSQL."""

from .errors import (ConfigError, DatabaseUnavailableError, DecodeError,
                     RorImportError, SourceFileError, StorageError)
from .identifiers import extract_id_from
from .importer import ImportResult, ImportStage, import_data, import_records
from .models import RorRecord, decode_records

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DatabaseUnavailableError",
    "DecodeError",
    "ImportResult",
    "ImportStage",
    "RorImportError",
    "RorRecord",
    "SourceFileError",
    "StorageError",
    "decode_records",
    "extract_id_from",
    "import_data",
    "import_records",
]
