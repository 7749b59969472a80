"""Logging setup helpers using Rich."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s:%(lineno)d:  %(message)s"
FILE_LOG_DATEFMT = "%d/%m %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None,
) -> None:
    """Configure logging to use Rich's console rendering, plus an optional file."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=False,
        show_level=True,
        show_time=True,
        show_path=False,
        markup=False,
    )
    handlers: list[logging.Handler] = [handler]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_LOG_DATEFMT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )


def log_file_name(source_file_name: str = "", now: Optional[datetime] = None) -> str:
    """Return ``ror <MM-DD HHMMSS> from <source>.log`` for an import run."""
    stamp = (now or datetime.now()).strftime("%m-%d %H%M%S")
    if source_file_name:
        return f"ror {stamp} from {Path(source_file_name).stem}.log"
    return f"ror {stamp} initialisation.log"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "ror_importer")
