"""Structured logging configuration using structlog."""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
from structlog.types import Processor

from .settings import Settings

_SIZE_UNITS = {"": 1, "B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}
_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([KMG]?B)?\s*$", re.IGNORECASE)


def setup_logging(settings: Settings) -> None:
    """
    Route structlog through the standard library to stderr and, optionally, a file.

    Stdout is left to command output. The structured format renders JSON
    lines; the plain format renders for a terminal.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stderr)]
    if settings.log_file_enabled:
        handlers.append(
            _rotating_file_handler(
                settings.log_file_path, settings.log_max_file_size, settings.log_backup_count
            )
        )
    logging.basicConfig(format="%(message)s", level=log_level, handlers=handlers, force=True)

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.format_exc_info,
    ]
    if settings.log_format == "structured":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def _rotating_file_handler(
    file_path: str, max_file_size: str, backup_count: int
) -> logging.Handler:
    log_file = Path(file_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=_parse_file_size(max_file_size),
        backupCount=backup_count,
    )


def _parse_file_size(size_str: str) -> int:
    """Bytes in a size such as "10MB", "512kb" or a bare byte count."""
    match = _SIZE_PATTERN.match(size_str)
    if not match:
        raise ValueError(f"Invalid file size: {size_str!r}")
    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[(unit or "").upper()]


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def log_performance(operation: str, duration_ms: float, **context: Any) -> None:
    """Emit a DEBUG timing event for an aggregation step."""
    get_logger("performance").debug(
        "Performance metric",
        operation=operation,
        duration_ms=round(duration_ms, 2),
        **context,
    )
