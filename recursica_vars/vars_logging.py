"""Logging setup for the resolver and its builders.

One package logger (``recursica_vars``) with a child per component, e.g.
``recursica_vars.layers``. The CLI calls ``setup_logging`` once per
invocation; library use leaves handler configuration to the application.
"""

import json
import logging
import logging.handlers
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

LOGGER_NAME = "recursica_vars"

# Attributes callers may pass through ``extra`` that end up in JSON output
STRUCTURED_FIELDS = ("var_name", "operation", "duration_ms", "var_count")

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"


class LogCategory(Enum):
    """Log categories, one per resolver component."""

    RESOLVER = "resolver"
    PALETTES = "palettes"
    LAYERS = "layers"
    DIMENSIONS = "dimensions"
    TYPOGRAPHY = "typography"
    COMPLIANCE = "compliance"
    CSS = "css"
    STORAGE = "storage"


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    The component is taken from the logger name, so ``recursica_vars.layers``
    records carry ``"category": "layers"``.
    """

    def format(self, record: logging.LogRecord) -> str:
        _, _, category = record.name.partition(".")
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "category": category or None,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        entry.update(
            {name: getattr(record, name) for name in STRUCTURED_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _console_level(level: str, quiet: bool, verbose: bool) -> str:
    if quiet:
        return "ERROR"
    if verbose:
        return "DEBUG"
    return level.upper()


def _file_handler(
    log_file: Path, log_format: str, rotation_count: int, max_bytes: int
) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json" if log_format == "json" else "file",
        "level": "DEBUG",
        "filename": str(log_file),
        "maxBytes": max_bytes,
        "backupCount": rotation_count,
        "encoding": "utf-8",
    }


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 10485760,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Console level when neither ``quiet`` nor ``verbose`` is set.
        quiet: Only errors reach the console.
        verbose: Debug records reach the console.
        log_file: Rotating log file; the file always receives DEBUG records.
        log_format: ``text`` or ``json`` for the file.
        rotation_count: Rotated files kept.
        max_bytes: Size at which the file rotates.

    Returns:
        The package logger.
    """
    import logging.config

    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "level": _console_level(level, quiet, verbose),
            "stream": "ext://sys.stderr",
        }
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = _file_handler(Path(log_file), log_format, rotation_count, max_bytes)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": CONSOLE_FORMAT},
                "file": {"format": FILE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {"()": JSONFormatter},
            },
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "handlers": list(handlers),
                    "level": "DEBUG",
                    "propagate": False,
                }
            },
        }
    )
    return logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def get_category_logger(category: LogCategory) -> logging.Logger:
    """Child logger for one component, e.g. ``recursica_vars.compliance``."""
    return logging.getLogger(f"{LOGGER_NAME}.{category.value}")


@contextmanager
def debug_context(logger: logging.Logger | None = None) -> Generator[logging.Logger, None, None]:
    """Lower ``logger`` and its handlers to DEBUG until the block exits."""
    target = logger or get_logger()
    saved = [(target, target.level)] + [(handler, handler.level) for handler in target.handlers]
    try:
        for item, _ in saved:
            item.setLevel(logging.DEBUG)
        yield target
    finally:
        for item, level in saved:
            item.setLevel(level)
