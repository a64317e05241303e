"""
Structured logging for sessionjournal.

Provides a consistent logging interface with support for:
- Multiple log levels
- Structured JSON logging
- Console and file output
- Rich formatting for console
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER = "sessionjournal"


class LogLevel(str, Enum):
    """Log levels for sessionjournal."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        """Get numeric log level."""
        levels = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
            "critical": logging.CRITICAL,
        }
        return levels.get(self.value, logging.INFO)


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Get a logger in the sessionjournal namespace.

    Module loggers carry no handlers of their own; records propagate to
    the ``sessionjournal`` root logger configured by :func:`setup_logging`.

    Args:
        name: Logger name (usually ``__name__``)

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_file: str | Path | None = None,
    json_format: bool = False,
    console: bool = True,
) -> None:
    """
    Set up logging configuration for sessionjournal.

    Args:
        level: Minimum log level
        log_file: Optional file path for log output
        json_format: Use JSON format for file logs
        console: Enable console output
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.numeric)

    # Clear existing handlers
    root.handlers.clear()

    if console:
        console_handler = _rich_handler()
        console_handler.setLevel(level.numeric)
        root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        if json_format:
            file_handler.setFormatter(JsonFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
            ))

        file_handler.setLevel(level.numeric)
        root.addHandler(file_handler)


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Fields passed through ``extra={"journal": {...}}``
        journal_fields = getattr(record, "journal", None)
        if isinstance(journal_fields, dict):
            log_data.update(journal_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def log_ingest(
    logger: logging.Logger,
    classification: str,
    event_name: str | None,
    session_id: str | None,
    event_count: int,
) -> None:
    """
    Log the outcome of one ingestion call with structured data.

    Args:
        logger: Logger to use
        classification: Tracker classification of the event
        event_name: The event's discriminator
        session_id: The event's session id, if any
        event_count: Live buffer length after the call
    """
    colors = {
        "start": "green",
        "end": "blue",
        "continue": "dim",
        "foreign": "yellow",
        "adopt": "yellow",
    }
    color = colors.get(classification, "white")
    extra = {
        "journal": {
            "classification": classification,
            "event": event_name,
            "session_id": session_id,
            "event_count": event_count,
        }
    }

    if classification == "foreign":
        logger.info(
            f"[{color}]{classification.upper()}[/{color}] dropped "
            f"[magenta]{event_name}[/] from session [cyan]{session_id}[/]",
            extra=extra,
        )
    else:
        logger.debug(
            f"[{color}]{classification.upper()}[/{color}] "
            f"[magenta]{event_name}[/] session [cyan]{session_id}[/] "
            f"-> {event_count} live",
            extra=extra,
        )
