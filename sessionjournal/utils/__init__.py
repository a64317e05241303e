"""
Utility modules for sessionjournal.

This package provides common utilities:
- logger: Structured logging
- validators: Event validation
- helpers: Helper functions
"""

from sessionjournal.utils.logger import (
    get_logger,
    setup_logging,
    log_ingest,
    LogLevel,
)
from sessionjournal.utils.validators import (
    validate_event,
    parse_event_body,
    is_valid_event,
    ValidationError,
)
from sessionjournal.utils.helpers import (
    normalize_task_name,
    format_task_id,
    parse_task_id,
    truncate_string,
    format_duration,
    format_timestamp,
)

__all__ = [
    # Logger
    "get_logger",
    "setup_logging",
    "log_ingest",
    "LogLevel",
    # Validators
    "validate_event",
    "parse_event_body",
    "is_valid_event",
    "ValidationError",
    # Helpers
    "normalize_task_name",
    "format_task_id",
    "parse_task_id",
    "truncate_string",
    "format_duration",
    "format_timestamp",
]
