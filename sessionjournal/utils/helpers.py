"""
Helper utilities for sessionjournal.

Provides general-purpose helper functions for:
- Task name normalization and task id parsing
- String truncation for display
- Duration and timestamp formatting
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any


DEFAULT_TASK_NAME = "UNKNOWN-TASK"

_TASK_NAME_STRIP = re.compile(r"[^A-Za-z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_TASK_ID_PATTERN = re.compile(r"^(.+)-(\d+)$")


def normalize_task_name(name: str | None, default: str = DEFAULT_TASK_NAME) -> str:
    """
    Normalize a declared task name into the key used by the counter table.

    Characters outside ``[A-Za-z0-9\\s-]`` are removed, runs of whitespace
    become a single hyphen and the result is uppercased. Normalizing an
    already-normalized name returns it unchanged.

    Args:
        name: Declared task name
        default: Key used when nothing survives normalization

    Returns:
        Normalized task name (e.g., "Buy Now!" -> "BUY-NOW")

    Example:
        >>> normalize_task_name("Checkout Flow")
        'CHECKOUT-FLOW'
    """
    if not name:
        return default

    stripped = _TASK_NAME_STRIP.sub("", str(name)).strip()
    normalized = _WHITESPACE_RUN.sub("-", stripped).upper()

    return normalized or default


def format_task_id(normalized_name: str, counter: int) -> str:
    """Join a normalized task name and its run counter."""
    return f"{normalized_name}-{counter}"


def parse_task_id(task_id: str) -> tuple[str, int] | None:
    """
    Split a task id into a readable task name and its run index.

    Args:
        task_id: Task id in ``NAME-INDEX`` form

    Returns:
        ``(name, index)`` with hyphens in the name turned back into
        spaces, or None if the id has no numeric suffix
    """
    match = _TASK_ID_PATTERN.match(task_id or "")
    if not match:
        return None
    return match.group(1).replace("-", " "), int(match.group(2))


def truncate_string(
    text: str,
    max_length: int,
    suffix: str = "...",
) -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: Input string
        max_length: Maximum length including suffix
        suffix: Suffix to append when truncated

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def format_duration(seconds: float) -> str:
    """
    Format seconds as human-readable duration.

    Args:
        seconds: Duration in seconds

    Returns:
        Human-readable string (e.g., "2h 30m 15s")
    """
    if seconds < 0:
        return "0s"

    delta = timedelta(seconds=int(seconds))

    parts = []

    days = delta.days
    hours, remainder = divmod(delta.seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)


def format_timestamp(value: Any) -> str:
    """
    Render an event timestamp (epoch milliseconds) for display.

    Non-numeric values are returned as strings; missing values as "N/A".
    """
    if value is None or value == "":
        return "N/A"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    try:
        return datetime.fromtimestamp(value / 1000).isoformat(timespec="seconds")
    except (OverflowError, OSError, ValueError):
        return str(value)
