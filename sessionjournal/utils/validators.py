"""
Input validation utilities for sessionjournal.

Provides validation for incoming events:
- Request bodies must decode to a JSON object
- ``session_started`` events must carry a ``session_id``
"""

from __future__ import annotations

import json
from typing import Any


SESSION_STARTED = "session_started"
SESSION_ENDED = "session_ended"


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, message: str, field: str | None = None):
        """Initialize with message and optional field name."""
        super().__init__(message)
        self.field = field
        self.message = message


def parse_event_body(body: bytes | str) -> dict[str, Any]:
    """
    Decode a raw request body into an event.

    Args:
        body: Raw JSON text

    Returns:
        Validated event mapping

    Raises:
        ValidationError: If the body is not a JSON object
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError("Request body is not valid UTF-8", "body") from e

    try:
        data = json.loads(body)
    except ValueError as e:
        raise ValidationError(f"Malformed JSON: {e}", "body") from e

    return validate_event(data)


def validate_event(data: Any) -> dict[str, Any]:
    """
    Validate and normalize a decoded event.

    Only the structural fields are checked; every other field passes
    through untouched.

    Args:
        data: Decoded JSON value

    Returns:
        A shallow copy of the event

    Raises:
        ValidationError: If invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Event must be a JSON object", "body")

    event = dict(data)

    name = event.get("event")
    if name is not None and not isinstance(name, str):
        raise ValidationError("Field 'event' must be a string", "event")

    session_id = event.get("session_id")
    if session_id is not None:
        if isinstance(session_id, bool) or not isinstance(session_id, (str, int)):
            raise ValidationError("Field 'session_id' must be a string", "session_id")
        # Numeric ids compare equal to their string form from then on
        event["session_id"] = str(session_id)

    if name == SESSION_STARTED and not event.get("session_id"):
        raise ValidationError(
            "session_started events require a session_id", "session_id"
        )

    return event


def is_valid_event(data: Any) -> bool:
    """Check whether a decoded value would pass :func:`validate_event`."""
    try:
        validate_event(data)
        return True
    except ValidationError:
        return False
