"""
Session tracking over the live event buffer.

Pure functions: nothing here reads or writes the store.
"""

from __future__ import annotations

from typing import Any, Sequence

from sessionjournal.models.journal import Classification, JournalState
from sessionjournal.utils.validators import SESSION_ENDED, SESSION_STARTED


def current_session_id(live_buffer: Sequence[dict[str, Any]]) -> str | None:
    """
    Find the id of the session currently held in the live buffer.

    The most recent ``session_started`` wins, even if stale events from an
    earlier session without a ``session_ended`` linger before it. Without
    any ``session_started`` the first event carrying a ``session_id`` is used,
    so an adopted buffer belongs to the first session that identifies itself.

    Args:
        live_buffer: Events of the live buffer, oldest first

    Returns:
        The current session id, or None if no session is open
    """
    for event in reversed(live_buffer):
        if event.get("event") == SESSION_STARTED:
            return event.get("session_id")

    for event in live_buffer:
        if event.get("session_id") is not None:
            return event["session_id"]

    return None


def find_session_start(
    live_buffer: Sequence[dict[str, Any]],
    session_id: str | None,
) -> dict[str, Any] | None:
    """Get the most recent ``session_started`` record of a session."""
    if session_id is None:
        return None

    for event in reversed(live_buffer):
        if event.get("event") == SESSION_STARTED and event.get("session_id") == session_id:
            return event

    return None


def classify(
    live_buffer: Sequence[dict[str, Any]],
    event: dict[str, Any],
) -> Classification:
    """
    Classify an incoming event against the live buffer.

    Args:
        live_buffer: Events of the live buffer, oldest first
        event: Incoming event

    Returns:
        START and END by discriminator; otherwise CONTINUE, FOREIGN or
        ADOPT depending on the event's session id
    """
    name = event.get("event")
    if name == SESSION_STARTED:
        return Classification.START
    if name == SESSION_ENDED:
        return Classification.END

    current = current_session_id(live_buffer)
    if current is None:
        return Classification.ADOPT

    session_id = event.get("session_id")
    if session_id is None or session_id == current:
        return Classification.CONTINUE

    return Classification.FOREIGN


def buffer_state(live_buffer: Sequence[dict[str, Any]]) -> JournalState:
    """Get the state of the live buffer."""
    return JournalState.OPEN if live_buffer else JournalState.EMPTY
