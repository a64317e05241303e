"""
Exceptions raised by the journal core.
"""

from __future__ import annotations


class JournalError(Exception):
    """Base class for journal failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreError(JournalError):
    """Raised when a document cannot be read from or written to the store."""

    def __init__(self, message: str, document: str | None = None):
        super().__init__(message)
        self.document = document


class IngestionError(JournalError):
    """Raised when an event could not be durably recorded."""
