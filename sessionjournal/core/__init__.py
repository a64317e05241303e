"""
Core package.

This package contains the document store, the session tracker and the
journal service that drives session transitions.
"""

from sessionjournal.core.errors import JournalError, StoreError, IngestionError
from sessionjournal.core.storage import DocumentStore, FileDocumentStore, MemoryDocumentStore
from sessionjournal.core.journal import JournalService
from sessionjournal.core.analytics import build_task_analytics

__all__ = [
    "JournalError",
    "StoreError",
    "IngestionError",
    "DocumentStore",
    "FileDocumentStore",
    "MemoryDocumentStore",
    "JournalService",
    "build_task_analytics",
]
