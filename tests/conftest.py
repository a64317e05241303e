"""
Test configuration and fixtures.
"""

import pytest

from sessionjournal.core.journal import JournalService
from sessionjournal.core.storage import FileDocumentStore, MemoryDocumentStore


@pytest.fixture
def memory_store():
    """Empty in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture
def service(memory_store):
    """Journal service over an in-memory store."""
    return JournalService(memory_store)


@pytest.fixture
def file_store(tmp_path):
    """File-backed store in a temporary directory."""
    return FileDocumentStore(tmp_path / "data")


@pytest.fixture
def started_event():
    """A session_started event for session s1."""
    return {
        "event": "session_started",
        "session_id": "s1",
        "task": "Checkout Flow",
        "timestamp": 1_700_000_000_000,
    }
