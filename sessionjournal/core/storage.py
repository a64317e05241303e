"""
Document storage for sessionjournal.

The journal persists three whole documents: the live event buffer, the
append-only archive and the task counter table. Stores only read and
atomically replace whole documents; all session logic lives in the
journal service.
"""

from __future__ import annotations

import copy
import json
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from sessionjournal.core.errors import StoreError
from sessionjournal.utils.logger import get_logger

logger = get_logger(__name__)


EVENTS_DOCUMENT = "events"
ARCHIVE_DOCUMENT = "saved-events"
COUNTERS_DOCUMENT = "task-counts"


class DocumentStore(ABC):
    """
    Abstract key-to-document store.

    Implementations must never expose partial writes. Unparseable documents
    read back as empty; I/O failures raise :class:`StoreError`.
    """

    counters_document: str = COUNTERS_DOCUMENT

    @abstractmethod
    def read_document(self, name: str) -> list[dict[str, Any]]:
        """
        Read a document of events.

        Args:
            name: Document name

        Returns:
            The stored events, or an empty list if absent or corrupt
        """

    @abstractmethod
    def write_document(self, name: str, events: list[dict[str, Any]]) -> None:
        """
        Atomically replace a document of events.

        Args:
            name: Document name
            events: Full new contents

        Raises:
            StoreError: If the write fails
        """

    @abstractmethod
    def read_counters(self) -> dict[str, int]:
        """Read the task counter table ({} if absent or corrupt)."""

    @abstractmethod
    def write_counters(self, counters: dict[str, int]) -> None:
        """Atomically replace the task counter table."""


def _coerce_events(data: Any, document: str) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        logger.warning(f"Document '{document}' is not a JSON array; treating as empty")
        return []

    events = [event for event in data if isinstance(event, dict)]
    if len(events) != len(data):
        logger.warning(
            f"Dropped {len(data) - len(events)} non-object entries from '{document}'"
        )
    return events


def _coerce_counters(data: Any, document: str) -> dict[str, int]:
    if not isinstance(data, dict):
        logger.warning(f"Document '{document}' is not a JSON object; treating as empty")
        return {}

    counters: dict[str, int] = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, int):
            logger.warning(f"Ignoring non-integer counter '{key}' in '{document}'")
            continue
        counters[str(key)] = value
    return counters


class FileDocumentStore(DocumentStore):
    """
    JSON-file-backed document store.

    Each document is one JSON file under ``data_dir``. Writes go to a
    temporary file in the same directory and are moved into place with
    ``os.replace``, so readers only ever see a complete document.

    Example:
        >>> store = FileDocumentStore("./journal_data")
        >>> store.write_document("events", [{"event": "session_started"}])
        >>> store.read_document("events")
        [{'event': 'session_started'}]
    """

    def __init__(
        self,
        data_dir: str | Path,
        indent: int | None = 2,
        counters_document: str = COUNTERS_DOCUMENT,
    ):
        """
        Initialize the store.

        Args:
            data_dir: Directory for the document files
            indent: JSON indentation for written documents
            counters_document: Document name of the task counter table
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.indent = indent
        self.counters_document = counters_document

    def path_for(self, name: str) -> Path:
        """Get the file path of a document."""
        return self.data_dir / f"{name}.json"

    def _load(self, name: str) -> Any:
        path = self.path_for(name)
        if not path.exists():
            return None

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Failed to read document '{name}': {e}", name) from e

        if not content.strip():
            return None

        try:
            return json.loads(content)
        except ValueError as e:
            logger.warning(f"Document '{name}' is corrupt ({e}); treating as empty")
            return None

    def _dump(self, name: str, data: Any) -> None:
        path = self.path_for(name)
        tmp_path = path.parent / f".{path.name}.{uuid.uuid4().hex}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=self.indent, ensure_ascii=False, default=str)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Failed to write document '{name}': {e}", name) from e
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

    def read_document(self, name: str) -> list[dict[str, Any]]:
        data = self._load(name)
        if data is None:
            return []
        return _coerce_events(data, name)

    def write_document(self, name: str, events: list[dict[str, Any]]) -> None:
        self._dump(name, list(events))

    def read_counters(self) -> dict[str, int]:
        data = self._load(self.counters_document)
        if data is None:
            return {}
        return _coerce_counters(data, self.counters_document)

    def write_counters(self, counters: dict[str, int]) -> None:
        self._dump(self.counters_document, dict(counters))


class MemoryDocumentStore(DocumentStore):
    """
    In-process document store.

    Documents are deep-copied on the way in and out so callers can never
    mutate stored state without a write.
    """

    def __init__(self, documents: dict[str, Any] | None = None):
        self._documents: dict[str, Any] = copy.deepcopy(documents or {})

    def read_document(self, name: str) -> list[dict[str, Any]]:
        data = self._documents.get(name)
        if data is None:
            return []
        return _coerce_events(copy.deepcopy(data), name)

    def write_document(self, name: str, events: list[dict[str, Any]]) -> None:
        self._documents[name] = copy.deepcopy(list(events))

    def read_counters(self) -> dict[str, int]:
        data = self._documents.get(self.counters_document)
        if data is None:
            return {}
        return _coerce_counters(copy.deepcopy(data), self.counters_document)

    def write_counters(self, counters: dict[str, int]) -> None:
        self._documents[self.counters_document] = dict(counters)
