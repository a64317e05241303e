"""
Journal service for sessionjournal.

Ingests agent-lifecycle events, partitions them into sessions, mints task
ids and moves finished sessions from the live buffer into the archive.
"""

from __future__ import annotations

import threading
from typing import Any

from sessionjournal.core.errors import IngestionError, StoreError
from sessionjournal.core.storage import (
    ARCHIVE_DOCUMENT,
    EVENTS_DOCUMENT,
    DocumentStore,
    FileDocumentStore,
)
from sessionjournal.core.tracker import (
    buffer_state,
    classify,
    current_session_id,
    find_session_start,
)
from sessionjournal.models.config import JournalConfig
from sessionjournal.models.journal import Classification, IngestAck, JournalState
from sessionjournal.utils.helpers import (
    DEFAULT_TASK_NAME,
    format_task_id,
    normalize_task_name,
)
from sessionjournal.utils.logger import get_logger, log_ingest
from sessionjournal.utils.validators import validate_event

logger = get_logger(__name__)


# Fields copied from a session's session_started record onto later events
TASK_FIELDS = ("task", "task_name", "task_id")


class JournalService:
    """
    Single writer of the journal documents.

    Every ingestion runs read -> classify -> mutate -> write while holding
    the live-buffer lock. Task counter increments hold their own lock.

    Example:
        >>> service = JournalService(MemoryDocumentStore())
        >>> service.ingest({"event": "session_started", "session_id": "s1",
        ...                 "task": "Checkout Flow"}).task_id
        'CHECKOUT-FLOW-1'
    """

    def __init__(
        self,
        store: DocumentStore,
        events_document: str = EVENTS_DOCUMENT,
        archive_document: str = ARCHIVE_DOCUMENT,
        default_task_name: str = DEFAULT_TASK_NAME,
    ):
        """
        Initialize the service.

        Args:
            store: Document store holding the journal
            events_document: Document name of the live buffer
            archive_document: Document name of the archive
            default_task_name: Task name used when a session declares none
        """
        self.store = store
        self.events_document = events_document
        self.archive_document = archive_document
        self.default_task_name = default_task_name
        self._live_lock = threading.Lock()
        self._counter_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: JournalConfig) -> "JournalService":
        """Create a file-backed service from configuration."""
        store = FileDocumentStore(
            config.get_data_dir(),
            indent=config.storage.indent,
            counters_document=config.storage.counters_document,
        )
        return cls(
            store,
            events_document=config.storage.events_document,
            archive_document=config.storage.archive_document,
            default_task_name=config.default_task_name,
        )

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, event: dict[str, Any]) -> IngestAck:
        """
        Record one event.

        Args:
            event: Decoded event

        Returns:
            Acknowledgement carrying the live buffer length

        Raises:
            ValidationError: If the event is malformed (nothing is read or written)
            IngestionError: If the store failed; the event is not recorded
        """
        event = validate_event(event)

        with self._live_lock:
            try:
                ack = self._ingest_locked(event)
            except StoreError as e:
                logger.error(
                    f"Failed to record '{event.get('event')}' event: {e.message}",
                    exc_info=True,
                )
                raise IngestionError(f"Failed to write event: {e.message}") from e

        log_ingest(
            logger,
            ack.classification.value,
            event.get("event"),
            event.get("session_id"),
            ack.event_count,
        )
        return ack

    def _ingest_locked(self, event: dict[str, Any]) -> IngestAck:
        live = self.store.read_document(self.events_document)
        classification = classify(live, event)

        if classification == Classification.START:
            return self._start(live, event)
        if classification == Classification.END:
            return self._end(live, event)
        if classification == Classification.CONTINUE:
            return self._continue(live, event)
        if classification == Classification.FOREIGN:
            return self._ack(live, classification)

        logger.warning(
            f"No open session for '{event.get('event')}' event "
            f"(session {event.get('session_id')}); recording without task id"
        )
        session_id = event.get("session_id")
        if session_id is not None:
            # Earlier anonymous events belong to the first identified session
            for earlier in live:
                if earlier.get("session_id") is None:
                    earlier["session_id"] = session_id
        live.append(event)
        self.store.write_document(self.events_document, live)
        return self._ack(live, classification)

    def _start(self, live: list[dict[str, Any]], event: dict[str, Any]) -> IngestAck:
        declared = event.get("task_name") or event.get("task") or self.default_task_name
        task_id = self.mint_task_id(str(declared))

        stamped = dict(event)
        stamped.setdefault("task", declared)
        stamped["task_name"] = declared
        stamped["task_id"] = task_id

        if live:
            superseded = current_session_id(live)
            logger.info(
                f"Session [cyan]{stamped['session_id']}[/] supersedes "
                f"[cyan]{superseded}[/]; archiving {len(live)} live events"
            )
        self._flush(live, [stamped])
        live = [stamped]
        logger.info(f"Session [cyan]{stamped['session_id']}[/] started as [bold]{task_id}[/]")
        return self._ack(live, Classification.START, task_id)

    def _end(self, live: list[dict[str, Any]], event: dict[str, Any]) -> IngestAck:
        current = current_session_id(live)
        stamped = dict(event)
        task_id = None

        if current is not None and stamped.get("session_id", current) == current:
            stamped["session_id"] = current
            stamped = self._stamp(live, current, stamped)
            task_id = stamped.get("task_id")

        live.append(stamped)
        self._flush(live, [])
        logger.info(
            f"Session [cyan]{stamped.get('session_id')}[/] ended; "
            f"archived {len(live)} events"
        )
        return self._ack([], Classification.END, task_id)

    def _continue(self, live: list[dict[str, Any]], event: dict[str, Any]) -> IngestAck:
        current = current_session_id(live)
        stamped = dict(event)
        stamped["session_id"] = current
        stamped = self._stamp(live, current, stamped)

        live.append(stamped)
        self.store.write_document(self.events_document, live)
        return self._ack(live, Classification.CONTINUE, stamped.get("task_id"))

    def _stamp(
        self,
        live: list[dict[str, Any]],
        session_id: str | None,
        event: dict[str, Any],
    ) -> dict[str, Any]:
        start = find_session_start(live, session_id)
        if start is None:
            return event
        for field in TASK_FIELDS:
            if field in start:
                event[field] = start[field]
        return event

    def _flush(
        self,
        archived: list[dict[str, Any]],
        live: list[dict[str, Any]],
    ) -> None:
        """
        Append events to the archive, then replace the live buffer.

        If the live write fails the archive is put back, so a retried
        ingestion never archives the same events twice.
        """
        if not archived:
            self.store.write_document(self.events_document, live)
            return

        previous = self.store.read_document(self.archive_document)
        self.store.write_document(self.archive_document, previous + archived)
        try:
            self.store.write_document(self.events_document, live)
        except StoreError:
            self._restore_archive(previous)
            raise

    def _restore_archive(self, previous: list[dict[str, Any]]) -> None:
        try:
            self.store.write_document(self.archive_document, previous)
        except StoreError as e:
            logger.error(
                f"Failed to roll back archive after live write failure: {e.message}; "
                f"{self.archive_document} may hold events still in the live buffer"
            )

    def _ack(
        self,
        live: list[dict[str, Any]],
        classification: Classification,
        task_id: str | None = None,
    ) -> IngestAck:
        return IngestAck(
            event_count=len(live),
            classification=classification,
            state=buffer_state(live),
            task_id=task_id,
        )

    # ------------------------------------------------------------------
    # Task ids
    # ------------------------------------------------------------------

    def mint_task_id(self, task_name: str) -> str:
        """
        Mint the next task id for a task name.

        Args:
            task_name: Declared task name

        Returns:
            ``{NORMALIZED_NAME}-{counter}``, counters starting at 1

        Raises:
            StoreError: If the counter table could not be persisted
        """
        normalized = normalize_task_name(task_name, self.default_task_name)

        with self._counter_lock:
            counters = self.store.read_counters()
            counter = counters.get(normalized, 0) + 1
            counters[normalized] = counter
            self.store.write_counters(counters)

        return format_task_id(normalized, counter)

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def live_events(self) -> list[dict[str, Any]]:
        """Get the current session's events."""
        return self.store.read_document(self.events_document)

    def archived_events(self, session_id: str | None = None) -> list[dict[str, Any]]:
        """
        Get archived events.

        Args:
            session_id: Only return events of this session (optional)
        """
        archive = self.store.read_document(self.archive_document)
        if session_id is None:
            return archive
        return [e for e in archive if e.get("session_id") == session_id]

    def task_counters(self) -> dict[str, int]:
        """Get the task counter table."""
        return self.store.read_counters()

    def current_session(self) -> str | None:
        """Get the id of the open session, if any."""
        return current_session_id(self.live_events())

    def state(self) -> JournalState:
        """Get the state of the live buffer."""
        return buffer_state(self.live_events())
