"""
Journal state and acknowledgement models.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# An event is an open-ended JSON object; only a few fields are structural.
Event = dict[str, Any]


class Classification(str, Enum):
    """How an incoming event relates to the live buffer."""

    START = "start"
    END = "end"
    CONTINUE = "continue"
    FOREIGN = "foreign"
    ADOPT = "adopt"

    @property
    def description(self) -> str:
        """Get description for the classification."""
        descriptions = {
            "start": "Opens a new session, flushing any previous one",
            "end": "Closes the current session and archives it",
            "continue": "Belongs to the current session",
            "foreign": "Belongs to another session; dropped",
            "adopt": "No session is open; kept without task enrichment",
        }
        return descriptions.get(self.value, "Unknown classification")


class JournalState(str, Enum):
    """State of the live buffer."""

    EMPTY = "empty"
    OPEN = "open"


class IngestAck(BaseModel):
    """
    Acknowledgement returned for every successful ingestion.

    Serialized by alias for the wire: ``{"success": true, "eventCount": n}``.
    The classification and resulting state are kept for in-process callers.
    """

    success: bool = Field(default=True)
    event_count: int = Field(
        ge=0,
        serialization_alias="eventCount",
        description="Live buffer length after the operation",
    )
    classification: Classification = Field(exclude=True)
    state: JournalState = Field(exclude=True)
    task_id: str | None = Field(
        default=None,
        exclude=True,
        description="Task id stamped on the event, if any",
    )

    def to_response(self) -> dict[str, Any]:
        """Get the wire representation."""
        return self.model_dump(by_alias=True)


class ImprovementTrend(BaseModel):
    """Percent change between consecutive runs of one task (positive = better)."""

    duration: list[float] = Field(default_factory=list)
    page_views: list[float] = Field(default_factory=list)
    clicks: list[float] = Field(default_factory=list)
    time_to_first_page: list[float] = Field(default_factory=list)


class TaskMetrics(BaseModel):
    """Metrics for one archived session (one run of a task)."""

    task_id: str
    task_name: str
    run_index: int = Field(default=0, description="Counter suffix of the task id")
    session_id: str | None = None
    start_time: float | None = None
    end_time: float | None = None
    duration: float | None = Field(default=None, description="Milliseconds")
    page_views: int = 0
    clicks: int = 0
    page_clicks: int = 0
    button_clicks: int = 0
    scroll_events: int = 0
    form_interactions: int = 0
    time_to_first_page: float | None = None
    pages_visited: list[str] = Field(default_factory=list)
    event_count: int = 0

    def to_summary(self) -> str:
        """Get a brief summary."""
        return f"{self.task_id} ({self.event_count} events)"


class TaskAnalytics(BaseModel):
    """Aggregated metrics over every archived run of one task."""

    task_name: str
    task_id: str
    total_runs: int
    runs: list[TaskMetrics] = Field(default_factory=list)
    average_duration: float | None = None
    average_page_views: float | None = None
    average_clicks: float | None = None
    average_time_to_first_page: float | None = None
    improvement_trend: ImprovementTrend | None = None
