"""
Task analytics over the archive.

Groups archived events back into sessions, measures each run and
aggregates runs per task so repeated runs of the same task can be compared.
"""

from __future__ import annotations

from typing import Any, Iterable

from sessionjournal.models.journal import ImprovementTrend, TaskAnalytics, TaskMetrics
from sessionjournal.utils.helpers import parse_task_id
from sessionjournal.utils.validators import SESSION_ENDED, SESSION_STARTED


UNKNOWN_TASK_ID = "UNKNOWN-TASK-0"
UNKNOWN_TASK_NAME = "Unknown Task"


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _count(events: list[dict[str, Any]], name: str) -> int:
    return sum(1 for e in events if e.get("event") == name)


def group_by_session(events: Iterable[dict[str, Any]]) -> list[list[dict[str, Any]]]:
    """
    Group events by ``session_id``, keeping first-seen session order.

    Events without a session id are grouped together under ``None``.
    """
    sessions: dict[Any, list[dict[str, Any]]] = {}
    for event in events:
        sessions.setdefault(event.get("session_id"), []).append(event)
    return list(sessions.values())


def calculate_metrics(events: list[dict[str, Any]]) -> TaskMetrics | None:
    """
    Measure one session.

    Args:
        events: Events of one session, in archive order

    Returns:
        Metrics, or None if the session has no ``session_started`` record
    """
    started = next((e for e in events if e.get("event") == SESSION_STARTED), None)
    if started is None:
        return None
    ended = next((e for e in events if e.get("event") == SESSION_ENDED), None)

    task_id = started.get("task_id") or UNKNOWN_TASK_ID
    task_name = started.get("task_name") or UNKNOWN_TASK_NAME
    start_time = _number(started.get("timestamp"))

    end_time = _number(ended.get("timestamp")) if ended else None
    if end_time is None and start_time is not None:
        # Fall back to the latest event when the session never ended
        timestamps = [t for t in (_number(e.get("timestamp")) for e in events) if t is not None]
        if timestamps and max(timestamps) > start_time:
            end_time = max(timestamps)

    duration = None
    if start_time is not None and end_time is not None:
        duration = end_time - start_time

    page_clicks = _count(events, "navigation_clicked")
    button_clicks = _count(events, "button_clicked")

    time_to_first_page = None
    first_page = next((e for e in events if e.get("event") == "page_viewed"), None)
    if first_page is not None and start_time is not None:
        first_page_time = _number(first_page.get("timestamp"))
        if first_page_time is not None:
            time_to_first_page = first_page_time - start_time

    pages_visited: list[str] = []
    for event in events:
        page = event.get("page_name")
        if page and page not in pages_visited:
            pages_visited.append(str(page))

    parsed = parse_task_id(task_id)

    return TaskMetrics(
        task_id=task_id,
        task_name=task_name,
        run_index=parsed[1] if parsed else 0,
        session_id=started.get("session_id"),
        start_time=start_time,
        end_time=end_time,
        duration=duration,
        page_views=_count(events, "page_viewed"),
        clicks=page_clicks + button_clicks,
        page_clicks=page_clicks,
        button_clicks=button_clicks,
        scroll_events=_count(events, "scroll"),
        form_interactions=sum(
            1 for e in events if str(e.get("event") or "").startswith("form_")
        ),
        time_to_first_page=time_to_first_page,
        pages_visited=pages_visited,
        event_count=len(events),
    )


def _percent_change(previous: float | None, current: float | None) -> float | None:
    if not previous or not current:
        return None
    return (previous - current) / previous * 100


def calculate_improvement_trend(runs: list[TaskMetrics]) -> ImprovementTrend | None:
    """
    Percent change between consecutive runs; positive means the later run
    needed less. Pairs where either value is missing or zero are skipped.
    """
    if len(runs) < 2:
        return None

    trend = ImprovementTrend()
    for previous, current in zip(runs, runs[1:]):
        for field in ("duration", "page_views", "clicks", "time_to_first_page"):
            change = _percent_change(getattr(previous, field), getattr(current, field))
            if change is not None:
                getattr(trend, field).append(change)
    return trend


def _average(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def build_task_analytics(archive: Iterable[dict[str, Any]]) -> list[TaskAnalytics]:
    """
    Build per-task analytics from archived events.

    Args:
        archive: Archived events

    Returns:
        One entry per task name, sorted by name, runs ordered by run index
    """
    by_task: dict[str, list[TaskMetrics]] = {}
    for session_events in group_by_session(archive):
        metrics = calculate_metrics(session_events)
        if metrics is not None:
            by_task.setdefault(metrics.task_name, []).append(metrics)

    analytics = []
    for task_name in sorted(by_task):
        runs = sorted(by_task[task_name], key=lambda r: r.run_index)
        analytics.append(TaskAnalytics(
            task_name=task_name,
            task_id=runs[0].task_id,
            total_runs=len(runs),
            runs=runs,
            average_duration=_average([r.duration for r in runs if r.duration]),
            average_page_views=_average([r.page_views for r in runs]),
            average_clicks=_average([r.clicks for r in runs]),
            average_time_to_first_page=_average(
                [r.time_to_first_page for r in runs if r.time_to_first_page]
            ),
            improvement_trend=calculate_improvement_trend(runs),
        ))

    return analytics
