"""
Journal document commands for sessionjournal CLI.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(help="Inspect journal documents")
console = Console()

# Fields shown in their own columns; everything else goes to "Details"
_COLUMNS = {"event", "session_id", "task_id", "task", "task_name", "timestamp"}


def _load_service(config_file: str | None):
    from sessionjournal.core.journal import JournalService
    from sessionjournal.models.config import JournalConfig

    return JournalService.from_config(JournalConfig.load(config_file))


def _events_table(title: str, events: list[dict[str, Any]]) -> Table:
    from sessionjournal.utils.helpers import format_timestamp, truncate_string

    table = Table(title=title, show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Event", style="bold")
    table.add_column("Session")
    table.add_column("Task ID", style="cyan")
    table.add_column("Time")
    table.add_column("Details", style="dim")

    for index, event in enumerate(events, 1):
        details = {k: v for k, v in event.items() if k not in _COLUMNS}
        table.add_row(
            str(index),
            str(event.get("event", "?")),
            str(event.get("session_id") or "-"),
            str(event.get("task_id") or "-"),
            format_timestamp(event.get("timestamp")),
            truncate_string(json.dumps(details, default=str), 60) if details else "",
        )

    return table


@app.command("live")
def events_live(
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show the live buffer (current session)."""
    service = _load_service(config_file)
    events = service.live_events()

    if as_json:
        console.print_json(json.dumps(events, default=str))
        return

    if not events:
        console.print("[dim]No open session[/]")
        return

    session_id = service.current_session()
    console.print(_events_table(f"Live Session {session_id}", events))


@app.command("archive")
def events_archive(
    session_id: Optional[str] = typer.Option(None, "--session", "-s", help="Only this session"),
    limit: int = typer.Option(50, "--limit", "-n", help="Show at most the last N events"),
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show archived events."""
    service = _load_service(config_file)
    events = service.archived_events(session_id)

    if as_json:
        console.print_json(json.dumps(events, default=str))
        return

    if not events:
        console.print("[dim]Archive is empty[/]")
        return

    shown = events[-limit:] if limit > 0 else events
    title = f"Archived Events ({len(shown)} of {len(events)})"
    console.print(_events_table(title, shown))


@app.command("counters")
def events_counters(
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Show the task counter table."""
    service = _load_service(config_file)
    counters = service.task_counters()

    if not counters:
        console.print("[dim]No tasks recorded yet[/]")
        return

    table = Table(title="Task Counters", show_header=True)
    table.add_column("Task", style="bold")
    table.add_column("Runs", justify="right")
    table.add_column("Last Task ID", style="cyan")

    for name in sorted(counters):
        table.add_row(name, str(counters[name]), f"{name}-{counters[name]}")

    console.print(table)
