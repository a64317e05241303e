"""
Task analytics commands for sessionjournal CLI.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(help="Task analytics")
console = Console()


def _analytics(config_file: str | None):
    from sessionjournal.core.analytics import build_task_analytics
    from sessionjournal.core.journal import JournalService
    from sessionjournal.models.config import JournalConfig

    service = JournalService.from_config(JournalConfig.load(config_file))
    return build_task_analytics(service.archived_events())


def _ms(value: float | None) -> str:
    from sessionjournal.utils.helpers import format_duration

    return format_duration(value / 1000) if value is not None else "N/A"


def _avg(value: float | None) -> str:
    return f"{value:.1f}" if value is not None else "N/A"


@app.command("list")
def tasks_list(
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """List tasks with aggregate metrics over their archived runs."""
    analytics = _analytics(config_file)

    if not analytics:
        console.print("[dim]No analytics data available yet[/]")
        return

    table = Table(title="Tasks", show_header=True)
    table.add_column("Task", style="bold")
    table.add_column("Runs", justify="right")
    table.add_column("Avg Duration", justify="right")
    table.add_column("Avg Page Views", justify="right")
    table.add_column("Avg Clicks", justify="right")

    for task in analytics:
        table.add_row(
            task.task_name,
            str(task.total_runs),
            _ms(task.average_duration),
            _avg(task.average_page_views),
            _avg(task.average_clicks),
        )

    console.print(table)


@app.command("show")
def tasks_show(
    task_name: str = typer.Argument(..., help="Task name as declared by the agent"),
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Show every run of one task."""
    analytics = _analytics(config_file)
    task = next(
        (t for t in analytics if t.task_name.lower() == task_name.lower()),
        None,
    )

    if task is None:
        console.print(f"[red]Task '{task_name}' not found[/]")
        raise typer.Exit(1)

    table = Table(title=f"{task.task_name} ({task.total_runs} runs)", show_header=True)
    table.add_column("Task ID", style="cyan")
    table.add_column("Session")
    table.add_column("Duration", justify="right")
    table.add_column("Page Views", justify="right")
    table.add_column("Clicks", justify="right")
    table.add_column("Events", justify="right")

    for run in task.runs:
        table.add_row(
            run.task_id,
            run.session_id or "-",
            _ms(run.duration),
            str(run.page_views),
            str(run.clicks),
            str(run.event_count),
        )

    console.print(table)

    trend = task.improvement_trend
    if trend and trend.duration:
        changes = ", ".join(f"{c:+.1f}%" for c in trend.duration)
        console.print(f"[dim]Duration change per run:[/] {changes}")
