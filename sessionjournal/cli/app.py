"""
Main CLI application.

This module defines the main Typer application and entry point.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Optional

import typer
from rich.console import Console

from sessionjournal import __version__
from sessionjournal.cli.commands import config, events, tasks

# Create the main app
app = typer.Typer(
    name="sessionjournal",
    help="Session-scoped event journal for agent runs",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Add sub-commands
app.add_typer(events.app, name="events", help="Inspect journal documents")
app.add_typer(tasks.app, name="tasks", help="Task analytics")
app.add_typer(config.app, name="config", help="Configuration management")

console = Console()


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]sessionjournal[/] v{__version__}")
        raise typer.Exit()


# Global state for CLI options
class CLIState:
    """Global CLI state for options like quiet, debug, color."""

    quiet: bool = False
    debug: bool = False
    no_color: bool = False


cli_state = CLIState()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-essential output",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
):
    """
    sessionjournal - Session-scoped event journal for agent runs

    Records the lifecycle events an agent emits, keeps the current session
    live and archives finished sessions with task ids.

    Global Options:
        --quiet, -q    Suppress non-essential output
        --debug        Enable debug logging
        --no-color     Disable colored output
    """
    cli_state.quiet = quiet
    cli_state.debug = debug
    cli_state.no_color = no_color

    # Set environment variable for no-color (used by Rich)
    if no_color:
        os.environ["NO_COLOR"] = "1"


def get_console() -> Console:
    """Get a console instance with current CLI state applied."""
    return Console(
        quiet=cli_state.quiet,
        no_color=cli_state.no_color,
    )


def _configure_logging(journal_config) -> None:
    from sessionjournal.utils.logger import setup_logging

    level = "DEBUG" if cli_state.debug else journal_config.logging.level
    setup_logging(
        level=level,
        log_file=journal_config.logging.file,
        json_format=journal_config.logging.json_format,
        console=not cli_state.quiet,
    )


@app.command()
def serve(
    host: str = typer.Option(
        None,
        "--host",
        "-H",
        help="Interface to bind (default from config)",
    ),
    port: int = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on (default from config)",
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path",
    ),
):
    """
    Run the HTTP ingestion API.

    Example:
        sessionjournal serve --port 8787
    """
    import uvicorn

    from sessionjournal.api.app import create_app
    from sessionjournal.models.config import JournalConfig

    journal_config = JournalConfig.load(config_file)
    if host:
        journal_config.server.host = host
    if port:
        journal_config.server.port = port

    _configure_logging(journal_config)

    out = get_console()
    out.print(
        f"[bold blue]sessionjournal[/] v{__version__} listening on "
        f"[cyan]http://{journal_config.server.host}:{journal_config.server.port}[/]"
    )
    out.print(f"[dim]Data directory:[/] {journal_config.get_data_dir()}")

    uvicorn.run(
        create_app(journal_config),
        host=journal_config.server.host,
        port=journal_config.server.port,
        log_config=None,
    )


@app.command()
def ingest(
    source: str = typer.Argument(
        "-",
        help="JSON file holding one event or an array of events ('-' for stdin)",
    ),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path",
    ),
):
    """
    Record events into the configured journal without the HTTP API.

    Example:
        echo '{"event": "session_started", "session_id": "s1", "task": "Checkout"}' | sessionjournal ingest
    """
    from sessionjournal.core.errors import IngestionError
    from sessionjournal.core.journal import JournalService
    from sessionjournal.models.config import JournalConfig
    from sessionjournal.utils.validators import ValidationError

    out = get_console()

    try:
        if source == "-":
            raw = sys.stdin.read()
        else:
            with open(source, encoding="utf-8") as f:
                raw = f.read()
        data = json.loads(raw)
    except OSError as e:
        console.print(f"[red]Cannot read {source}: {e}[/]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Malformed JSON: {e}[/]")
        raise typer.Exit(1)

    journal_config = JournalConfig.load(config_file)
    _configure_logging(journal_config)
    service = JournalService.from_config(journal_config)

    batch = data if isinstance(data, list) else [data]
    for index, event in enumerate(batch):
        try:
            ack = service.ingest(event)
        except (ValidationError, IngestionError) as e:
            console.print(f"[red]Event {index} rejected: {e.message}[/]")
            raise typer.Exit(1)

        task = f" [bold]{ack.task_id}[/]" if ack.task_id else ""
        out.print(
            f"[green]✓[/] {ack.classification.value}{task} "
            f"[dim]({ack.event_count} live)[/]"
        )


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
