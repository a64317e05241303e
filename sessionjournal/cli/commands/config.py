"""
Configuration commands for sessionjournal CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(help="Configuration management")
console = Console()


@app.command("show")
def config_show(
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file to show",
    ),
):
    """Show current configuration."""
    from sessionjournal.models.config import JournalConfig

    try:
        config = JournalConfig.load(config_file)
    except Exception as e:
        console.print(f"[red]Error loading config: {e}[/]")
        raise typer.Exit(1)

    console.print(
        Panel.fit(
            f"[bold]Storage:[/]\n"
            f"  Data Dir: {config.storage.data_dir}\n"
            f"  Live Buffer: {config.storage.events_document}\n"
            f"  Archive: {config.storage.archive_document}\n"
            f"  Task Counters: {config.storage.counters_document}\n"
            f"\n[bold]Server:[/]\n"
            f"  Host: {config.server.host}\n"
            f"  Port: {config.server.port}\n"
            f"  CORS Origins: {', '.join(config.server.cors_origins)}\n"
            f"\n[bold]Logging:[/]\n"
            f"  Level: {config.logging.level}\n"
            f"  File: {config.logging.file or 'console only'}\n"
            f"\n[bold]Default Task Name:[/] {config.default_task_name}",
            title="[bold blue]sessionjournal Configuration[/]",
        )
    )


@app.command("init")
def config_init(
    config_file: str = typer.Argument(
        "sessionjournal.yaml",
        help="Configuration file to create",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing file"),
):
    """Write a default configuration file."""
    init_config(config_file, force=force)


def init_config(config_file: str, force: bool = False) -> None:
    """Create a default configuration file."""
    from sessionjournal.models.config import JournalConfig

    path = Path(config_file)
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists (use --force to overwrite)[/]")
        raise typer.Exit(1)

    JournalConfig().save(path)
    console.print(f"[green]Configuration written to {path}[/]")


@app.command("env")
def config_env():
    """Show environment variables understood by sessionjournal."""
    from sessionjournal.models.config import ENV_VARS

    table = Table(title="Environment Variables", show_header=True)
    table.add_column("Variable", style="bold", no_wrap=True)
    table.add_column("Description")
    table.add_column("Status")

    for name, description in ENV_VARS.items():
        status = "[green]Set[/]" if os.environ.get(name) else "[dim]Not set[/]"
        table.add_row(name, description, status)

    console.print(table)
