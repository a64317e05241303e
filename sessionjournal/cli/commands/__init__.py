"""CLI commands package."""

from sessionjournal.cli.commands import config, events, tasks

__all__ = ["config", "events", "tasks"]
