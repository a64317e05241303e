"""
CLI package for sessionjournal.

Provides a rich command-line interface using Typer.
"""

from sessionjournal.cli.app import app, main

__all__ = ["app", "main"]
