"""HTTP API package."""

from sessionjournal.api.app import create_app

__all__ = ["create_app"]
