"""
sessionjournal - Session-scoped event journal for agent runs

Ingests the lifecycle events an agent emits while it runs, keeps the
current session's events in a live buffer and archives finished sessions
with human-readable task ids.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from sessionjournal.models.config import JournalConfig
from sessionjournal.core.journal import JournalService

__all__ = [
    "__version__",
    "JournalConfig",
    "JournalService",
]
