"""sessionjournal models package."""

from sessionjournal.models.config import (
    JournalConfig,
    StorageConfig,
    ServerConfig,
    LoggingConfig,
)
from sessionjournal.models.journal import (
    Event,
    Classification,
    JournalState,
    IngestAck,
    TaskMetrics,
    TaskAnalytics,
    ImprovementTrend,
)

__all__ = [
    # Config
    "JournalConfig",
    "StorageConfig",
    "ServerConfig",
    "LoggingConfig",
    # Journal
    "Event",
    "Classification",
    "JournalState",
    "IngestAck",
    # Analytics
    "TaskMetrics",
    "TaskAnalytics",
    "ImprovementTrend",
]
