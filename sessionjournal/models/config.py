"""
Configuration models for sessionjournal.

Supports configuration via YAML file, environment variables, or programmatic setup.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Durable store configuration."""

    data_dir: str = Field(
        default="./journal_data",
        description="Directory holding the journal documents"
    )
    events_document: str = Field(
        default="events",
        description="Document name of the live event buffer"
    )
    archive_document: str = Field(
        default="saved-events",
        description="Document name of the append-only archive"
    )
    counters_document: str = Field(
        default="task-counts",
        description="Document name of the task counter table"
    )
    indent: int | None = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation for written documents (None = compact)"
    )


class ServerConfig(BaseModel):
    """HTTP ingestion server configuration."""

    host: str = Field(
        default="127.0.0.1",
        description="Interface to bind"
    )
    port: int = Field(
        default=8787,
        ge=1,
        le=65535,
        description="Port to listen on"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to post events from a browser"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level"
    )
    file: str | None = Field(
        default=None,
        description="Log file path (None = console only)"
    )
    json_format: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )


class JournalConfig(BaseSettings):
    """
    Main sessionjournal configuration.

    Configuration can be loaded from:
    1. YAML file (sessionjournal.yaml or journal.yaml)
    2. Environment variables (SESSION_JOURNAL_* prefix)
    3. Programmatic setup
    """

    model_config = SettingsConfigDict(
        env_prefix="SESSION_JOURNAL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    default_task_name: str = Field(
        default="UNKNOWN-TASK",
        description="Task name used when a session declares none"
    )

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "JournalConfig":
        """
        Load configuration from file and environment.

        Priority (highest to lowest):
        1. Environment variables
        2. Specified config file
        3. Default config files (sessionjournal.yaml, journal.yaml)
        4. Default values
        """
        config_data: dict = {}

        if config_path:
            config_file = Path(config_path)
            if not config_file.exists():
                raise FileNotFoundError(f"Config file not found: {config_file}")
            config_data = cls._load_yaml(config_file)
        else:
            for filename in [
                "sessionjournal.yaml",
                "journal.yaml",
                "sessionjournal.yml",
                "journal.yml",
            ]:
                config_file = Path(filename)
                if config_file.exists():
                    config_data = cls._load_yaml(config_file)
                    break

        # Init kwargs outrank env vars in pydantic-settings, so only pass
        # file values that the environment does not override.
        return cls(**cls._without_env_overrides(config_data))

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        """Load YAML configuration file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if data else {}

    @classmethod
    def _without_env_overrides(cls, data: dict) -> dict:
        """Drop file values that are set from the environment."""
        prefix = cls.model_config.get("env_prefix", "").lower()
        env_keys = {key.lower() for key in os.environ}
        result = {}
        for key, value in data.items():
            env_name = f"{prefix}{key}".lower()
            if env_name in env_keys:
                continue
            if isinstance(value, dict):
                nested_prefix = f"{env_name}__"
                value = {
                    k: v for k, v in value.items()
                    if f"{nested_prefix}{k}".lower() not in env_keys
                }
            result[key] = value
        return result

    def save(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if necessary."""
        data_dir = Path(self.storage.data_dir)
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir


# Environment variables understood by JournalConfig, for `config env`
ENV_VARS = {
    "SESSION_JOURNAL_STORAGE__DATA_DIR": "Directory holding the journal documents",
    "SESSION_JOURNAL_SERVER__HOST": "Interface the HTTP API binds",
    "SESSION_JOURNAL_SERVER__PORT": "Port the HTTP API listens on",
    "SESSION_JOURNAL_LOGGING__LEVEL": "Log level (DEBUG, INFO, WARNING, ERROR)",
    "SESSION_JOURNAL_LOGGING__FILE": "Optional log file path",
    "SESSION_JOURNAL_DEFAULT_TASK_NAME": "Task name used when a session declares none",
}
