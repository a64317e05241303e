"""
Tests for Pydantic models.
"""

import os

import pytest

from sessionjournal.models.config import JournalConfig
from sessionjournal.models.journal import Classification, IngestAck, JournalState


class TestIngestAck:
    """Tests for IngestAck model."""

    def test_wire_format(self):
        ack = IngestAck(
            event_count=3,
            classification=Classification.CONTINUE,
            state=JournalState.OPEN,
            task_id="A-1",
        )
        assert ack.to_response() == {"success": True, "eventCount": 3}

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            IngestAck(
                event_count=-1,
                classification=Classification.END,
                state=JournalState.EMPTY,
            )


class TestJournalConfig:
    """Tests for JournalConfig model."""

    @pytest.fixture(autouse=True)
    def isolated(self, tmp_path, monkeypatch):
        """Run from an empty directory with no journal env vars."""
        monkeypatch.chdir(tmp_path)
        for name in list(os.environ):
            if name.upper().startswith("SESSION_JOURNAL_"):
                monkeypatch.delenv(name)

    def test_defaults(self):
        config = JournalConfig.load()
        assert config.storage.data_dir == "./journal_data"
        assert config.storage.events_document == "events"
        assert config.storage.archive_document == "saved-events"
        assert config.storage.counters_document == "task-counts"
        assert config.server.port == 8787
        assert config.logging.level == "INFO"

    def test_save_and_load(self, tmp_path):
        config = JournalConfig()
        config.server.port = 9000
        config.storage.data_dir = "/srv/journal"
        config.save(tmp_path / "custom.yaml")

        loaded = JournalConfig.load(tmp_path / "custom.yaml")
        assert loaded.server.port == 9000
        assert loaded.storage.data_dir == "/srv/journal"

    def test_default_file_discovered(self, tmp_path):
        (tmp_path / "journal.yaml").write_text("server:\n  port: 9100\n", encoding="utf-8")
        assert JournalConfig.load().server.port == 9100

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JournalConfig.load(tmp_path / "absent.yaml")

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "journal.yaml").write_text(
            "server:\n  port: 9100\n  host: 0.0.0.0\n", encoding="utf-8"
        )
        monkeypatch.setenv("SESSION_JOURNAL_SERVER__PORT", "9200")

        config = JournalConfig.load()
        assert config.server.port == 9200
        assert config.server.host == "0.0.0.0"

    def test_invalid_port_rejected(self):
        with pytest.raises(ValueError):
            JournalConfig(server={"port": 70000})

    def test_get_data_dir_creates(self, tmp_path):
        config = JournalConfig(storage={"data_dir": str(tmp_path / "d")})
        assert config.get_data_dir().exists()
