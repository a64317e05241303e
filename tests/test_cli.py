"""
Tests for CLI commands.
"""

import json

import pytest
from typer.testing import CliRunner

from sessionjournal.cli.app import app


runner = CliRunner()


@pytest.fixture
def journal_dir(tmp_path, monkeypatch):
    """Point the CLI at a temporary data directory."""
    monkeypatch.chdir(tmp_path)
    data_dir = tmp_path / "journal"
    monkeypatch.setenv("SESSION_JOURNAL_STORAGE__DATA_DIR", str(data_dir))
    return data_dir


def ingest(payload):
    return runner.invoke(app, ["--quiet", "ingest"], input=json.dumps(payload))


class TestGlobalFlags:
    """Tests for global CLI flags."""

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "sessionjournal" in result.stdout

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Session-scoped event journal" in result.stdout

    def test_commands_listed(self):
        result = runner.invoke(app, ["--help"])
        for command in ("serve", "ingest", "events", "tasks", "config"):
            assert command in result.stdout


class TestIngestCommand:
    """Tests for the ingest command."""

    def test_ingest_single_event(self, journal_dir):
        result = runner.invoke(
            app,
            ["ingest"],
            input=json.dumps({"event": "session_started", "session_id": "s1", "task": "Checkout Flow"}),
        )

        assert result.exit_code == 0
        assert "CHECKOUT-FLOW-1" in result.stdout
        live = json.loads((journal_dir / "events.json").read_text(encoding="utf-8"))
        assert live[0]["task_id"] == "CHECKOUT-FLOW-1"

    def test_ingest_batch_from_file(self, journal_dir, tmp_path):
        batch = tmp_path / "batch.json"
        batch.write_text(json.dumps([
            {"event": "session_started", "session_id": "s1", "task": "Search"},
            {"event": "step", "session_id": "s1"},
            {"event": "session_ended", "session_id": "s1"},
        ]), encoding="utf-8")

        result = runner.invoke(app, ["ingest", str(batch)])

        assert result.exit_code == 0
        saved = json.loads((journal_dir / "saved-events.json").read_text(encoding="utf-8"))
        assert len(saved) == 3
        assert json.loads((journal_dir / "events.json").read_text(encoding="utf-8")) == []

    def test_ingest_malformed_json(self, journal_dir):
        result = runner.invoke(app, ["ingest"], input="{broken")
        assert result.exit_code == 1
        assert "Malformed JSON" in result.stdout

    def test_ingest_invalid_event(self, journal_dir):
        result = ingest({"event": "session_started"})
        assert result.exit_code == 1
        assert "rejected" in result.stdout

    def test_ingest_missing_file(self, journal_dir, tmp_path):
        result = runner.invoke(app, ["ingest", str(tmp_path / "absent.json")])
        assert result.exit_code == 1


class TestEventsCommands:
    """Tests for events subcommands."""

    def test_live_empty(self, journal_dir):
        result = runner.invoke(app, ["events", "live"])
        assert result.exit_code == 0
        assert "No open session" in result.stdout

    def test_live_json(self, journal_dir):
        ingest({"event": "session_started", "session_id": "s1", "task": "A"})

        result = runner.invoke(app, ["events", "live", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["task_id"] == "A-1"

    def test_archive_filtered(self, journal_dir):
        for session_id in ("s1", "s2"):
            ingest({"event": "session_started", "session_id": session_id, "task": "A"})
            ingest({"event": "session_ended", "session_id": session_id})

        result = runner.invoke(app, ["events", "archive", "--session", "s2", "--json"])

        assert result.exit_code == 0
        assert {e["session_id"] for e in json.loads(result.stdout)} == {"s2"}

    def test_archive_empty(self, journal_dir):
        result = runner.invoke(app, ["events", "archive"])
        assert "Archive is empty" in result.stdout

    def test_counters(self, journal_dir):
        ingest({"event": "session_started", "session_id": "s1", "task": "Buy Now!"})

        result = runner.invoke(app, ["events", "counters"])

        assert result.exit_code == 0
        assert "BUY-NOW" in result.stdout


class TestTasksCommands:
    """Tests for tasks subcommands."""

    def test_list_empty(self, journal_dir):
        result = runner.invoke(app, ["tasks", "list"])
        assert result.exit_code == 0
        assert "No analytics data" in result.stdout

    def test_show_unknown_task(self, journal_dir):
        result = runner.invoke(app, ["tasks", "show", "Nope"])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_show_task(self, journal_dir):
        ingest({"event": "session_started", "session_id": "s1", "task": "Cart", "timestamp": 0})
        ingest({"event": "session_ended", "session_id": "s1", "timestamp": 2000})

        result = runner.invoke(app, ["tasks", "show", "cart"])

        assert result.exit_code == 0
        assert "CART-1" in result.stdout


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_config_show(self, journal_dir):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "Data Dir" in result.stdout

    def test_config_init(self, journal_dir, tmp_path):
        target = tmp_path / "sessionjournal.yaml"

        result = runner.invoke(app, ["config", "init", str(target)])
        assert result.exit_code == 0
        assert target.exists()

        result = runner.invoke(app, ["config", "init", str(target)])
        assert result.exit_code == 1

    def test_config_env(self):
        result = runner.invoke(app, ["config", "env"])
        assert result.exit_code == 0
        assert "SESSION_JOURNAL_STORAGE__DATA_DIR" in result.stdout
