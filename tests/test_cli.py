"""Tests for the command line interface."""
from __future__ import annotations

import pytest

import cli
from evaluation_sync.config import Settings
from evaluation_sync.storage import get_item, keys, set_item
from evaluation_sync.sync import SyncService

PREFIX = "cli_test_"


@pytest.fixture(autouse=True)
def env(tmp_path, monkeypatch):
    monkeypatch.setenv("EVAL_SYNC_STORE_FORCE_FILE", "1")
    monkeypatch.setenv("EVAL_SYNC_STORE_DIR", str(tmp_path / "sync_store"))
    monkeypatch.setenv("EVAL_SYNC_STORAGE_PREFIX", PREFIX)
    monkeypatch.setenv("EVAL_SYNC_FETCH_DELAY", "0")
    monkeypatch.setenv("EVAL_SYNC_PUSH_DELAY", "0")
    monkeypatch.setenv("EVAL_SYNC_PING_DELAY", "0")


def test_status_in_local_mode(capsys):
    assert cli.main(["status"]) == 0

    out = capsys.readouterr().out
    assert "Status: Configure company" in out
    assert "Mode: Local mode" in out
    assert "0 evaluations" in out


def test_sync_without_company_fails(capsys):
    assert cli.main(["sync"]) == 1

    captured = capsys.readouterr()
    assert "[DANGER] Configure the company first!" in captured.err
    assert "Sync skipped: not_configured" in captured.out


def test_configure_then_sync(capsys):
    assert cli.main(["configure", "acme"]) == 0
    assert get_item(PREFIX, keys.COMPANY_ID) == "ACME"
    assert "[SUCCESS] Company configured: ACME" in capsys.readouterr().out

    assert cli.main(["sync"]) == 0
    out = capsys.readouterr().out
    assert "Starting sync..." in out
    assert "Sync finished: in_sync" in out


def test_configure_without_sync(capsys):
    assert cli.main(["configure", "acme", "--no-sync"]) == 0

    assert get_item(PREFIX, keys.SERVER_TIMESTAMP) is None


def test_configure_blank_company_fails(capsys):
    assert cli.main(["configure", "  "]) == 1
    assert "Company ID is required!" in capsys.readouterr().err


def test_reset_requires_confirmation(capsys):
    set_item(PREFIX, keys.COMPANY_ID, "ACME")

    assert cli.main(["reset"]) == 1
    assert get_item(PREFIX, keys.COMPANY_ID) == "ACME"

    assert cli.main(["reset", "--yes"]) == 0
    assert get_item(PREFIX, keys.COMPANY_ID) is None


def test_test_connection(capsys):
    assert cli.main(["test-connection"]) == 0
    assert "Connection tested successfully!" in capsys.readouterr().out


def test_invalid_settings_exit_with_error(monkeypatch, capsys):
    monkeypatch.setenv("EVAL_SYNC_INTERVAL_MINUTES", "soon")

    assert cli.main(["status"]) == 1
    assert "Configuration error" in capsys.readouterr().err


def test_watch_runs_scheduled_syncs(capsys):
    set_item(PREFIX, keys.COMPANY_ID, "ACME")
    settings = Settings(storage_prefix=PREFIX, fetch_delay=0, push_delay=0, ping_delay=0)
    service = SyncService(settings)
    sleeps = []

    assert cli._cmd_watch(service, settings, iterations=3, interval=0.5, sleep=sleeps.append) == 0

    assert sleeps == [30.0, 30.0, 30.0]
    messages = [entry.message for entry in service.log.entries()]
    assert messages.count("Scheduled automatic sync") == 3
    assert "Automatic sync every 0.5 minutes" in capsys.readouterr().out


def test_watch_stops_on_interrupt(capsys):
    settings = Settings(storage_prefix=PREFIX)
    service = SyncService(settings)

    def interrupt(_seconds):
        raise KeyboardInterrupt

    assert cli._cmd_watch(service, settings, iterations=None, interval=None, sleep=interrupt) == 0
    assert "Stopped." in capsys.readouterr().out
