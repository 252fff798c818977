import os

import pytest
from fastapi.testclient import TestClient

# Set env vars BEFORE any imports that might cache them
os.environ["EVAL_SYNC_STORE_FORCE_FILE"] = "1"
os.environ["EVAL_SYNC_FETCH_DELAY"] = "0"
os.environ["EVAL_SYNC_PUSH_DELAY"] = "0"
os.environ["EVAL_SYNC_PING_DELAY"] = "0"

from api import dependencies  # noqa: E402
from api.main import app  # noqa: E402


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("EVAL_SYNC_STORE_FORCE_FILE", "1")
    monkeypatch.setenv("EVAL_SYNC_STORE_DIR", str(tmp_path / "sync_store"))
    monkeypatch.setenv("EVAL_SYNC_STORAGE_PREFIX", "api_test_")
    dependencies.get_settings.cache_clear()
    dependencies.get_alert_buffer.cache_clear()
    dependencies.get_sync_service.cache_clear()

    with TestClient(app) as test_client:
        yield test_client

    dependencies.get_sync_service.cache_clear()
    dependencies.get_alert_buffer.cache_clear()
    dependencies.get_settings.cache_clear()


def _configure(client, company_id="acme"):
    resp = client.post("/sync/company", json={"companyId": company_id})
    assert resp.status_code == 200
    return resp.json()


def test_health_check(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["storagePrefix"] == "api_test_"
    assert body["companyConfigured"] is False


def test_status_starts_in_local_mode(client):
    body = client.get("/sync/status").json()

    assert body["indicator"]["label"] == "Configure company"
    assert body["detailed"]["mode"]["label"] == "Local mode"
    assert body["config"]["companyId"] is None
    assert body["state"]["online"] is True
    assert body["lastResult"] is None


def test_manual_sync_requires_company(client):
    body = client.post("/sync/now").json()

    assert body["skipped"] is True
    assert body["reason"] == "not_configured"

    alerts = client.get("/sync/alerts").json()["alerts"]
    assert alerts[-1]["message"] == "Configure the company first!"
    assert alerts[-1]["level"] == "danger"


def test_configure_company_runs_initial_sync(client):
    body = _configure(client)

    assert body["config"]["companyId"] == "ACME"
    assert body["config"]["active"] is True
    assert body["indicator"]["label"] == "Synced"
    assert body["lastResult"]["success"] is True


def test_configure_company_rejects_blank_id(client):
    resp = client.post("/sync/company", json={"companyId": "   "})

    assert resp.status_code == 400
    assert "Company ID is required" in resp.json()["detail"]


def test_local_edit_is_pushed_on_next_sync(client):
    _configure(client)

    resp = client.put("/data", json={"evaluations": [{"id": 1}, {"id": 2}]})
    assert resp.status_code == 200
    assert resp.json()["evaluationCount"] == 2

    body = client.post("/sync/now").json()
    assert body["success"] is True
    assert body["direction"] == "local_wins"
    assert body["hasConflict"] is True

    data = client.get("/data").json()
    assert data["evaluations"] == [{"id": 1}, {"id": 2}]
    assert data["collaboratorCount"] == 0


def test_scheduled_sync_waits_for_active_config(client):
    body = client.post("/sync/scheduled").json()
    assert body["skipped"] is True
    assert body["active"] is False

    _configure(client)
    body = client.post("/sync/scheduled").json()
    assert body["success"] is True


def test_connectivity_changes(client):
    _configure(client)

    offline = client.post("/sync/connectivity", json={"online": False}).json()
    assert offline["sync"] is None
    assert offline["status"]["indicator"]["label"] == "Offline"
    assert client.post("/sync/unload").json() == {"recorded": False}

    online = client.post("/sync/connectivity", json={"online": True}).json()
    assert online["sync"]["success"] is True
    assert online["status"]["indicator"]["label"] == "Synced"
    assert client.post("/sync/unload").json() == {"recorded": True}


def test_reset_keeps_local_data(client):
    _configure(client)
    client.put("/data", json={"managers": {"m1": {"name": "Rita"}}})

    body = client.delete("/sync/company").json()

    assert body["config"]["companyId"] is None
    assert body["indicator"]["label"] == "Configure company"
    assert client.get("/data").json()["managers"] == {"m1": {"name": "Rita"}}


def test_sync_log_and_clear(client):
    _configure(client)

    log = client.get("/sync/log").json()
    messages = [entry["message"] for entry in log["entries"]]
    assert log["count"] == len(messages)
    assert "Starting sync..." in messages
    assert messages[-1] == "Sync completed successfully"

    assert client.delete("/sync/log").json() == {"cleared": True}
    assert client.get("/sync/log").json()["count"] == 0


def test_test_connection(client):
    assert client.post("/sync/test-connection").json() == {"ok": True}
