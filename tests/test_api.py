"""Tests for ui/app.py: JSON API over the store, profile, presence, activity."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from ui import app as web


@pytest.fixture
def client(workspace, monkeypatch):
    monkeypatch.delenv("LIFESYNC_USERNAME", raising=False)
    monkeypatch.delenv("LIFESYNC_PASSWORD", raising=False)
    web.reset_stores()
    yield TestClient(web.app)
    web.reset_stores()


def _create(client, name, icon="list.bullet"):
    resp = client.post("/api/todos", json={"name": name, "icon": icon})
    assert resp.status_code == 200
    return resp.json()["todo"]


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_create_and_list(client):
    milk = _create(client, "Buy milk", "cart")
    _create(client, "Call mom", "phone")
    data = client.get("/api/todos").json()
    assert [t["name"] for t in data["todos"]] == ["Buy milk", "Call mom"]
    assert data["todos"][0]["id"] == milk["id"]
    assert data["count"] == 2 and data["done"] == 0
    assert "calendar" in data["icons"]


def test_create_requires_name(client):
    assert client.post("/api/todos", json={"icon": "star"}).status_code == 400
    assert client.post("/api/todos", json={"name": "   "}).status_code == 400


def test_toggle_and_delete(client):
    item = _create(client, "Buy milk")
    resp = client.post(f"/api/todos/{item['id']}/toggle")
    assert resp.json()["todo"]["isDone"] is True
    assert client.delete(f"/api/todos/{item['id']}").json()["ok"] is True
    assert client.get("/api/todos").json()["count"] == 0


def test_toggle_and_delete_unknown(client):
    assert client.post("/api/todos/missing/toggle").status_code == 404
    assert client.delete("/api/todos/missing").status_code == 404


def test_reorder(client):
    for name in ("A", "B", "C"):
        _create(client, name)
    resp = client.post("/api/todos/reorder", json={"from": 0, "to": 2})
    assert [t["name"] for t in resp.json()["todos"]] == ["B", "C", "A"]
    assert client.post("/api/todos/reorder", json={"from": 5, "to": 0}).status_code == 400
    assert client.post("/api/todos/reorder", json={"from": "x"}).status_code == 400


def test_store_persists_across_processes(client, workspace):
    _create(client, "Buy milk")
    web.reset_stores()
    assert [t["name"] for t in client.get("/api/todos").json()["todos"]] == ["Buy milk"]


def test_index_html(client):
    _create(client, "<script>")
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Hi Frank," in resp.text
    assert "&lt;script&gt;" in resp.text


def test_profile_get_put(client):
    assert client.get("/api/profile").json()["firstName"] == "Oscar"
    resp = client.put("/api/profile", json={"workAddress": "Lyon"})
    assert resp.json()["profile"]["workAddress"] == "Lyon"
    bad = client.put("/api/profile", json={"homeLocation": {"latitude": 100, "longitude": 0}})
    assert bad.status_code == 400


def test_presence(client):
    resp = client.post("/api/presence", json={"latitude": 48.8918, "longitude": 2.2361})
    data = resp.json()
    assert data["work"]["atPlace"] is True
    assert data["home"]["atPlace"] is False
    assert data["home"]["distanceKm"] > 5
    assert client.post("/api/presence", json={"latitude": "north"}).status_code == 400


def test_activity(client):
    fixed_now = datetime(2026, 2, 11, 20, 15, tzinfo=timezone.utc)
    with patch.object(web, "now_local", return_value=fixed_now):
        data = client.get("/api/activity").json()
    periods = {p["period"]: p for p in data["periods"]}
    assert periods["day"]["steps"] == 5000
    assert periods["month"]["distanceKm"] == 7.0
    assert periods["year"]["goal"] == 3650000


def test_basic_auth(client, monkeypatch):
    monkeypatch.setenv("LIFESYNC_USERNAME", "oscar")
    monkeypatch.setenv("LIFESYNC_PASSWORD", "secret")
    assert client.get("/api/todos").status_code == 401
    assert client.get("/api/todos", auth=("oscar", "wrong")).status_code == 401
    assert client.get("/api/todos", auth=("oscar", "secret")).status_code == 200


def test_profile_and_presence_on_corrupt_prefs(client, workspace):
    (workspace / "prefs.json").write_text("{not json", encoding="utf-8")
    assert client.put("/api/profile", json={"email": "x@example.com"}).status_code == 500
    resp = client.post("/api/presence", json={"latitude": 48.0, "longitude": 2.0})
    assert resp.status_code == 500
