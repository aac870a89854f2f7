# tests/test_tasks_api.py

from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from learnlog.core.config import settings
from learnlog.core.security import get_current_user
from learnlog.main import app

from conftest import OTHER_USER_ID, USER_ID, task_payload


def _create(client: TestClient, **overrides) -> dict:
    r = client.post("/api/tasks", json=task_payload(**overrides))
    assert r.status_code == 200, r.text
    return r.json()


def test_create_and_list_tasks_ordered_by_date(client: TestClient) -> None:
    _create(client, date="2025-09-21", title="Later")
    created = _create(client, date="2025-09-19", title="Sooner")

    assert created["user_id"] == USER_ID
    assert created["status"] == "todo"
    assert created["completed_at"] is None

    r = client.get("/api/tasks")
    assert r.status_code == 200
    assert [t["title"] for t in r.json()] == ["Sooner", "Later"]


def test_get_single_task(client: TestClient) -> None:
    task = _create(client)
    r = client.get(f"/api/tasks/{task['id']}")
    assert r.status_code == 200
    assert r.json()["title"] == "Two Sum"


def test_missing_token_is_unauthorized(client: TestClient) -> None:
    app.dependency_overrides.pop(get_current_user)
    r = client.get("/api/tasks")
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_local_token_lookup(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    app.dependency_overrides.pop(get_current_user)
    monkeypatch.setattr(settings, "STORE_BACKEND", "local")
    monkeypatch.setattr(settings, "LOCAL_API_TOKENS", {"dev-token": USER_ID})

    assert client.get("/api/tasks", headers={"Authorization": "Bearer dev-token"}).status_code == 200
    assert client.get("/api/tasks", headers={"Authorization": "Bearer nope"}).status_code == 401
    assert client.get("/api/tasks", headers={"Authorization": "Basic dev-token"}).status_code == 401


def test_completed_status_sets_completed_at(client: TestClient) -> None:
    task = _create(client)

    done = client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}).json()
    assert done["status"] == "completed"
    assert done["completed_at"] is not None

    reset = client.put(f"/api/tasks/{task['id']}", json={"status": "todo"}).json()
    assert reset["status"] == "todo"
    assert reset["completed_at"] is None

    for status in ("in-progress", "skipped"):
        other = client.put(f"/api/tasks/{task['id']}", json={"status": status}).json()
        assert other["completed_at"] is None


def test_create_completed_task_gets_timestamp(client: TestClient) -> None:
    task = _create(client, status="completed")
    assert task["completed_at"] is not None


def test_partial_update_keeps_other_fields(client: TestClient) -> None:
    task = _create(client, notes="old notes")
    r = client.put(f"/api/tasks/{task['id']}", json={"links": ["https://leetcode.com/problems/two-sum"]})
    assert r.status_code == 200
    body = r.json()
    assert body["links"] == ["https://leetcode.com/problems/two-sum"]
    assert body["notes"] == "old notes"
    assert body["title"] == "Two Sum"

    cleared = client.put(f"/api/tasks/{task['id']}", json={"notes": None}).json()
    assert cleared["notes"] is None


def test_null_for_required_field_is_rejected(client: TestClient) -> None:
    task = _create(client)
    for field in ("title", "date", "focus_area", "details", "time_estimate", "is_dsa"):
        r = client.put(f"/api/tasks/{task['id']}", json={field: None})
        assert r.status_code == 422, field

    unchanged = client.get(f"/api/tasks/{task['id']}").json()
    assert unchanged["title"] == "Two Sum"
    assert unchanged["date"] == "2025-09-19"


def test_invalid_status_rejected(client: TestClient) -> None:
    task = _create(client)
    r = client.put(f"/api/tasks/{task['id']}", json={"status": "done"})
    assert r.status_code == 422


def test_other_users_task_is_not_found(client: TestClient, login) -> None:
    task = _create(client)

    login(OTHER_USER_ID)
    assert client.get("/api/tasks").json() == []
    assert client.put(f"/api/tasks/{task['id']}", json={"title": "x"}).status_code == 404
    r = client.delete(f"/api/tasks/{task['id']}")
    assert r.status_code == 404
    assert r.json() == {"error": "Task not found"}

    login(USER_ID)
    assert client.get(f"/api/tasks/{task['id']}").json()["title"] == "Two Sum"


def test_delete_task(client: TestClient) -> None:
    task = _create(client)
    r = client.delete(f"/api/tasks/{task['id']}")
    assert r.json() == {"success": True}
    assert client.get("/api/tasks").json() == []


def test_bulk_delete_removes_exactly_selected(client: TestClient, login) -> None:
    ids = [_create(client, title=f"Task {i}")["id"] for i in range(5)]
    login(OTHER_USER_ID)
    foreign = _create(client, title="Not mine")["id"]
    login(USER_ID)

    r = client.post("/api/tasks/bulk-delete", json={"ids": [ids[1], ids[3], foreign]})
    assert r.status_code == 200
    assert sorted(r.json()["deleted"]) == sorted([ids[1], ids[3]])

    remaining = {t["id"] for t in client.get("/api/tasks").json()}
    assert remaining == {ids[0], ids[2], ids[4]}

    login(OTHER_USER_ID)
    assert [t["id"] for t in client.get("/api/tasks").json()] == [foreign]


def test_audio_path_outside_owner_prefix_forbidden(client: TestClient) -> None:
    task = _create(client)
    r = client.put(f"/api/tasks/{task['id']}", json={"audio_path": f"{OTHER_USER_ID}/x/1.webm"})
    assert r.status_code == 403

    ok = client.put(f"/api/tasks/{task['id']}", json={"audio_path": f"{USER_ID}/{task['id']}/1.webm"})
    assert ok.status_code == 200


def test_list_filters(client: TestClient) -> None:
    today = date.today()
    _create(client, date=today.isoformat(), title="Today graph", focus_area="DSA")
    _create(client, date=(today - timedelta(days=3)).isoformat(), title="Old one", focus_area="English")
    _create(client, date=(today - timedelta(days=20)).isoformat(), title="Ancient", status="completed")
    _create(client, date=(today + timedelta(days=2)).isoformat(), title="Upcoming", details="graph theory")

    def titles(**params) -> set:
        return {t["title"] for t in client.get("/api/tasks", params=params).json()}

    assert titles(when="today") == {"Today graph"}
    assert titles(when="overdue") == {"Old one"}
    assert titles(when="week") == {"Today graph", "Old one", "Upcoming"}
    assert titles(q="GRAPH") == {"Today graph", "Upcoming"}
    assert titles(status="completed") == {"Ancient"}
    assert titles(focus_area="English") == {"Old one"}
    assert client.get("/api/tasks", params={"when": "someday"}).status_code == 422


def test_health_needs_no_token(client: TestClient) -> None:
    app.dependency_overrides.pop(get_current_user)
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_counts_follow_list_filters(client: TestClient) -> None:
    today = date.today()
    _create(client, date=(today - timedelta(days=2)).isoformat(), title="Late")
    _create(client, date=(today - timedelta(days=2)).isoformat(), title="Finished", status="completed")
    _create(client, date=today.isoformat(), title="Graph BFS", status="in-progress")

    r = client.get("/api/tasks/counts")
    assert r.status_code == 200
    assert r.json() == {"total": 3, "completed": 1, "in_progress": 1, "overdue": 1}

    assert client.get("/api/tasks/counts", params={"q": "bfs"}).json() == {
        "total": 1, "completed": 0, "in_progress": 1, "overdue": 0,
    }
