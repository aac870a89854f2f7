# tests/test_categories_api.py

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import OTHER_USER_ID, USER_ID


def _add(client: TestClient, name: str, color: str = "#3b82f6"):
    return client.post("/api/categories", json={"name": name, "color": color})


def test_create_and_list_sorted_by_name(client: TestClient) -> None:
    assert _add(client, "System Design").status_code == 200
    assert _add(client, "DSA", "#ef4444").status_code == 200

    cats = client.get("/api/categories").json()
    assert [c["name"] for c in cats] == ["DSA", "System Design"]
    assert cats[0]["color"] == "#ef4444"


def test_duplicate_name_is_rejected_case_insensitively(client: TestClient) -> None:
    assert _add(client, "English").status_code == 200
    r = _add(client, "english")
    assert r.status_code == 409
    assert "already exists" in r.json()["error"]
    assert len(client.get("/api/categories").json()) == 1


def test_same_name_allowed_for_different_users(client: TestClient, login) -> None:
    assert _add(client, "DSA").status_code == 200
    login(OTHER_USER_ID)
    assert _add(client, "dsa").status_code == 200


def test_rename_conflict_and_recolor(client: TestClient) -> None:
    dsa = _add(client, "DSA").json()
    english = _add(client, "English").json()

    r = client.put(f"/api/categories/{english['id']}", json={"name": "dsa"})
    assert r.status_code == 409

    r = client.put(f"/api/categories/{dsa['id']}", json={"name": "Dsa", "color": "#10b981"})
    assert r.status_code == 200
    assert r.json()["name"] == "Dsa"
    assert r.json()["color"] == "#10b981"


def test_invalid_color_rejected(client: TestClient) -> None:
    assert _add(client, "Math", "blue").status_code == 422


def test_delete_category(client: TestClient, login) -> None:
    cat = _add(client, "DSA").json()

    login(OTHER_USER_ID)
    assert client.delete(f"/api/categories/{cat['id']}").status_code == 404

    login(USER_ID)
    assert client.delete(f"/api/categories/{cat['id']}").json() == {"success": True}
    assert client.get("/api/categories").json() == []
