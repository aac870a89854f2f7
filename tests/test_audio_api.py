# tests/test_audio_api.py

from __future__ import annotations

from fastapi.testclient import TestClient

from learnlog.services.tasks import audio_object_path, owns_path

from conftest import OTHER_USER_ID, USER_ID, task_payload


def _task_id(client: TestClient) -> str:
    return client.post("/api/tasks", json=task_payload()).json()["id"]


def test_upload_sets_owner_prefixed_path(client: TestClient) -> None:
    task_id = _task_id(client)
    r = client.post(
        f"/api/tasks/{task_id}/audio",
        files={"audio": ("recording.webm", b"RIFFfake-audio", "audio/webm")},
        data={"duration": "3.5"},
    )
    assert r.status_code == 200, r.text
    task = r.json()
    assert task["audio_path"].startswith(f"{USER_ID}/{task_id}/")
    assert task["audio_path"].endswith(".webm")
    assert task["audio_duration"] == 3.5

    audio = client.get(f"/api/audio/{task['audio_path']}")
    assert audio.status_code == 200
    assert audio.content == b"RIFFfake-audio"
    assert audio.headers["content-type"].startswith("audio/webm")
    assert audio.headers["cache-control"] == "private, max-age=3600"


def test_upload_without_file_is_bad_request(client: TestClient) -> None:
    task_id = _task_id(client)
    r = client.post(f"/api/tasks/{task_id}/audio", data={"duration": "2"})
    assert r.status_code == 400
    assert r.json() == {"error": "No audio file provided"}


def test_upload_to_unknown_task_is_not_found(client: TestClient) -> None:
    r = client.post("/api/tasks/nope/audio", files={"audio": ("r.webm", b"x", "audio/webm")})
    assert r.status_code == 404


def test_download_outside_prefix_is_forbidden(client: TestClient, login) -> None:
    task_id = _task_id(client)
    path = client.post(
        f"/api/tasks/{task_id}/audio",
        files={"audio": ("r.webm", b"secret", "audio/webm")},
    ).json()["audio_path"]

    login(OTHER_USER_ID)
    r = client.get(f"/api/audio/{path}")
    assert r.status_code == 403
    assert r.json() == {"error": "Forbidden"}


def test_download_missing_audio_is_not_found(client: TestClient) -> None:
    r = client.get(f"/api/audio/{USER_ID}/t/123.webm")
    assert r.status_code == 404


def test_owns_path_rules() -> None:
    assert owns_path("u1", "u1/t/1.webm")
    assert not owns_path("u1", "u10/t/1.webm")
    assert not owns_path("u1", "u2/t/1.webm")
    assert not owns_path("u1", "u1/../u2/t/1.webm")
    assert not owns_path("u1", "u1//t/1.webm")


def test_audio_object_path_uses_content_type() -> None:
    assert audio_object_path("u1", "t1", "audio/wav", now_ms=42) == "u1/t1/42.wav"
    assert audio_object_path("u1", "t1", "audio/webm;codecs=opus", now_ms=7) == "u1/t1/7.webm"
    assert audio_object_path("u1", "t1", "application/octet-stream", now_ms=1) == "u1/t1/1.webm"
