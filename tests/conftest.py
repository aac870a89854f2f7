# tests/conftest.py

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from learnlog.core.security import CurrentUser, get_current_user
from learnlog.db import models  # noqa: F401
from learnlog.db.session import get_session
from learnlog.main import app
from learnlog.services.store import LocalStore

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, content: bytes = b"",
                 headers: Optional[Dict[str, str]] = None, text: str = "") -> None:
        self.status_code = status_code
        self._json = json_data
        self.content = content
        self.headers = headers or {}
        self.text = text

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("no json body")
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeHttp:
    """Stands in for requests.Session: replays queued responses and records calls."""

    def __init__(self, *responses: FakeResponse) -> None:
        self.responses: List[FakeResponse] = list(responses)
        self.calls: List[tuple] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine) -> Iterator[Session]:
    with Session(engine) as s:
        yield s


@pytest.fixture()
def store(session: Session) -> LocalStore:
    return LocalStore(session)


@pytest.fixture()
def login() -> Callable[[str], None]:
    """Switch the authenticated caller for subsequent API requests."""

    def _login(user_id: str) -> None:
        app.dependency_overrides[get_current_user] = lambda: CurrentUser(id=user_id, token="test-token")

    return _login


@pytest.fixture()
def client(engine, login: Callable[[str], None]) -> Iterator[TestClient]:
    def _session() -> Iterator[Session]:
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    login(USER_ID)
    yield TestClient(app)
    app.dependency_overrides.clear()


def task_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "date": "2025-09-19",
        "focus_area": "DSA",
        "title": "Two Sum",
        "details": "LeetCode #1",
        "time_estimate": "45 min",
    }
    payload.update(overrides)
    return payload


def task_row(**overrides: Any) -> Dict[str, Any]:
    row = {
        "id": "t-1",
        "user_id": USER_ID,
        **task_payload(),
        "status": "todo",
        "notes": None,
        "links": None,
        "code": None,
        "code_language": None,
        "is_dsa": True,
        "completed_at": None,
        "audio_path": None,
        "audio_duration": None,
        "created_at": "2025-09-18T10:00:00+00:00",
        "updated_at": "2025-09-18T10:00:00+00:00",
    }
    row.update(overrides)
    return row
