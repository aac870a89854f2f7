"""Record stores: the seam between route handlers and persistence.

Both implementations take plain python values (dates, datetimes, lists) and
return validated ``TaskOut`` / ``CategoryOut`` objects, so the routes and the
import/export code never know which backend is active.
"""
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple
from sqlmodel import Session
from ..core.errors import NotFoundError
from ..db import crud
from ..db.models import AudioRecording
from ..schemas.categories import CategoryOut
from ..schemas.tasks import TaskOut


class RecordStore(Protocol):
    def list_tasks(self, user_id: str) -> List[TaskOut]: ...
    def get_task(self, user_id: str, task_id: str) -> TaskOut: ...
    def create_task(self, user_id: str, data: Dict[str, Any]) -> TaskOut: ...
    def update_task(self, user_id: str, task_id: str, changes: Dict[str, Any]) -> TaskOut: ...
    def delete_task(self, user_id: str, task_id: str) -> None: ...
    def delete_tasks(self, user_id: str, task_ids: Iterable[str]) -> List[str]: ...
    def list_categories(self, user_id: str) -> List[CategoryOut]: ...
    def create_category(self, user_id: str, data: Dict[str, Any]) -> CategoryOut: ...
    def update_category(self, user_id: str, category_id: str, changes: Dict[str, Any]) -> CategoryOut: ...
    def delete_category(self, user_id: str, category_id: str) -> None: ...
    def save_audio(
        self, user_id: str, task_id: str, path: str, content: bytes,
        content_type: str, duration: Optional[float],
    ) -> str: ...
    def load_audio(self, path: str) -> Tuple[bytes, str]: ...


class LocalStore:
    """SQLite-backed store used offline and in development."""

    def __init__(self, session: Session):
        self.session = session

    def list_tasks(self, user_id: str) -> List[TaskOut]:
        return [TaskOut.model_validate(t) for t in crud.list_tasks(self.session, user_id)]

    def get_task(self, user_id: str, task_id: str) -> TaskOut:
        task = crud.get_task(self.session, user_id, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return TaskOut.model_validate(task)

    def create_task(self, user_id: str, data: Dict[str, Any]) -> TaskOut:
        return TaskOut.model_validate(crud.create_task(self.session, user_id, data))

    def update_task(self, user_id: str, task_id: str, changes: Dict[str, Any]) -> TaskOut:
        return TaskOut.model_validate(crud.update_task(self.session, user_id, task_id, changes))

    def delete_task(self, user_id: str, task_id: str) -> None:
        crud.delete_task(self.session, user_id, task_id)

    def delete_tasks(self, user_id: str, task_ids: Iterable[str]) -> List[str]:
        return crud.delete_tasks(self.session, user_id, task_ids)

    def list_categories(self, user_id: str) -> List[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in crud.list_categories(self.session, user_id)]

    def create_category(self, user_id: str, data: Dict[str, Any]) -> CategoryOut:
        return CategoryOut.model_validate(crud.create_category(self.session, user_id, data))

    def update_category(self, user_id: str, category_id: str, changes: Dict[str, Any]) -> CategoryOut:
        return CategoryOut.model_validate(
            crud.update_category(self.session, user_id, category_id, changes)
        )

    def delete_category(self, user_id: str, category_id: str) -> None:
        crud.delete_category(self.session, user_id, category_id)

    def save_audio(self, user_id, task_id, path, content, content_type, duration) -> str:
        crud.save_audio(self.session, AudioRecording(
            path=path,
            user_id=user_id,
            task_id=task_id,
            content=content,
            content_type=content_type,
            duration=duration,
        ))
        return path

    def load_audio(self, path: str) -> Tuple[bytes, str]:
        rec = crud.load_audio(self.session, path)
        if rec is None:
            raise NotFoundError("Audio not found")
        return rec.content, rec.content_type
