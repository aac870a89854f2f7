from typing import Any, Dict, Iterable, List, Optional
from sqlmodel import Session, select
from ..core.errors import ConflictError, NotFoundError
from .models import AudioRecording, Category, Task, utcnow

def list_tasks(session: Session, user_id: str) -> List[Task]:
    stmt = select(Task).where(Task.user_id == user_id).order_by(Task.date, Task.created_at)
    return list(session.exec(stmt).all())

def get_task(session: Session, user_id: str, task_id: str) -> Optional[Task]:
    task = session.get(Task, task_id)
    if task is None or task.user_id != user_id:
        return None
    return task

def create_task(session: Session, user_id: str, data: Dict[str, Any]) -> Task:
    task = Task(**data, user_id=user_id)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task

def update_task(session: Session, user_id: str, task_id: str, changes: Dict[str, Any]) -> Task:
    task = get_task(session, user_id, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    for key, value in changes.items():
        setattr(task, key, value)
    task.updated_at = utcnow()
    session.add(task)
    session.commit()
    session.refresh(task)
    return task

def delete_task(session: Session, user_id: str, task_id: str) -> None:
    task = get_task(session, user_id, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    session.delete(task)
    session.commit()

def delete_tasks(session: Session, user_id: str, task_ids: Iterable[str]) -> List[str]:
    wanted = set(task_ids)
    if not wanted:
        return []
    stmt = select(Task).where(Task.user_id == user_id, Task.id.in_(list(wanted)))
    rows = list(session.exec(stmt).all())
    deleted = [t.id for t in rows]
    for task in rows:
        session.delete(task)
    session.commit()
    return deleted

def list_categories(session: Session, user_id: str) -> List[Category]:
    stmt = select(Category).where(Category.user_id == user_id).order_by(Category.name)
    return list(session.exec(stmt).all())

def get_category(session: Session, user_id: str, category_id: str) -> Optional[Category]:
    category = session.get(Category, category_id)
    if category is None or category.user_id != user_id:
        return None
    return category

def _name_taken(session: Session, user_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
    wanted = name.strip().lower()
    return any(
        c.name.lower() == wanted and c.id != exclude_id
        for c in list_categories(session, user_id)
    )

def create_category(session: Session, user_id: str, data: Dict[str, Any]) -> Category:
    if _name_taken(session, user_id, data["name"]):
        raise ConflictError(f'Category with name "{data["name"]}" already exists')
    category = Category(**data, user_id=user_id)
    session.add(category)
    session.commit()
    session.refresh(category)
    return category

def update_category(session: Session, user_id: str, category_id: str, changes: Dict[str, Any]) -> Category:
    category = get_category(session, user_id, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    if changes.get("name") and _name_taken(session, user_id, changes["name"], exclude_id=category_id):
        raise ConflictError(f'Category with name "{changes["name"]}" already exists')
    for key, value in changes.items():
        setattr(category, key, value)
    session.add(category)
    session.commit()
    session.refresh(category)
    return category

def delete_category(session: Session, user_id: str, category_id: str) -> None:
    category = get_category(session, user_id, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    session.delete(category)
    session.commit()

def save_audio(session: Session, recording: AudioRecording) -> AudioRecording:
    session.merge(recording)
    session.commit()
    return recording

def load_audio(session: Session, path: str) -> Optional[AudioRecording]:
    return session.get(AudioRecording, path)
