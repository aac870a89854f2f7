import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from ...core.security import CurrentUser, get_current_user
from ...schemas.progress import TaskCounts
from ...schemas.tasks import BulkDeleteIn, BulkDeleteOut, TaskIn, TaskOut, TaskUpdate
from ...services.stats import task_counts
from ...services.store import RecordStore
from ...services.tasks import filter_tasks, new_task_values, update_values
from ..deps import get_store

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/tasks", response_model=List[TaskOut])
def list_all(
    q: str = "",
    status: Optional[str] = None,
    focus_area: Optional[str] = None,
    when: Optional[str] = Query(default=None, pattern="^(all|today|week|overdue)$"),
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    tasks = store.list_tasks(user.id)
    if q or status or focus_area or when:
        tasks = filter_tasks(tasks, date.today(), q=q, status=status, focus_area=focus_area, when=when)
    return tasks

@router.get("/tasks/counts", response_model=TaskCounts)
def counts(
    q: str = "",
    status: Optional[str] = None,
    focus_area: Optional[str] = None,
    when: Optional[str] = Query(default=None, pattern="^(all|today|week|overdue)$"),
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    today = date.today()
    tasks = filter_tasks(store.list_tasks(user.id), today, q=q, status=status, focus_area=focus_area, when=when)
    return task_counts(tasks, today)

@router.post("/tasks", response_model=TaskOut)
def create(body: TaskIn, user: CurrentUser = Depends(get_current_user),
           store: RecordStore = Depends(get_store)):
    task = store.create_task(user.id, new_task_values(body))
    logger.info("task %s created for %s", task.id, user.id)
    return task

@router.post("/tasks/bulk-delete", response_model=BulkDeleteOut)
def bulk_delete(body: BulkDeleteIn, user: CurrentUser = Depends(get_current_user),
                store: RecordStore = Depends(get_store)):
    deleted = store.delete_tasks(user.id, body.ids)
    logger.info("bulk delete for %s: %d of %d tasks", user.id, len(deleted), len(body.ids))
    return BulkDeleteOut(deleted=deleted)

@router.get("/tasks/{task_id}", response_model=TaskOut)
def get_one(task_id: str, user: CurrentUser = Depends(get_current_user),
            store: RecordStore = Depends(get_store)):
    return store.get_task(user.id, task_id)

@router.put("/tasks/{task_id}", response_model=TaskOut)
def update(task_id: str, body: TaskUpdate, user: CurrentUser = Depends(get_current_user),
           store: RecordStore = Depends(get_store)):
    return store.update_task(user.id, task_id, update_values(user.id, body))

@router.delete("/tasks/{task_id}")
def delete(task_id: str, user: CurrentUser = Depends(get_current_user),
           store: RecordStore = Depends(get_store)):
    store.delete_task(user.id, task_id)
    logger.info("task %s deleted for %s", task_id, user.id)
    return {"success": True}
