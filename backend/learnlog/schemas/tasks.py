import datetime as dt
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, field_validator

class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"

class TaskIn(BaseModel):
    date: dt.date
    focus_area: str
    title: str
    details: str = ""
    time_estimate: str = ""
    status: TaskStatus = TaskStatus.TODO
    notes: Optional[str] = None
    links: Optional[List[str]] = None
    code: Optional[str] = None
    code_language: Optional[str] = None
    is_dsa: bool = False
    completed_at: Optional[dt.datetime] = None

class TaskUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    date: Optional[dt.date] = None
    focus_area: Optional[str] = None
    title: Optional[str] = None
    details: Optional[str] = None
    time_estimate: Optional[str] = None
    status: Optional[TaskStatus] = None
    notes: Optional[str] = None
    links: Optional[List[str]] = None
    code: Optional[str] = None
    code_language: Optional[str] = None
    is_dsa: Optional[bool] = None
    completed_at: Optional[dt.datetime] = None
    audio_path: Optional[str] = None
    audio_duration: Optional[float] = None

    @field_validator("date", "focus_area", "title", "details", "time_estimate", "is_dsa")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class TaskOut(TaskIn):
    id: str
    user_id: str
    audio_path: Optional[str] = None
    audio_duration: Optional[float] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True

class BulkDeleteIn(BaseModel):
    ids: List[str]

class BulkDeleteOut(BaseModel):
    deleted: List[str]
