import uuid
import datetime as dt
from typing import List, Optional
from sqlalchemy import JSON, Column, LargeBinary
from sqlmodel import SQLModel, Field

def _uuid() -> str:
    return str(uuid.uuid4())

def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)

class Task(SQLModel, table=True):
    id: str = Field(default_factory=_uuid, primary_key=True)
    user_id: str = Field(index=True)
    date: dt.date = Field(index=True)
    focus_area: str = Field(index=True)
    title: str
    details: str = ""
    time_estimate: str = ""
    status: str = Field(default="todo", index=True)
    notes: Optional[str] = None
    links: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    code: Optional[str] = None
    code_language: Optional[str] = None
    is_dsa: bool = Field(default=False, index=True)
    completed_at: Optional[dt.datetime] = None
    audio_path: Optional[str] = None
    audio_duration: Optional[float] = None
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: dt.datetime = Field(default_factory=utcnow, nullable=False)

class Category(SQLModel, table=True):
    id: str = Field(default_factory=_uuid, primary_key=True)
    user_id: str = Field(index=True)
    name: str = Field(index=True)
    color: str
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)

class AudioRecording(SQLModel, table=True):
    path: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    task_id: str = Field(index=True)
    content: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    content_type: str = "audio/webm"
    duration: Optional[float] = None
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
