from typing import Dict, List
from pydantic import BaseModel

class AreaStats(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    todo: int = 0
    skipped: int = 0

class DayStats(BaseModel):
    date: str
    completed: int = 0
    total: int = 0

class ProgressStats(BaseModel):
    total: int
    completed: int
    in_progress: int
    todo: int
    skipped: int
    completion_rate: int
    focus_area_stats: Dict[str, AreaStats]
    daily_progress: List[DayStats]
    current_streak: int
    total_time_estimate: int
    completed_time_estimate: int

class TaskCounts(BaseModel):
    total: int
    completed: int
    in_progress: int
    overdue: int

class ImportResult(BaseModel):
    categories: int
    tasks: int
    skipped: int = 0
