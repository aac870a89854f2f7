import re
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional
from ..schemas.progress import AreaStats, DayStats, ProgressStats, TaskCounts
from ..schemas.tasks import TaskOut, TaskStatus

_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")

STREAK_WINDOW_DAYS = 30


def estimate_minutes(time_estimate: str) -> int:
    """'45 min' -> 45, '1.5 hours' -> 90, no number -> 0."""
    text = (time_estimate or "").lower()
    m = _NUMBER.search(text)
    if not m:
        return 0
    value = float(m.group(1))
    if "hour" in text or re.search(r"\d\s*h\b", text):
        value *= 60
    return int(round(value))


def current_streak(completed_dates: Iterable[date], today: date) -> int:
    days = set(completed_dates)
    streak = 0
    for i in range(STREAK_WINDOW_DAYS):
        if today - timedelta(days=i) in days:
            streak += 1
        elif i > 0:
            break
    return streak


def progress_stats(tasks: List[TaskOut], today: Optional[date] = None) -> ProgressStats:
    today = today or date.today()
    by_status = {s: 0 for s in TaskStatus}
    areas: Dict[str, AreaStats] = {}
    days: Dict[str, DayStats] = {}
    total_minutes = completed_minutes = 0

    for task in tasks:
        by_status[task.status] += 1
        area = areas.setdefault(task.focus_area, AreaStats())
        area.total += 1
        field = task.status.value.replace("-", "_")
        setattr(area, field, getattr(area, field) + 1)

        key = task.date.isoformat()
        day = days.setdefault(key, DayStats(date=key))
        day.total += 1

        minutes = estimate_minutes(task.time_estimate)
        total_minutes += minutes
        if task.status is TaskStatus.COMPLETED:
            day.completed += 1
            completed_minutes += minutes

    total = len(tasks)
    completed = by_status[TaskStatus.COMPLETED]
    return ProgressStats(
        total=total,
        completed=completed,
        in_progress=by_status[TaskStatus.IN_PROGRESS],
        todo=by_status[TaskStatus.TODO],
        skipped=by_status[TaskStatus.SKIPPED],
        completion_rate=round(completed / total * 100) if total else 0,
        focus_area_stats=areas,
        daily_progress=sorted(days.values(), key=lambda d: d.date),
        current_streak=current_streak(
            (t.date for t in tasks if t.status is TaskStatus.COMPLETED), today
        ),
        total_time_estimate=total_minutes,
        completed_time_estimate=completed_minutes,
    )


def task_counts(tasks: List[TaskOut], today: Optional[date] = None) -> TaskCounts:
    today = today or date.today()
    return TaskCounts(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.status is TaskStatus.COMPLETED),
        in_progress=sum(1 for t in tasks if t.status is TaskStatus.IN_PROGRESS),
        overdue=sum(1 for t in tasks if t.date < today and t.status is not TaskStatus.COMPLETED),
    )
