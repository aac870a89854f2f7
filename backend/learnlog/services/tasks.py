import mimetypes
import posixpath
import time
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional
from ..core.errors import ForbiddenError
from ..schemas.tasks import TaskIn, TaskOut, TaskStatus, TaskUpdate

AUDIO_EXTENSIONS = {
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
}


def _plain(values: Dict[str, Any]) -> Dict[str, Any]:
    if isinstance(values.get("status"), TaskStatus):
        values["status"] = values["status"].value
    return values


def apply_status_rules(changes: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """completed always carries completed_at; any other status clears it."""
    if "status" not in changes or changes["status"] is None:
        changes.pop("status", None)
        return changes
    if TaskStatus(changes["status"]) is TaskStatus.COMPLETED:
        if not changes.get("completed_at"):
            changes["completed_at"] = now or datetime.now(timezone.utc)
    else:
        changes["completed_at"] = None
    return changes


def new_task_values(body: TaskIn, now: Optional[datetime] = None) -> Dict[str, Any]:
    return _plain(apply_status_rules(body.model_dump(), now))


def update_values(user_id: str, body: TaskUpdate, now: Optional[datetime] = None) -> Dict[str, Any]:
    changes = body.model_dump(exclude_unset=True)
    if changes.get("audio_path") is not None:
        check_audio_path(user_id, changes["audio_path"])
    return _plain(apply_status_rules(changes, now))


def owns_path(user_id: str, path: str) -> bool:
    if not path.startswith(user_id + "/"):
        return False
    return ".." not in path.split("/") and posixpath.normpath(path) == path


def check_audio_path(user_id: str, path: str) -> None:
    if not owns_path(user_id, path):
        raise ForbiddenError()


def audio_object_path(user_id: str, task_id: str, content_type: str,
                      now_ms: Optional[int] = None) -> str:
    ext = AUDIO_EXTENSIONS.get(content_type.split(";")[0].strip(), ".webm")
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{user_id}/{task_id}/{stamp}{ext}"


def audio_media_type(path: str, stored: Optional[str] = None) -> str:
    if stored and stored != "application/octet-stream":
        return stored
    guessed, _ = mimetypes.guess_type(path)
    return guessed or "audio/webm"


def timer_seconds(time_estimate: str) -> int:
    """Countdown length for an in-progress task."""
    text = (time_estimate or "").lower()
    number = _leading_number(text)
    if "min" in text and number is not None:
        return int(number) * 60
    if "hour" in text and number is not None:
        return int(number * 3600)
    return 1800


def _leading_number(text: str) -> Optional[float]:
    digits = ""
    for ch in text.strip():
        if ch.isdigit() or (ch == "." and "." not in digits):
            digits += ch
        else:
            break
    try:
        return float(digits)
    except ValueError:
        return None


def matches_filters(task: TaskOut, today: date, q: str = "", status: Optional[str] = None,
                    focus_area: Optional[str] = None, when: Optional[str] = None) -> bool:
    if q:
        needle = q.lower()
        if needle not in task.title.lower() and needle not in task.details.lower():
            return False
    if status and status != "all" and task.status.value != status:
        return False
    if focus_area and focus_area != "all" and task.focus_area != focus_area:
        return False
    if when == "today":
        return task.date == today
    if when == "week":
        return task.date >= today - timedelta(days=7)
    if when == "overdue":
        return task.date < today and task.status is not TaskStatus.COMPLETED
    return True


def filter_tasks(tasks: Iterable[TaskOut], today: Optional[date] = None, **filters) -> List[TaskOut]:
    today = today or date.today()
    return [t for t in tasks if matches_filters(t, today, **filters)]
