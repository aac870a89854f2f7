"""CSV / JSON import and JSON export of a user's tasks and categories."""
import csv
import io
import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
import requests
from dateutil import parser as dtparser
from pydantic import ValidationError
from ..core.config import settings
from ..core.errors import BadRequestError, BackendError
from ..schemas.categories import CategoryIn, CategoryOut
from ..schemas.progress import ImportResult
from ..schemas.tasks import TaskIn, TaskOut
from .store import RecordStore
from .tasks import new_task_values

logger = logging.getLogger(__name__)

CATEGORY_COLORS = ["#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6", "#06b6d4"]

# never carried across an import: regenerated or tied to the exporting account
_DROPPED_FIELDS = ("id", "user_id", "created_at", "updated_at", "audio_path", "audio_duration")


def _column_for(header: str) -> Optional[str]:
    key = header.strip().lower()
    if "date" in key:
        return "date"
    if "focus" in key or "area" in key:
        return "focus_area"
    if "task" in key and "details" not in key:
        return "title"
    if "details" in key or "resources" in key:
        return "details"
    if "time" in key:
        return "time_estimate"
    return None


def parse_csv(text: str) -> List[Dict[str, Any]]:
    """One draft per data row; columns are matched by header substrings."""
    rows = [r for r in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in r)]
    if not rows:
        return []
    columns = [_column_for(h) for h in rows[0]]
    drafts = []
    for row in rows[1:]:
        draft: Dict[str, Any] = {}
        for index, column in enumerate(columns):
            if column is None:
                continue
            draft[column] = row[index].strip() if index < len(row) else ""
        focus = draft.get("focus_area") or ""
        drafts.append({
            **draft,
            "status": "todo",
            "notes": None,
            "links": None,
            "code": None,
            "code_language": None,
            "is_dsa": "dsa" in focus.lower(),
            "completed_at": None,
        })
    return drafts


def _records(value: Any, what: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise BadRequestError(f"Expected {what} to be a list of objects")
    return value


def parse_json(text: str) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Accepts a bare task array or an export dump; returns (tasks, categories)."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise BadRequestError("Invalid JSON") from e
    if isinstance(data, list):
        return _records(data, "tasks"), []
    if isinstance(data, dict):
        return _records(data.get("tasks"), "tasks"), _records(data.get("categories"), "categories")
    raise BadRequestError("Expected a list of tasks or an object with a tasks key")


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return dtparser.parse(str(value)).date()
    except (ValueError, OverflowError):
        return None


def _to_task_in(draft: Dict[str, Any]) -> Optional[TaskIn]:
    if not draft.get("title") or not draft.get("date"):
        return None
    when = _parse_date(draft["date"])
    if when is None:
        return None
    values = {k: v for k, v in draft.items() if k not in _DROPPED_FIELDS and v is not None}
    values["date"] = when
    values.setdefault("focus_area", "")
    try:
        return TaskIn.model_validate(values)
    except ValidationError:
        return None


def import_records(store: RecordStore, user_id: str, drafts: List[Dict[str, Any]],
                   categories: Optional[List[Dict[str, Any]]] = None) -> ImportResult:
    known = {c.name.lower() for c in store.list_categories(user_id)}
    created_categories = 0

    for raw in categories or []:
        name = str(raw.get("name") or "").strip()
        if not name or name.lower() in known:
            continue
        try:
            body = CategoryIn(name=name, color=raw.get("color") or CATEGORY_COLORS[0])
        except ValidationError:
            body = CategoryIn(name=name)
        store.create_category(user_id, body.model_dump())
        known.add(name.lower())
        created_categories += 1

    tasks = [_to_task_in(d) for d in drafts]
    areas: List[str] = []
    for t in tasks:
        if t and t.focus_area and t.focus_area.lower() not in known:
            areas.append(t.focus_area)
            known.add(t.focus_area.lower())
    for index, area in enumerate(areas):
        color = CATEGORY_COLORS[index % len(CATEGORY_COLORS)]
        store.create_category(user_id, {"name": area, "color": color})
        created_categories += 1

    created = 0
    for t in tasks:
        if t is None:
            continue
        store.create_task(user_id, new_task_values(t))
        created += 1

    result = ImportResult(categories=created_categories, tasks=created, skipped=len(tasks) - created)
    logger.info("import for %s: %d categories, %d tasks, %d skipped",
                user_id, result.categories, result.tasks, result.skipped)
    return result


def import_text(store: RecordStore, user_id: str, text: str, kind: str) -> ImportResult:
    if kind == "json":
        drafts, categories = parse_json(text)
        return import_records(store, user_id, drafts, categories)
    return import_records(store, user_id, parse_csv(text))


def fetch_sample_csv(http: Optional[requests.Session] = None) -> str:
    if not settings.SAMPLE_CSV_URL:
        raise BadRequestError("No sample data configured")
    http = http or requests
    try:
        r = http.get(settings.SAMPLE_CSV_URL, timeout=settings.REQUEST_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.error("sample data download failed: %s", e)
        raise BackendError("Failed to load sample data") from e
    return r.text


def export_dump(tasks: List[TaskOut], categories: List[CategoryOut]) -> Dict[str, Any]:
    return {
        "tasks": [t.model_dump(mode="json") for t in tasks],
        "categories": [c.model_dump(mode="json") for c in categories],
    }


def export_filename(today: Optional[date] = None) -> str:
    return f"learning-progress-{(today or date.today()).isoformat()}.json"
