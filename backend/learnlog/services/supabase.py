"""Hosted record store: PostgREST rows and Storage objects over HTTP."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
import requests
from fastapi.encoders import jsonable_encoder
from ..core.config import Settings, settings
from ..core.errors import BackendError, ConflictError, NotFoundError
from ..db.models import utcnow
from ..schemas.categories import CategoryOut
from ..schemas.tasks import TaskOut

logger = logging.getLogger(__name__)


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class SupabaseStore:
    """Rows are always filtered by ``user_id`` on top of the backend's row-level security."""

    def __init__(self, access_token: str, http: Optional[requests.Session] = None,
                 cfg: Settings = settings):
        self.access_token = access_token
        self.http = http or requests
        self.cfg = cfg
        self.base = cfg.SUPABASE_URL.rstrip("/")

    # -- plumbing -------------------------------------------------------

    def _row_headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.cfg.SUPABASE_ANON_KEY,
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _storage_headers(self) -> Dict[str, str]:
        key = self.cfg.SUPABASE_SERVICE_ROLE_KEY
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    def _request(self, method: str, url: str, missing: Optional[str] = None, **kwargs) -> requests.Response:
        try:
            resp = self.http.request(method, url, timeout=self.cfg.REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise BackendError(str(e)) from e
        if missing and resp.status_code in (400, 404):
            raise NotFoundError(missing)
        if resp.status_code == 409:
            raise ConflictError(_error_message(resp))
        if resp.status_code >= 400:
            logger.error("%s %s returned %s", method, url, resp.status_code)
            raise BackendError(_error_message(resp))
        return resp

    def _table(self, name: str) -> str:
        return f"{self.base}/rest/v1/{name}"

    def _object(self, path: str) -> str:
        return f"{self.base}/storage/v1/object/{self.cfg.AUDIO_BUCKET}/{path}"

    def _select(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        resp = self._request("GET", self._table(table), params={"select": "*", **params},
                             headers=self._row_headers())
        return resp.json()

    def _insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        resp = self._request("POST", self._table(table), json=jsonable_encoder(row),
                             headers=self._row_headers("return=representation"))
        return resp.json()[0]

    def _patch(self, table: str, params: Dict[str, str], changes: Dict[str, Any], missing: str) -> Dict[str, Any]:
        resp = self._request("PATCH", self._table(table), params=params, json=jsonable_encoder(changes),
                             headers=self._row_headers("return=representation"))
        rows = resp.json()
        if not rows:
            raise NotFoundError(missing)
        return rows[0]

    def _delete(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        resp = self._request("DELETE", self._table(table), params=params,
                             headers=self._row_headers("return=representation"))
        return resp.json()

    @staticmethod
    def _owned(user_id: str, row_id: str) -> Dict[str, str]:
        return {"id": f"eq.{row_id}", "user_id": f"eq.{user_id}"}

    # -- tasks ----------------------------------------------------------

    def list_tasks(self, user_id: str) -> List[TaskOut]:
        rows = self._select("tasks", {"user_id": f"eq.{user_id}", "order": "date.asc"})
        return [TaskOut.model_validate(r) for r in rows]

    def get_task(self, user_id: str, task_id: str) -> TaskOut:
        rows = self._select("tasks", self._owned(user_id, task_id))
        if not rows:
            raise NotFoundError("Task not found")
        return TaskOut.model_validate(rows[0])

    def create_task(self, user_id: str, data: Dict[str, Any]) -> TaskOut:
        return TaskOut.model_validate(self._insert("tasks", {**data, "user_id": user_id}))

    def update_task(self, user_id: str, task_id: str, changes: Dict[str, Any]) -> TaskOut:
        row = self._patch("tasks", self._owned(user_id, task_id),
                          {**changes, "updated_at": utcnow()}, "Task not found")
        return TaskOut.model_validate(row)

    def delete_task(self, user_id: str, task_id: str) -> None:
        if not self._delete("tasks", self._owned(user_id, task_id)):
            raise NotFoundError("Task not found")

    def delete_tasks(self, user_id: str, task_ids: Iterable[str]) -> List[str]:
        ids = list(task_ids)
        if not ids:
            return []
        quoted = ",".join(f'"{i}"' for i in ids)
        rows = self._delete("tasks", {"id": f"in.({quoted})", "user_id": f"eq.{user_id}"})
        return [r["id"] for r in rows]

    # -- categories -----------------------------------------------------

    def list_categories(self, user_id: str) -> List[CategoryOut]:
        rows = self._select("categories", {"user_id": f"eq.{user_id}", "order": "name.asc"})
        return [CategoryOut.model_validate(r) for r in rows]

    def _check_name(self, user_id: str, name: str, exclude_id: Optional[str] = None) -> None:
        wanted = name.strip().lower()
        for c in self.list_categories(user_id):
            if c.id != exclude_id and c.name.lower() == wanted:
                raise ConflictError(f'Category with name "{name}" already exists')

    def create_category(self, user_id: str, data: Dict[str, Any]) -> CategoryOut:
        self._check_name(user_id, data["name"])
        return CategoryOut.model_validate(self._insert("categories", {**data, "user_id": user_id}))

    def update_category(self, user_id: str, category_id: str, changes: Dict[str, Any]) -> CategoryOut:
        if changes.get("name"):
            self._check_name(user_id, changes["name"], exclude_id=category_id)
        row = self._patch("categories", self._owned(user_id, category_id), changes, "Category not found")
        return CategoryOut.model_validate(row)

    def delete_category(self, user_id: str, category_id: str) -> None:
        if not self._delete("categories", self._owned(user_id, category_id)):
            raise NotFoundError("Category not found")

    # -- audio ----------------------------------------------------------

    def save_audio(self, user_id, task_id, path, content, content_type, duration) -> str:
        headers = {**self._storage_headers(), "Content-Type": content_type}
        self._request("POST", self._object(path), data=content, headers=headers)
        return path

    def load_audio(self, path: str) -> Tuple[bytes, str]:
        resp = self._request("GET", self._object(path), missing="Audio not found",
                             headers=self._storage_headers())
        return resp.content, resp.headers.get("Content-Type", "audio/webm")
