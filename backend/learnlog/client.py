# learnlog/client.py
import os
from typing import Any, Dict, Iterable, List, Optional
import requests

API = os.getenv("API_URL", "http://localhost:8000/api")


class ApiError(Exception):
    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


class ApiClient:
    """Thin requests wrapper around the LearnLog HTTP API."""

    def __init__(self, base_url: str = API, token: str = "", http: Optional[requests.Session] = None,
                 timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.http = http or requests
        self.timeout = timeout

    def _call(self, method: str, path: str, **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        r = self.http.request(method, f"{self.base_url}{path}", headers=headers,
                              timeout=self.timeout, **kwargs)
        if r.status_code >= 400:
            try:
                body = r.json()
                message = (body.get("error") or body.get("detail") or r.text) if isinstance(body, dict) else r.text
            except ValueError:
                message = r.text
            raise ApiError(r.status_code, str(message))
        return r

    def health(self) -> Dict[str, Any]:
        return self._call("GET", "/health").json()

    # tasks
    def list_tasks(self, **filters) -> List[Dict[str, Any]]:
        params = {k: v for k, v in filters.items() if v not in (None, "", "all")}
        return self._call("GET", "/tasks", params=params).json()

    def task_counts(self, **filters) -> Dict[str, int]:
        params = {k: v for k, v in filters.items() if v not in (None, "", "all")}
        return self._call("GET", "/tasks/counts", params=params).json()

    def get_task(self, task_id: str) -> Dict[str, Any]:
        return self._call("GET", f"/tasks/{task_id}").json()

    def create_task(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("POST", "/tasks", json=payload).json()

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("PUT", f"/tasks/{task_id}", json=updates).json()

    def set_status(self, task_id: str, status: str) -> Dict[str, Any]:
        return self.update_task(task_id, {"status": status})

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        return self._call("DELETE", f"/tasks/{task_id}").json()

    def delete_tasks(self, task_ids: Iterable[str]) -> List[str]:
        return self._call("POST", "/tasks/bulk-delete", json={"ids": list(task_ids)}).json()["deleted"]

    # audio
    def upload_audio(self, task_id: str, content: bytes, content_type: str = "audio/webm",
                     duration: Optional[float] = None, filename: str = "recording.webm") -> Dict[str, Any]:
        data = {"duration": str(duration)} if duration else None
        files = {"audio": (filename, content, content_type)}
        return self._call("POST", f"/tasks/{task_id}/audio", files=files, data=data).json()

    def get_audio(self, path: str) -> bytes:
        return self._call("GET", f"/audio/{path}").content

    # categories
    def list_categories(self) -> List[Dict[str, Any]]:
        return self._call("GET", "/categories").json()

    def create_category(self, name: str, color: str) -> Dict[str, Any]:
        return self._call("POST", "/categories", json={"name": name, "color": color}).json()

    def update_category(self, category_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("PUT", f"/categories/{category_id}", json=updates).json()

    def delete_category(self, category_id: str) -> Dict[str, Any]:
        return self._call("DELETE", f"/categories/{category_id}").json()

    # progress / transfer
    def progress(self) -> Dict[str, Any]:
        return self._call("GET", "/progress").json()

    def export(self) -> bytes:
        return self._call("GET", "/export").content

    def import_file(self, filename: str, content: bytes) -> Dict[str, Any]:
        return self._call("POST", "/import", files={"file": (filename, content)}).json()

    def import_text(self, text: str) -> Dict[str, Any]:
        return self._call("POST", "/import", data={"text": text}).json()

    def import_sample(self) -> Dict[str, Any]:
        return self._call("POST", "/import/sample").json()


if __name__ == "__main__":
    client = ApiClient(token=os.getenv("API_TOKEN", ""))
    print("--- Testing LearnLog backend ---")
    print("Health:", client.health())
    task = client.create_task({
        "date": "2025-09-19",
        "focus_area": "DSA",
        "title": "Two Sum",
        "details": "LeetCode #1",
        "time_estimate": "45 min",
        "is_dsa": True,
    })
    print("Create task:", task)
    print("Complete task:", client.set_status(task["id"], "completed"))
    print("Progress:", client.progress())
