"""
Task Manager Client
====================
Talks to a running Task Manager server over HTTP. No dependency beyond
the standard library.

Usage:
    client = TaskClient("http://localhost:4001")
    client.add_task("Learn Go", "Complete tutorials.")
    for task in client.list_tasks():
        print(task.title)
"""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

from taskmanager.config import DEFAULT_PORT
from taskmanager.store import TaskRecord

DEFAULT_BASE_URL = f"http://localhost:{DEFAULT_PORT}"


class TaskClientError(Exception):
    """A request to the server failed.

    ``status`` is the HTTP status, or None when the server was unreachable.
    """

    def __init__(self, status: Optional[int], message: str):
        super().__init__(f"{status}: {message}" if status else message)
        self.status = status
        self.message = message


class TaskClient:
    """Minimal client for the three task endpoints."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def list_tasks(self) -> list[TaskRecord]:
        """GET /tasks."""
        body = self._request("GET", "/tasks")
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise TaskClientError(None, f"Unexpected response from server: {e}") from e
        return [TaskRecord.from_dict(item) for item in data or []]

    def add_task(self, title: str, description: str = "") -> str:
        """POST /tasks with a JSON body. Returns the server's message."""
        data = json.dumps({"title": title, "description": description}).encode("utf-8")
        return self._request("POST", "/tasks", data, "application/json").strip()

    def submit_form(self, title: str, description: str = "") -> str:
        """POST /submit with a URL-encoded form. Returns the server's message."""
        data = urllib.parse.urlencode({"title": title, "description": description}).encode("ascii")
        return self._request("POST", "/submit", data,
                             "application/x-www-form-urlencoded").strip()

    def _request(self, method: str, path: str, data: Optional[bytes] = None,
                 content_type: Optional[str] = None) -> str:
        headers = {"Content-Type": content_type} if content_type else {}
        req = urllib.request.Request(
            f"{self.base_url}{path}",
            data=data,
            headers=headers,
            method=method,
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            message = e.read().decode("utf-8", errors="replace").strip()
            raise TaskClientError(e.code, message or e.reason) from e
        except urllib.error.URLError as e:
            raise TaskClientError(None, f"Cannot reach {self.base_url}: {e.reason}") from e
