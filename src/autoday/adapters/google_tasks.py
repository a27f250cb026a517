"""Google Tasks API adapter - HTTP client for to-do import."""

import logging
from datetime import date, datetime

import requests

from autoday.core.tasks import Priority, Task, parse_duration_from_text
from autoday.core.timegrid import round_to_grid

from .google_auth import load_credentials

logger = logging.getLogger(__name__)

API_BASE = "https://tasks.googleapis.com/tasks/v1"


class GoogleTasksAdapter:
    """
    Google Tasks API adapter.

    Implements TodoSource protocol. Reuses the Google token saved by
    'autoday auth'. No scheduling logic - just I/O and mapping.
    """

    def __init__(self, config_folder: str, session: requests.Session | None = None):
        self.config_folder = config_folder
        self._session = session or requests.Session()
        self._access_token: str | None = None

    def _api_request(self, endpoint: str, params: dict | None = None) -> dict:
        """Make authenticated API request."""
        if not self._access_token:
            self._access_token = load_credentials(self.config_folder).token
        resp = self._session.get(
            f"{API_BASE}{endpoint}",
            headers={"Authorization": f"Bearer {self._access_token}"},
            params=params,
        )
        resp.raise_for_status()
        return resp.json()

    def _get_task_lists(self) -> list[dict]:
        return self._api_request("/users/@me/lists").get("items", [])

    def _get_list_tasks(self, list_id: str) -> list[dict]:
        data = self._api_request(
            f"/lists/{list_id}/tasks",
            params={"showCompleted": "false", "showHidden": "false", "maxResults": "100"},
        )
        return data.get("items", [])

    def fetch_due(self, target_date: date, default_duration: int) -> list[Task]:
        """Fetch open items due on target_date (or undated) as tasks."""
        tasks = []
        for task_list in self._get_task_lists():
            list_id = task_list.get("id")
            if not list_id:
                continue
            for item in self._get_list_tasks(list_id):
                task = self._to_task(item, task_list.get("title", ""), target_date, default_duration)
                if task:
                    tasks.append(task)

        logger.info(f"Imported {len(tasks)} Google task(s) for {target_date}")
        return tasks

    def _to_task(
        self,
        item: dict,
        list_title: str,
        target_date: date,
        default_duration: int,
    ) -> Task | None:
        if not item.get("title") or item.get("status") == "completed":
            return None

        deadline_date = None
        if item.get("due"):
            # The API only keeps the date part of due; the time is always midnight UTC
            deadline_date = date.fromisoformat(item["due"][:10])
            if deadline_date != target_date:
                return None

        duration = (
            parse_duration_from_text(item.get("notes"))
            or parse_duration_from_text(item["title"])
            or default_duration
        )
        updated = item.get("updated")
        return Task(
            id=f"G_{item['id']}",
            title=str(item["title"]),
            duration=round_to_grid(duration),
            priority=Priority.MEDIUM,
            splittable=True,
            deadline_date=deadline_date,
            created_at=(
                datetime.fromisoformat(updated[:19]) if updated else datetime.combine(target_date, datetime.min.time())
            ),
            source="google",
            list_title=list_title,
        )
