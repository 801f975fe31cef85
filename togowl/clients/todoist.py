"""
Todoist client

Fetches today's tasks through the Sync API (incremental, sync token cached)
and closes tasks through the REST API.
"""
import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from togowl.models.task import Task
from togowl.utils.datetime_helper import today_str

logger = logging.getLogger(__name__)

SYNC_BASE = "https://api.todoist.com/sync/v9"
REST_BASE = "https://api.todoist.com/rest/v2"


class TodoistDue(BaseModel):
    date: str
    is_recurring: bool = False
    string: Optional[str] = None


class TodoistItem(BaseModel):
    """Item as returned by the Sync API"""
    id: int
    content: str
    day_order: int = -1
    project_id: Optional[int] = None
    due: Optional[TodoistDue] = None
    checked: bool = False
    is_deleted: bool = False


class TodoistProject(BaseModel):
    id: int
    name: str
    is_deleted: bool = False


class TodoistClient:
    """Todoist API client keeping a local copy of items and projects between syncs"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._sync_token = "*"
        self._synced_for: Optional[str] = None
        self._items: Dict[int, TodoistItem] = {}
        self._projects: Dict[int, TodoistProject] = {}

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        if not token:
            raise ValueError("Todoist API token is not configured")
        return {"Authorization": f"Bearer {token}"}

    def _reset(self) -> None:
        self._sync_token = "*"
        self._synced_for = None
        self._items = {}
        self._projects = {}

    def clear_sync_token(self) -> None:
        """Drop the cached state; the next fetch does a full sync"""
        self._reset()
        logger.info("Todoist sync token cleared")

    async def _sync(self, token: str) -> None:
        headers = self._headers(token)
        if self._synced_for != token:
            self._reset()

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                f"{SYNC_BASE}/sync",
                headers=headers,
                data={
                    "sync_token": self._sync_token,
                    "resource_types": json.dumps(["items", "projects"]),
                },
                timeout=10.0,
            )
            response.raise_for_status()
            result: Dict[str, Any] = response.json()

        if result.get("full_sync", self._sync_token == "*"):
            self._items = {}
            self._projects = {}

        for raw in result.get("projects", []):
            project = TodoistProject(**raw)
            if project.is_deleted:
                self._projects.pop(project.id, None)
            else:
                self._projects[project.id] = project

        for raw in result.get("items", []):
            item = TodoistItem(**raw)
            if item.is_deleted:
                self._items.pop(item.id, None)
            else:
                self._items[item.id] = item

        self._sync_token = result.get("sync_token", "*")
        self._synced_for = token

    def _to_task(self, item: TodoistItem) -> Task:
        project = self._projects.get(item.project_id) if item.project_id else None
        return Task(
            id=item.id,
            title=item.content,
            project_id=item.project_id or None,
            project_name=project.name if project else None,
            checked=item.checked,
        )

    async def fetch_daily_tasks(self, token: Optional[str], today: Optional[date] = None) -> List[Task]:
        """
        本日のタスク一覧を取得します

        Args:
            token: Todoistトークン
            today: 基準日（省略時はローカルの今日）

        Returns:
            day_order順に並んだ、今日が期限の未完了タスク
        """
        await self._sync(token)

        day = today_str(today)
        items = [x for x in self._items.values() if x.due and x.due.date[:10] == day]
        items.sort(key=lambda x: x.day_order)
        tasks = [self._to_task(x) for x in items]
        return [t for t in tasks if not t.checked]

    async def close_task(self, token: Optional[str], task_id: int) -> None:
        """Close (complete) a task"""
        headers = self._headers(token)
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                f"{REST_BASE}/tasks/{task_id}/close",
                headers=headers,
                timeout=10.0,
            )
            response.raise_for_status()
        logger.info(f"Todoist task closed: {task_id}")
