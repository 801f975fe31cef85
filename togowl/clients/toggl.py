"""
Toggl Track client

Resolves project ids and starts time entries via the Toggl Track API v9.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from togowl.utils.string_helper import trim_bracket_date, trim_bracket_time, trim_prefix_emoji

logger = logging.getLogger(__name__)

TOGGL_BASE = "https://api.track.toggl.com/api/v9"
CREATED_WITH = "togowl"


class TogglTitle:
    """Derivation of Toggl entry titles"""

    @staticmethod
    def from_todoist_title(title: Optional[str]) -> str:
        """
        Todoistのタスク名からTogglのタイトルを作る

        ":memo: 資料作成 (10:00-11:00) [x2020/1/2]" -> "資料作成"
        """
        if not title:
            return ""
        return trim_prefix_emoji(trim_bracket_date(trim_bracket_time(title))).strip()


class TogglClient:
    """Toggl Track API client"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def _auth(self, token: Optional[str]) -> httpx.BasicAuth:
        if not token:
            raise ValueError("Toggl API token is not configured")
        return httpx.BasicAuth(token, "api_token")

    async def find_project_id(
        self, token: Optional[str], workspace_id: Optional[int], project_name: Optional[str]
    ) -> Optional[int]:
        """
        Find a project id by its name

        Returns:
            The project id, or None when no project has this name
        """
        auth = self._auth(token)
        if not workspace_id:
            raise ValueError("Toggl workspace id is not configured")
        if not project_name:
            return None

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.get(
                f"{TOGGL_BASE}/workspaces/{workspace_id}/projects",
                params={"active": "true", "name": project_name},
                auth=auth,
                timeout=10.0,
            )
            response.raise_for_status()
            projects = response.json() or []

        for project in projects:
            if project.get("name") == project_name:
                return project.get("id")
        return None

    async def start_timer(
        self,
        token: Optional[str],
        workspace_id: Optional[int],
        title: str,
        project_id: Optional[int] = None,
    ) -> dict:
        """Start a running time entry and return it"""
        auth = self._auth(token)
        if not workspace_id:
            raise ValueError("Toggl workspace id is not configured")

        payload = {
            "created_with": CREATED_WITH,
            "description": title,
            "workspace_id": workspace_id,
            "project_id": project_id,
            "start": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "duration": -1,
        }

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                f"{TOGGL_BASE}/workspaces/{workspace_id}/time_entries",
                json=payload,
                auth=auth,
                timeout=10.0,
            )
            response.raise_for_status()
            entry = response.json()

        logger.info(f"Toggl timer started: {title} (project={project_id})")
        return entry
