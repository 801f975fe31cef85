"""
Settings Service

Typed access to tokens, ids and the current task link.
Stored values win over the environment defaults loaded from .env.
"""
import logging
import os
from typing import Any, List, Optional

from dotenv import load_dotenv

from togowl.infra.supabase.repositories.settings import SettingsRepository
from togowl.models.task import CurrentTaskLink

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)

SLACK_INCOMING_WEBHOOK_URL = "slack_incoming_webhook_url"
TODOIST_API_TOKEN = "todoist_api_token"
TODOIST_IGNORE_PROJECT_IDS = "todoist_ignore_project_ids"
TOGGL_API_TOKEN = "toggl_api_token"
TOGGL_WORKSPACE_ID = "toggl_workspace_id"
CURRENT_TODOIST_TASK_ID = "current_todoist_task_id"
CURRENT_TODOIST_TASK_NAME = "current_todoist_task_name"
JIRA_BROWSER_URL = "jira_browser_url"


def _env_default(key: str) -> Optional[str]:
    return os.getenv(f"TOGOWL_{key.upper()}") or None


class SettingsService:
    """Service for reading and writing Togowl settings"""

    def __init__(self, repository: SettingsRepository):
        self.repository = repository

    async def _get(self, key: str) -> Optional[Any]:
        value = await self.repository.get(key)
        if value is None:
            return _env_default(key)
        return value

    async def get_slack_incoming_webhook_url(self) -> Optional[str]:
        return await self._get(SLACK_INCOMING_WEBHOOK_URL)

    async def get_todoist_api_token(self) -> Optional[str]:
        return await self._get(TODOIST_API_TOKEN)

    async def get_todoist_ignore_project_ids(self) -> List[int]:
        """
        Todoist project ids hidden from the task picker

        Accepts a JSON list from storage or a comma separated string from the environment.
        """
        value = await self._get(TODOIST_IGNORE_PROJECT_IDS)
        if not value:
            return []
        if isinstance(value, str):
            value = [v for v in value.split(",") if v.strip()]
        return [int(v) for v in value]

    async def get_toggl_api_token(self) -> Optional[str]:
        return await self._get(TOGGL_API_TOKEN)

    async def get_toggl_workspace_id(self) -> Optional[int]:
        value = await self._get(TOGGL_WORKSPACE_ID)
        return int(value) if value else None

    async def get_jira_browser_url(self) -> Optional[str]:
        return await self._get(JIRA_BROWSER_URL)

    async def get_current_task(self) -> Optional[CurrentTaskLink]:
        """Current Todoist task linked to the running entry, None if not linked"""
        task_id = await self.repository.get(CURRENT_TODOIST_TASK_ID)
        task_name = await self.repository.get(CURRENT_TODOIST_TASK_NAME)
        if task_id is None or task_name is None:
            return None
        return CurrentTaskLink(task_id=task_id, task_title=task_name)

    async def set_current_task(self, link: CurrentTaskLink) -> None:
        await self.repository.set(CURRENT_TODOIST_TASK_ID, link.task_id)
        await self.repository.set(CURRENT_TODOIST_TASK_NAME, link.task_title)
        logger.info(f"Current task linked: {link.task_id} {link.task_title}")

    async def clear_current_task(self) -> None:
        await self.repository.delete(CURRENT_TODOIST_TASK_ID)
        await self.repository.delete(CURRENT_TODOIST_TASK_NAME)
