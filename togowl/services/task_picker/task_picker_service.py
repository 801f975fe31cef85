"""
Task Picker Service

Lists today's Todoist tasks next to the timer and starts a Toggl entry
for the selected one.
"""
import asyncio
import logging
from typing import List, Optional

from togowl.clients.todoist import TodoistClient
from togowl.clients.toggl import TogglClient, TogglTitle
from togowl.models.task import CurrentTaskLink, Task
from togowl.services.settings_service import SettingsService
from togowl.services.timer.timer_bridge import TimerBridge
from togowl.surface.base import Element, TaskMenuItem
from togowl.utils.string_helper import to_emoji_string

logger = logging.getLogger(__name__)

MAX_TASKS = 5


def task_label(task: Task) -> str:
    label = to_emoji_string(task.title)
    if task.project_name:
        label = f"{label} ({task.project_name})"
    return label


class TaskPickerService:
    """Popup flow of the task picker button"""

    def __init__(self, settings: SettingsService, todoist: TodoistClient, toggl: TogglClient):
        self.settings = settings
        self.todoist = todoist
        self.toggl = toggl
        self._pending: set = set()

    async def load_tasks(self) -> List[Task]:
        """
        Today's tasks shown in the popup

        Returns:
            At most MAX_TASKS tasks, ignored projects excluded
        """
        token = await self.settings.get_todoist_api_token()
        tasks = await self.todoist.fetch_daily_tasks(token)
        ignore_project_ids = await self.settings.get_todoist_ignore_project_ids()
        return [t for t in tasks if t.project_id not in ignore_project_ids][:MAX_TASKS]

    async def start_task(self, task: Task) -> None:
        """Start a Toggl entry for the task and remember it as the current task"""
        token = await self.settings.get_toggl_api_token()
        workspace_id = await self.settings.get_toggl_workspace_id()

        project_id = await self.toggl.find_project_id(token, workspace_id, task.project_name)
        await self.toggl.start_timer(token, workspace_id, TogglTitle.from_todoist_title(task.title), project_id)
        # TODO: match the project as well when closing the task on done
        await self.settings.set_current_task(CurrentTaskLink(task_id=task.id, task_title=task.title))

    async def open(self, bridge: TimerBridge) -> None:
        """Handler of the task picker button"""
        anchor = bridge.buttons["task_picker"]
        surface = bridge.surface
        surface.show_task_menu_loading(anchor)

        try:
            tasks = await self.load_tasks()
        except Exception as e:
            logger.error(f"Error loading Todoist tasks: {e}")
            surface.hide_task_menu(anchor)
            return

        items = [
            TaskMenuItem(label=task_label(task), on_select=self._on_select(anchor, bridge, task))
            for task in tasks
        ]
        surface.show_task_menu(anchor, items, on_clear_cache=lambda: self.clear_cache(anchor, bridge))

    def _on_select(self, anchor: Element, bridge: TimerBridge, task: Task):
        def on_select() -> None:
            self._spawn(self._select(anchor, bridge, task))
        return on_select

    async def _select(self, anchor: Element, bridge: TimerBridge, task: Task) -> None:
        try:
            await self.start_task(task)
        except Exception as e:
            logger.error(f"Error starting Toggl timer for task {task.id}: {e}")
            return
        bridge.surface.hide_task_menu(anchor)

    def clear_cache(self, anchor: Element, bridge: TimerBridge) -> None:
        self.todoist.clear_sync_token()
        bridge.surface.hide_task_menu(anchor)

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_pending(self) -> None:
        """Wait until selections in flight are done"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
