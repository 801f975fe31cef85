"""Notifier - composes timer messages and delivers them to Slack in order"""
import asyncio
import logging
import re
from collections import deque
from typing import Callable, Deque, Optional, Set

from togowl.clients.slack import SlackClient
from togowl.services.settings_service import SettingsService
from togowl.surface.base import Surface
from togowl.utils.datetime_helper import to_japanese
from togowl.utils.prefix import get_client_prefix, get_project_prefix
from togowl.utils.string_helper import trim_bracket_contents

logger = logging.getLogger(__name__)

# (title, client, project, time) -> message
MessageBuilder = Callable[[str, str, str, str], str]

_ISSUE_KEY = re.compile(r"^([^-]+-[0-9]+) ")


def append_jira_link(text: str, jira_browser_url: Optional[str]) -> str:
    """Turn a leading issue key ("ABC-123 ...") into a Slack link"""
    if not jira_browser_url:
        return text
    return _ISSUE_KEY.sub(lambda m: f"<{jira_browser_url}/{m.group(1)}|{m.group(1)}> ", text, count=1)


def client_label(client: Optional[str]) -> str:
    if not client:
        return ""
    return f"{get_client_prefix(client, '👥')}`{trim_bracket_contents(client)}` > "


def project_label(project: Optional[str]) -> str:
    if not project:
        return ""
    return f"{get_project_prefix(project, '📂')}`{trim_bracket_contents(project)}`"


def time_label(entry_time: str) -> str:
    return f"`⏱{to_japanese(entry_time)}`"


class Notifier:
    """
    Ordered message dispatcher.

    post() snapshots the entry and composes the message in the background,
    so a handler can click the Toggl button right away. Messages are queued
    once composed and a single drain task delivers them one by one; a failed
    send is logged and dropped.
    """

    def __init__(self, surface: Surface, settings: SettingsService, slack: SlackClient):
        self._surface = surface
        self._settings = settings
        self._slack = slack
        self._queue: Deque[str] = deque()
        self._composing: Set[asyncio.Future] = set()
        self._draining = False
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        return len(self._queue)

    def post(self, builder: MessageBuilder) -> asyncio.Future:
        """Snapshot the current entry and schedule composition of the message"""
        title = self._surface.entry_title()
        client = client_label(self._surface.entry_client())
        project = project_label(self._surface.entry_project())
        time = time_label(self._surface.current_entry_time())

        task = asyncio.ensure_future(self._compose(builder, title, client, project, time))
        self._composing.add(task)
        task.add_done_callback(self._composing.discard)
        return task

    async def notify(self, builder: MessageBuilder) -> str:
        """Compose a message from the current entry, queue it and return it"""
        return await self.post(builder)

    async def join(self) -> None:
        """Wait until every posted message has been composed and handled"""
        while True:
            if self._composing:
                await asyncio.gather(*list(self._composing), return_exceptions=True)
            elif self._drain_task is not None and not self._drain_task.done():
                await self._drain_task
            else:
                return

    async def _compose(self, builder: MessageBuilder, title: str, client: str, project: str, time: str) -> str:
        message = builder(await self._decorate(title), client, project, time)
        self._enqueue(message)
        return message

    def _enqueue(self, message: str) -> None:
        self._queue.append(message)
        logger.debug(f"Pushed {message} to queue.")
        self._start_draining()

    async def _decorate(self, title: str) -> str:
        try:
            jira_browser_url = await self._settings.get_jira_browser_url()
        except Exception as e:
            logger.error(f"Error reading Jira browser URL: {e}")
            return title
        return append_jira_link(title, jira_browser_url)

    def _start_draining(self) -> None:
        if self._draining:
            return
        self._draining = True
        self._drain_task = asyncio.ensure_future(self._drain())

    async def _drain(self) -> None:
        try:
            while self._queue:
                message = self._queue.popleft()
                try:
                    await self._slack.send(await self._settings.get_slack_incoming_webhook_url(), message)
                    logger.debug(f"Sent slack to {message}")
                except Exception as e:
                    logger.error(f"Failed to send slack message {message!r}: {e}")
        finally:
            self._draining = False
