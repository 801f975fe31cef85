"""Shared fakes for the Togowl test suite."""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from togowl.services.settings_service import SettingsService
from togowl.surface.base import Element, MutationRecord, Subscription, Surface, TaskMenuItem


class FakeElement(Element):
    def __init__(self, name: str, attributes: Optional[Dict[str, str]] = None) -> None:
        self.name = name
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.children: List[Element] = []
        self.clicks = 0
        self._listeners: List[Callable[[], None]] = []

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def click(self) -> None:
        self.clicks += 1
        for listener in list(self._listeners):
            listener()

    def append_child(self, child: Element) -> None:
        self.children.append(child)

    def add_click_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    @property
    def hidden(self) -> bool:
        return self.attributes.get("style") == "display: none;"

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"


class FakeSubscription(Subscription):
    def __init__(self, target: Element, callback: Callable, options: Dict[str, bool]) -> None:
        self.target = target
        self.callback = callback
        self.options = options
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False


class FakeSurface(Surface):
    """In-memory Toggl timer page driven by the tests."""

    def __init__(self, rendered: bool = True) -> None:
        self._body = FakeElement("body")
        self.timer_div: Optional[FakeElement] = FakeElement("timer_div") if rendered else None
        self.timer_button = FakeElement("timer_button", {"aria-label": "Start time entry"})
        self.title_input = FakeElement("title_input")
        self.delete_button: Optional[FakeElement] = FakeElement("delete_button")
        self.subscriptions: List[FakeSubscription] = []
        self.created: Dict[str, FakeElement] = {}

        self.counting = False
        self.seconds = 0
        self.time_text = "0:00:00"
        self.title = ""
        self.client: Optional[str] = None
        self.project: Optional[str] = None

        self.menu_state: Optional[str] = None
        self.menu_history: List[str] = []
        self.menu_items: List[TaskMenuItem] = []
        self.menu_clear_cache: Optional[Callable[[], None]] = None

    # driving helpers

    def render(self) -> None:
        self.timer_div = FakeElement("timer_div")

    def emit(self, target: Element, records: List[MutationRecord]) -> None:
        for sub in list(self.subscriptions):
            if sub.connected and sub.target is target:
                sub.callback(records)

    def emit_child_list(self) -> None:
        self.emit(self._body, [MutationRecord(type="childList", target=self._body)])

    def emit_timer_button(self, old_value: Optional[str]) -> None:
        self.emit(
            self.timer_button,
            [MutationRecord(type="attributes", target=self.timer_button,
                            attribute_name="aria-label", old_value=old_value)],
        )

    def set_title(self, title: str) -> None:
        self.title = title
        if title:
            self.title_input.set_attribute("value", title)
        else:
            self.title_input.remove_attribute("value")
        self.emit(
            self.title_input,
            [MutationRecord(type="attributes", target=self.title_input, attribute_name="value")],
        )

    # Surface

    def body(self) -> Element:
        return self._body

    def find_timer_div(self) -> Optional[Element]:
        return self.timer_div

    def find_timer_button(self) -> Optional[Element]:
        return self.timer_button if self.timer_div else None

    def find_title_input(self) -> Optional[Element]:
        return self.title_input if self.timer_div else None

    def find_delete_button(self) -> Optional[Element]:
        return self.delete_button

    def current_entry_seconds(self) -> int:
        return self.seconds

    def current_entry_time(self) -> str:
        return self.time_text

    def entry_title(self) -> str:
        return self.title

    def entry_client(self) -> Optional[str]:
        return self.client

    def entry_project(self) -> Optional[str]:
        return self.project

    def is_counting(self) -> bool:
        return self.counting

    def create_button(self, kind: str) -> Element:
        button = FakeElement(kind)
        self.created[kind] = button
        return button

    def observe(self, target: Element, callback: Callable, *, attributes: bool = False,
                child_list: bool = False, attribute_old_value: bool = False) -> Subscription:
        sub = FakeSubscription(target, callback, {
            "attributes": attributes,
            "child_list": child_list,
            "attribute_old_value": attribute_old_value,
        })
        self.subscriptions.append(sub)
        return sub

    def show_task_menu_loading(self, anchor: Element) -> None:
        self.menu_state = "loading"
        self.menu_history.append(self.menu_state)

    def show_task_menu(self, anchor: Element, items: Sequence[TaskMenuItem],
                       on_clear_cache: Callable[[], None]) -> None:
        self.menu_state = "shown"
        self.menu_history.append(self.menu_state)
        self.menu_items = list(items)
        self.menu_clear_cache = on_clear_cache

    def hide_task_menu(self, anchor: Element) -> None:
        self.menu_state = "hidden"
        self.menu_history.append(self.menu_state)


class InMemorySettingsRepository:
    """Dict-backed stand-in for SettingsRepository."""

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        self.values: Dict[str, Any] = dict(values or {})

    async def get(self, key: str) -> Any:
        return self.values.get(key)

    async def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    async def delete(self, key: str) -> bool:
        return self.values.pop(key, None) is not None


class RecordingSlack:
    """Slack client double recording sends; can fail chosen messages."""

    def __init__(self, fail_on: Sequence[str] = (), delay: float = 0.0) -> None:
        self.sent: List[str] = []
        self.fail_on = set(fail_on)
        self.delay = delay
        self.active = 0
        self.max_active = 0

    async def send(self, webhook_url: Optional[str], text: str) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            if text in self.fail_on:
                raise RuntimeError(f"slack rejected {text}")
            self.sent.append(text)
        finally:
            self.active -= 1


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def settings_repo() -> InMemorySettingsRepository:
    return InMemorySettingsRepository({
        "slack_incoming_webhook_url": "https://hooks.slack.test/T000",
        "todoist_api_token": "todoist-token",
        "toggl_api_token": "toggl-token",
        "toggl_workspace_id": 42,
    })


@pytest.fixture
def settings(settings_repo: InMemorySettingsRepository, monkeypatch: pytest.MonkeyPatch) -> SettingsService:
    for key in ("SLACK_INCOMING_WEBHOOK_URL", "TODOIST_API_TOKEN", "TODOIST_IGNORE_PROJECT_IDS",
                "TOGGL_API_TOKEN", "TOGGL_WORKSPACE_ID", "JIRA_BROWSER_URL"):
        monkeypatch.delenv(f"TOGOWL_{key}", raising=False)
    return SettingsService(settings_repo)  # type: ignore[arg-type]


@pytest.fixture
def slack() -> RecordingSlack:
    return RecordingSlack()


class SlowJiraSettings(SettingsService):
    """Settings whose Jira URL lookup takes a different time per call."""

    def __init__(self, delays: Sequence[float]) -> None:
        super().__init__(InMemorySettingsRepository({"slack_incoming_webhook_url": "https://hooks.slack.test/T000"}))
        self.delays = list(delays)

    async def get_jira_browser_url(self) -> Optional[str]:
        await asyncio.sleep(self.delays.pop(0) if self.delays else 0)
        return None


class FailingDeleteRepository(InMemorySettingsRepository):
    """Repository whose deletes fail."""

    async def delete(self, key: str) -> bool:
        raise RuntimeError("storage down")
