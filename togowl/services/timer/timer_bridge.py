"""Timer Bridge - Togowl controls on top of the Toggl timer"""
import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from togowl.models.timer import ObservedStatus
from togowl.surface.base import Element, MutationRecord, Subscription, Surface

logger = logging.getLogger(__name__)

START_TIME_ENTRY = "Start time entry"
STOP_TIME_ENTRY = "Stop time entry"

HIDDEN = "display: none;"
VISIBLE = "display: visible;"

BUTTON_KINDS = ("start", "pause", "interrupt", "done", "delete", "task_picker")
# Buttons shown while a time entry is running; the others are shown while stopped
RUNNING_BUTTONS = ("pause", "interrupt", "done", "delete")

DEFAULT_INTERRUPT_DELAY = 1.0

BridgeCallback = Callable[["TimerBridge"], Any]
StatusCallback = Callable[["TimerBridge", ObservedStatus], Any]


def classify_status_change(records: List[MutationRecord]) -> Optional[ObservedStatus]:
    """
    Classify a batch of timer button mutations.

    The previous label of the button names the action just taken,
    so "Start time entry" means the timer is now running.
    """
    if not records:
        return None
    old_value = records[-1].old_value
    if old_value == START_TIME_ENTRY:
        return ObservedStatus.RUNNING
    if old_value == STOP_TIME_ENTRY:
        return ObservedStatus.STOPPED
    return None


class TimerBridge:
    """
    Owns the Toggl elements and the Togowl buttons for one attachment.

    Handlers may be plain functions or coroutine functions. Coroutines are
    scheduled on the running loop and their failures are logged.
    """

    def __init__(
        self,
        surface: Surface,
        timer_div: Element,
        timer_button: Element,
        title_input: Element,
        buttons: Dict[str, Element],
        interrupt_delay: float = DEFAULT_INTERRUPT_DELAY,
    ):
        self.surface = surface
        self.timer_div = timer_div
        self.timer_button = timer_button
        self.title_input = title_input
        self.buttons = buttons
        self.interrupt_delay = interrupt_delay

        self.status: Optional[ObservedStatus] = None
        self.timer_button_subscription: Optional[Subscription] = None
        self.title_input_subscription: Optional[Subscription] = None
        self._tasks: Set[asyncio.Future] = set()

    @staticmethod
    def ready_to_create(surface: Surface) -> bool:
        """インスタンス生成の準備ができているかどうか"""
        return surface.find_timer_div() is not None

    @classmethod
    def create(cls, surface: Surface, interrupt_delay: float = DEFAULT_INTERRUPT_DELAY) -> "TimerBridge":
        timer_div = surface.find_timer_div()
        timer_button = surface.find_timer_button()
        title_input = surface.find_title_input()
        if timer_div is None or timer_button is None or title_input is None:
            raise ValueError("Toggl timer is not rendered yet")

        buttons = {kind: surface.create_button(kind) for kind in BUTTON_KINDS}
        ins = cls(surface, timer_div, timer_button, title_input, buttons, interrupt_delay)
        ins._init_layout()

        # TogglのSTART/STOPボタン. Togowlでは不可視
        timer_button.set_attribute("style", HIDDEN)
        return ins

    def _init_layout(self) -> None:
        for kind in BUTTON_KINDS:
            self.timer_div.append_child(self.buttons[kind])

    # state

    def update_visibility(self, status: ObservedStatus) -> None:
        running = status == ObservedStatus.RUNNING
        for kind, button in self.buttons.items():
            shown = (kind in RUNNING_BUTTONS) == running
            button.set_attribute("style", VISIBLE if shown else HIDDEN)

    def is_title_empty(self) -> bool:
        return not self.title_input.get_attribute("value")

    def current_entry_seconds(self) -> int:
        return self.surface.current_entry_seconds()

    def title(self) -> str:
        return self.surface.entry_title()

    # actions

    def click_timer_button(self) -> None:
        self.timer_button.click()

    def stop_later(self) -> asyncio.TimerHandle:
        """Click the timer button again after interrupt_delay seconds"""
        loop = asyncio.get_running_loop()
        return loop.call_later(self.interrupt_delay, self.click_timer_button)

    def delete_entry(self) -> None:
        delete_button = self.surface.find_delete_button()
        if delete_button is None:
            logger.warning("Toggl delete button not found")
            return
        delete_button.click()

    # listeners

    def _invoke(self, callback: Callable[..., Any], *args: Any) -> None:
        result = callback(self, *args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Timer handler failed: {error!r}")

    async def wait_handlers(self) -> None:
        """Wait until every scheduled coroutine handler has finished"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _set_button_listener(self, kind: str, callback: BridgeCallback) -> "TimerBridge":
        button = self.buttons.get(kind)
        if button is not None:
            button.add_click_listener(lambda: self._invoke(callback))
        return self

    def set_on_click_start_button_listener(self, callback: BridgeCallback) -> "TimerBridge":
        return self._set_button_listener("start", callback)

    def set_on_click_pause_button_listener(self, callback: BridgeCallback) -> "TimerBridge":
        return self._set_button_listener("pause", callback)

    def set_on_click_interrupt_button_listener(self, callback: BridgeCallback) -> "TimerBridge":
        return self._set_button_listener("interrupt", callback)

    def set_on_click_done_button_listener(self, callback: BridgeCallback) -> "TimerBridge":
        return self._set_button_listener("done", callback)

    def set_on_click_delete_button_listener(self, callback: BridgeCallback) -> "TimerBridge":
        return self._set_button_listener("delete", callback)

    def set_on_click_task_picker_button_listener(self, callback: BridgeCallback) -> "TimerBridge":
        return self._set_button_listener("task_picker", callback)

    def set_update_status_listener(self, callback: StatusCallback) -> "TimerBridge":
        def on_mutations(records: List[MutationRecord]) -> None:
            status = classify_status_change(records)
            if status is not None:
                self._transition(callback, status)

        self.timer_button_subscription = self.surface.observe(
            self.timer_button, on_mutations, attributes=True, attribute_old_value=True
        )
        initial = ObservedStatus.RUNNING if self.surface.is_counting() else ObservedStatus.STOPPED
        self._transition(callback, initial)
        return self

    def _transition(self, callback: StatusCallback, status: ObservedStatus) -> None:
        self.status = status
        self.update_visibility(status)
        self._invoke(callback, status)

    def set_update_title_listener(self, callback: BridgeCallback) -> "TimerBridge":
        self.title_input_subscription = self.surface.observe(
            self.title_input, lambda records: self._invoke(callback), attributes=True
        )
        return self
