"""Attachment Watcher - attaches the timer bridge once Toggl has rendered its timer"""
import logging
from typing import Callable, List, Optional

from togowl.services.timer.timer_bridge import DEFAULT_INTERRUPT_DELAY, TimerBridge
from togowl.surface.base import MutationRecord, Subscription, Surface

logger = logging.getLogger(__name__)


class AttachmentWatcher:
    """
    Watches child list changes of the page body and builds the TimerBridge
    the first time the timer area exists. Never fires again afterwards.
    """

    def __init__(
        self,
        surface: Surface,
        on_attach: Callable[[TimerBridge], None],
        interrupt_delay: float = DEFAULT_INTERRUPT_DELAY,
    ):
        self._surface = surface
        self._on_attach = on_attach
        self._interrupt_delay = interrupt_delay
        self._subscription: Optional[Subscription] = None
        self.bridge: Optional[TimerBridge] = None

    @property
    def attached(self) -> bool:
        return self.bridge is not None

    def start(self) -> None:
        if self._subscription is not None or self.attached:
            return
        self._subscription = self._surface.observe(self._surface.body(), self._on_mutations, child_list=True)

    def _on_mutations(self, records: List[MutationRecord]) -> None:
        if self.attached or not TimerBridge.ready_to_create(self._surface):
            return

        if self._subscription is not None:
            self._subscription.disconnect()
            self._subscription = None

        logger.info("Add timer contents.")
        self.bridge = TimerBridge.create(self._surface, interrupt_delay=self._interrupt_delay)
        self._on_attach(self.bridge)
