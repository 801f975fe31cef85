"""Timer handlers - what happens when a Togowl button is pressed or the status changes"""
import logging

from togowl.clients.todoist import TodoistClient
from togowl.clients.toggl import TogglTitle
from togowl.models.timer import ObservedStatus
from togowl.services.notifier.notifier import Notifier
from togowl.services.settings_service import SettingsService
from togowl.services.task_picker.task_picker_service import TaskPickerService
from togowl.services.timer.timer_bridge import TimerBridge
from togowl.utils.prefix import get_event_prefix

logger = logging.getLogger(__name__)

# Entries older than this are considered resumed, not started
START_NOTIFICATION_MAX_SECONDS = 10


class TimerHandlers:
    """Application handlers registered on the TimerBridge"""

    def __init__(
        self,
        notifier: Notifier,
        settings: SettingsService,
        todoist: TodoistClient,
        task_picker: TaskPickerService,
    ):
        self.notifier = notifier
        self.settings = settings
        self.todoist = todoist
        self.task_picker = task_picker

    def register(self, bridge: TimerBridge) -> TimerBridge:
        return (
            bridge.set_on_click_start_button_listener(self.on_start)
            .set_on_click_pause_button_listener(self.on_pause)
            .set_on_click_interrupt_button_listener(self.on_interrupt)
            .set_on_click_done_button_listener(self.on_done)
            .set_on_click_delete_button_listener(self.on_delete)
            .set_on_click_task_picker_button_listener(self.task_picker.open)
            .set_update_title_listener(self.on_title_changed)
            .set_update_status_listener(self.on_status_changed)
        )

    def on_start(self, bridge: TimerBridge) -> None:
        logger.debug("Start button clicked.")
        bridge.click_timer_button()

    def on_pause(self, bridge: TimerBridge) -> None:
        logger.debug("Pause button clicked.")
        self.notifier.post(
            lambda title, client, project, time:
                f"{get_event_prefix('pause')} `中断` {time}  *{title}*    {client}{project}"
        )
        bridge.click_timer_button()

    def on_interrupt(self, bridge: TimerBridge) -> None:
        logger.debug("Interrupt button clicked.")
        self.notifier.post(
            lambda title, client, project, time:
                f"{get_event_prefix('interrupt')} `割込発生`:fukidashi3::doushite:"
        )

        bridge.click_timer_button()

        self.notifier.post(
            lambda title, client, project, time:
                f"　{get_event_prefix('force_stop')} `強制中断` {time}  *{title}*    {client}{project}"
        )

        # A single click does not always end the entry while interrupting
        bridge.stop_later()

    async def on_done(self, bridge: TimerBridge) -> None:
        logger.debug("Done button clicked.")
        self.notifier.post(
            lambda title, client, project, time:
                f"{get_event_prefix('done')} `完了` {time}  *{title}*    {client}{project}"
        )

        await self.close_current_task(bridge)
        bridge.click_timer_button()

    async def close_current_task(self, bridge: TimerBridge) -> None:
        """Close the linked Todoist task if it is the one being timed, then unlink it"""
        try:
            link = await self.settings.get_current_task()
            if link and bridge.title() == TogglTitle.from_todoist_title(link.task_title):
                await self.todoist.close_task(await self.settings.get_todoist_api_token(), link.task_id)
        except Exception as e:
            logger.error(f"Error closing Todoist task: {e}")

        try:
            await self.settings.clear_current_task()
        except Exception as e:
            logger.error(f"Error clearing current Todoist task: {e}")

    def on_delete(self, bridge: TimerBridge) -> None:
        logger.debug("Delete button clicked.")
        self.notifier.post(
            lambda title, client, project, time: f"{get_event_prefix('delete')} `やっぱナシ`"
        )
        bridge.delete_entry()

    def on_title_changed(self, bridge: TimerBridge) -> None:
        logger.debug(f"Title updated -> {bridge.title()}.")

    def on_status_changed(self, bridge: TimerBridge, status: ObservedStatus) -> None:
        logger.debug(f"Status updated -> {status.value}.")
        if (
            status == ObservedStatus.RUNNING
            and not bridge.is_title_empty()
            and bridge.current_entry_seconds() < START_NOTIFICATION_MAX_SECONDS
        ):
            self.notifier.post(
                lambda title, client, project, time:
                    f"{get_event_prefix('start')} `開始`  *{title}*    {client}{project}"
            )
