import logging

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from typing import Optional  # noqa: E402

from togowl.clients.slack import SlackClient  # noqa: E402
from togowl.clients.todoist import TodoistClient  # noqa: E402
from togowl.clients.toggl import TogglClient  # noqa: E402
from togowl.infra.supabase.client import get_supabase_client  # noqa: E402
from togowl.infra.supabase.repositories.settings import SettingsRepository  # noqa: E402
from togowl.services.notifier.notifier import Notifier  # noqa: E402
from togowl.services.settings_service import SettingsService  # noqa: E402
from togowl.services.task_picker.task_picker_service import TaskPickerService  # noqa: E402
from togowl.services.timer.attachment_watcher import AttachmentWatcher  # noqa: E402
from togowl.services.timer.handlers import TimerHandlers  # noqa: E402
from togowl.services.timer.timer_bridge import DEFAULT_INTERRUPT_DELAY  # noqa: E402
from togowl.surface.base import Surface  # noqa: E402


def create_watcher(
    surface: Surface,
    settings: Optional[SettingsService] = None,
    todoist: Optional[TodoistClient] = None,
    toggl: Optional[TogglClient] = None,
    slack: Optional[SlackClient] = None,
    interrupt_delay: float = DEFAULT_INTERRUPT_DELAY,
) -> AttachmentWatcher:
    """
    Wire Togowl onto a surface and start waiting for the Toggl timer.

    Every collaborator can be injected; defaults use Supabase for settings
    and the real HTTP clients.
    """
    settings = settings or SettingsService(SettingsRepository(get_supabase_client()))
    todoist = todoist or TodoistClient()
    toggl = toggl or TogglClient()
    slack = slack or SlackClient()

    notifier = Notifier(surface, settings, slack)
    task_picker = TaskPickerService(settings, todoist, toggl)
    handlers = TimerHandlers(notifier, settings, todoist, task_picker)

    watcher = AttachmentWatcher(surface, handlers.register, interrupt_delay=interrupt_delay)
    watcher.start()
    return watcher
