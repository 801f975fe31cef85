"""Surface adapter - the observed Toggl UI as seen by Togowl.

Togowl never touches the page directly. A concrete adapter (a browser
automation driver, a test fake, ...) implements these interfaces and
delivers raw mutation records; the timer bridge only classifies them.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence


class Element(ABC):
    """A node of the observed surface"""

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        """Attribute value, or None if absent"""

    @abstractmethod
    def set_attribute(self, name: str, value: str) -> None:
        """Set an attribute value"""

    @abstractmethod
    def click(self) -> None:
        """Dispatch a click on the element"""

    @abstractmethod
    def append_child(self, child: "Element") -> None:
        """Append a child element"""

    @abstractmethod
    def add_click_listener(self, listener: Callable[[], None]) -> None:
        """Call listener on every click"""


@dataclass
class MutationRecord:
    """A single low-level change notification"""
    type: str  # "attributes" | "childList"
    target: Optional[Element] = None
    attribute_name: Optional[str] = None
    old_value: Optional[str] = None


MutationCallback = Callable[[List[MutationRecord]], None]


class Subscription(ABC):
    """Handle returned by Surface.observe()"""

    @abstractmethod
    def disconnect(self) -> None:
        """Stop delivering records. Calling twice is a no-op."""


@dataclass
class TaskMenuItem:
    """An entry of the task picker popup"""
    label: str
    on_select: Callable[[], None]


class Surface(ABC):
    """Lookups, readers and factories for the Toggl timer UI"""

    # element lookups

    @abstractmethod
    def body(self) -> Element:
        """Container whose child list changes while the page renders"""

    @abstractmethod
    def find_timer_div(self) -> Optional[Element]:
        """The timer area, None until rendered"""

    @abstractmethod
    def find_timer_button(self) -> Optional[Element]:
        """Toggl START/STOP toggle"""

    @abstractmethod
    def find_title_input(self) -> Optional[Element]:
        """Time entry description input"""

    @abstractmethod
    def find_delete_button(self) -> Optional[Element]:
        """Toggl control deleting the current entry"""

    # readers

    @abstractmethod
    def current_entry_seconds(self) -> int:
        """Seconds elapsed in the current entry"""

    @abstractmethod
    def current_entry_time(self) -> str:
        """Elapsed time as displayed, e.g. "0:12:34" """

    @abstractmethod
    def entry_title(self) -> str:
        """Description of the current entry"""

    @abstractmethod
    def entry_client(self) -> Optional[str]:
        """Client name of the current entry"""

    @abstractmethod
    def entry_project(self) -> Optional[str]:
        """Project name of the current entry"""

    @abstractmethod
    def is_counting(self) -> bool:
        """True while a time entry is running"""

    # factories / subscriptions

    @abstractmethod
    def create_button(self, kind: str) -> Element:
        """Create a Togowl button (start, pause, interrupt, done, delete, task_picker)"""

    @abstractmethod
    def observe(
        self,
        target: Element,
        callback: MutationCallback,
        *,
        attributes: bool = False,
        child_list: bool = False,
        attribute_old_value: bool = False,
    ) -> Subscription:
        """Deliver batches of mutation records of target to callback"""

    # task picker popup

    @abstractmethod
    def show_task_menu_loading(self, anchor: Element) -> None:
        """Show the popup in its loading state"""

    @abstractmethod
    def show_task_menu(
        self, anchor: Element, items: Sequence[TaskMenuItem], on_clear_cache: Callable[[], None]
    ) -> None:
        """Replace the popup content with items"""

    @abstractmethod
    def hide_task_menu(self, anchor: Element) -> None:
        """Close the popup"""
