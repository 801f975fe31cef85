from .task import CurrentTaskLink, Task
from .timer import ObservedStatus

__all__ = ["CurrentTaskLink", "ObservedStatus", "Task"]
