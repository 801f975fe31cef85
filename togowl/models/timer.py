"""Timer status models"""
from enum import Enum


class ObservedStatus(str, Enum):
    """Status derived from the Toggl timer button"""
    RUNNING = "running"
    STOPPED = "stopped"
