"""Task domain models"""
from typing import Optional
from pydantic import BaseModel


class Task(BaseModel):
    """Todoist task as seen by Togowl (read-only snapshot)"""
    id: int
    title: str
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    checked: bool = False


class CurrentTaskLink(BaseModel):
    """Association between the running Toggl entry and a Todoist task"""
    task_id: int
    task_title: str
