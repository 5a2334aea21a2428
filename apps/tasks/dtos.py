"""DTOs for Tasks app - Data Transfer Objects shared by the store, service and surfaces."""
from dataclasses import dataclass
from datetime import datetime

from .status import TaskStatus


@dataclass(frozen=True)
class TaskDTO:
    """A persisted task as returned by the store."""
    id: str
    title: str
    description: str
    status: TaskStatus
    due_date: datetime
    created_at: datetime
    updated_at: datetime
    version: int = 1
