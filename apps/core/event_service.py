"""
EventService - Abstraction layer for task action notifications.

This module provides a platform-agnostic interface for publishing
"task created/updated" events. The backend is chosen by EVENT_BACKEND.

Usage:
    from apps.core.event_service import TaskActionEvent, get_notifier

    notifier = get_notifier("local")
    notifier.publish(TaskActionEvent.now(task_id, TaskAction.CREATED))

Environment Configuration:
    EVENT_BACKEND=local   # In-process handlers (development, tests)
    EVENT_BACKEND=celery  # Celery over RabbitMQ (production)
    EVENT_BACKEND=lambda  # AWS SQS + Lambda consumer

Publishing is at-least-once from the backend's point of view; callers
treat it as fire-and-forget and must not let a failure here affect the
write that triggered it.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict, Optional

from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)


class TaskAction:
    """Canonical action names carried by task events."""
    CREATED = "created"
    UPDATED = "updated"

    ALL = (CREATED, UPDATED)


@dataclass(frozen=True)
class TaskActionEvent:
    task_id: str
    action: str
    timestamp: datetime

    @classmethod
    def now(cls, task_id: str, action: str) -> "TaskActionEvent":
        return cls(task_id=task_id, action=action, timestamp=datetime.now(dt_timezone.utc))

    def to_message(self) -> Dict[str, str]:
        """Wire format shared by every backend."""
        return {
            "taskId": self.task_id,
            "action": self.action,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_message(cls, message: Dict[str, Any]) -> "TaskActionEvent":
        """
        Parse a wire message.

        Raises ValueError for anything that is not a well-formed task event.
        """
        if not isinstance(message, dict):
            raise ValueError(f"Task event must be an object, got {type(message).__name__}")

        task_id = message.get("taskId")
        action = message.get("action")
        raw_timestamp = message.get("timestamp")

        if not isinstance(task_id, str) or not task_id:
            raise ValueError("Task event is missing taskId")
        if action not in TaskAction.ALL:
            raise ValueError(f"Unknown task action: {action!r}")
        timestamp = parse_datetime(raw_timestamp) if isinstance(raw_timestamp, str) else None
        if timestamp is None:
            raise ValueError(f"Invalid task event timestamp: {raw_timestamp!r}")

        return cls(task_id=task_id, action=action, timestamp=timestamp)


class EventNotifierInterface(ABC):
    """
    Abstract interface for publishing task action events.

    Implementations:
    - LocalEventNotifier: In-process handlers for development/testing
    - CeleryEventNotifier: Celery task over RabbitMQ
    - LambdaEventNotifier: AWS SQS message consumed by Lambda
    """

    @abstractmethod
    def publish(self, event: TaskActionEvent) -> str:
        """
        Publish an event.

        Args:
            event: The task action to announce

        Returns:
            Message ID for tracking

        Raises:
            Any transport error; callers decide whether to swallow it.
        """
        pass

    def is_connected(self) -> bool:
        """Cheap reachability probe used by the health endpoint."""
        return True


def get_notifier(backend: str = "local", queue_url: Optional[str] = None) -> EventNotifierInterface:
    """Build the notifier for the configured backend."""
    if backend == 'local':
        from apps.core.backends.local_backend import LocalEventNotifier
        return LocalEventNotifier()
    elif backend == 'lambda':
        from apps.core.backends.lambda_backend import LambdaEventNotifier
        return LambdaEventNotifier(queue_url=queue_url)
    elif backend == 'celery':
        from apps.core.backends.celery_backend import CeleryEventNotifier
        return CeleryEventNotifier()
    else:
        raise ValueError(f"Unknown EVENT_BACKEND: {backend}")
