"""Shared builders for task tests."""
from typing import List
from unittest import mock

import mongomock

from apps.core.event_service import EventNotifierInterface, TaskActionEvent
from apps.tasks.config import TaskServiceConfig
from apps.tasks.services import TaskLifecycleService
from apps.tasks.store import MongoTaskStore

TEST_DB = "task-management-test"
DUE_DATE = "2030-01-15T10:30:00Z"


class RecordingNotifier(EventNotifierInterface):
    """Keeps every published event in memory."""

    def __init__(self):
        self.events: List[TaskActionEvent] = []

    def publish(self, event: TaskActionEvent) -> str:
        self.events.append(event)
        return f"msg-{len(self.events)}"


def make_store(client=None) -> MongoTaskStore:
    return MongoTaskStore(client or mongomock.MongoClient(), TEST_DB)


def make_service(notifier=None, store=None, config=None) -> TaskLifecycleService:
    return TaskLifecycleService(
        store=store or make_store(),
        notifier=notifier or RecordingNotifier(),
        config=config or TaskServiceConfig(),
    )


def failing_notifier() -> mock.Mock:
    notifier = mock.Mock(spec=EventNotifierInterface)
    notifier.publish.side_effect = ConnectionError("broker down")
    return notifier
