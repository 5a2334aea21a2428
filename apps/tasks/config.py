"""
Explicit configuration for the task lifecycle and its collaborators.

Built once from Django settings at the process edge and passed in at
construction time; the service never reads settings itself.
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from .validators import DEFAULT_DESCRIPTION_MAX_LENGTH, DEFAULT_TITLE_MAX_LENGTH


@dataclass(frozen=True)
class TaskServiceConfig:
    mongodb_uri: str = "mongodb://localhost:27017/task-management"
    mongodb_db_name: str = "task-management"
    mongodb_collection: str = "tasks"
    mongodb_options: Dict[str, Any] = field(default_factory=dict)
    event_backend: str = "local"
    queue_url: str = "amqp://localhost:5672"
    title_max_length: int = DEFAULT_TITLE_MAX_LENGTH
    description_max_length: int = DEFAULT_DESCRIPTION_MAX_LENGTH

    @classmethod
    def from_settings(cls, settings) -> "TaskServiceConfig":
        store = settings.DOCUMENT_STORE
        backend = settings.EVENT_BACKEND
        queue_url = settings.EVENT_QUEUE_URL if backend == "lambda" else settings.RABBITMQ_URL
        return cls(
            mongodb_uri=store["URI"],
            mongodb_db_name=store["NAME"],
            mongodb_collection=store.get("COLLECTION", "tasks"),
            mongodb_options=dict(store.get("OPTIONS", {})),
            event_backend=backend,
            queue_url=queue_url,
            title_max_length=settings.TASK_TITLE_MAX_LENGTH,
            description_max_length=settings.TASK_DESCRIPTION_MAX_LENGTH,
        )
