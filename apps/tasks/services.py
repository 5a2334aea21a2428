"""
Task lifecycle service.

Composes the validators, the status vocabulary, the task store and the
event notifier into the four task operations. Each write is two-phase:

1. the store write, which alone decides success or failure
2. notify_best_effort(), whose failures are logged and discarded

The service holds no mutable state; concurrent calls are only coordinated
by the store's atomic single-document operations.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from apps.core.event_service import EventNotifierInterface, TaskAction, TaskActionEvent, get_notifier

from .config import TaskServiceConfig
from .dtos import TaskDTO
from .exceptions import InvalidTaskId
from .status import TaskStatus
from .store import MongoTaskStore
from .validators import (
    sanitize,
    validate_description,
    validate_due_date,
    validate_status,
    validate_title,
)

logger = logging.getLogger(__name__)


def _check_task_id(task_id: Any) -> str:
    if not isinstance(task_id, str) or not task_id:
        raise InvalidTaskId()
    return task_id


class TaskLifecycleService:
    """Create, read, list and update tasks."""

    def __init__(
        self,
        store: MongoTaskStore,
        notifier: EventNotifierInterface,
        config: Optional[TaskServiceConfig] = None,
    ):
        self._store = store
        self._notifier = notifier
        self._config = config or TaskServiceConfig()

    @property
    def store(self) -> MongoTaskStore:
        return self._store

    @property
    def notifier(self) -> EventNotifierInterface:
        return self._notifier

    # -------------------------------------------------------------------------
    # Field pipelines
    # -------------------------------------------------------------------------

    def _clean_title(self, title: Any) -> str:
        validate_title(title, self._config.title_max_length).unwrap()
        return self._sanitize_title(title)

    def _sanitize_title(self, title: str) -> str:
        # Markup-only titles come out blank
        cleaned = sanitize(title).unwrap()
        return validate_title(cleaned, self._config.title_max_length).unwrap()

    def _clean_description(self, description: Any) -> str:
        # Length is checked after sanitization, which can only shrink text
        cleaned = sanitize(description).unwrap() if description else ""
        return validate_description(cleaned, self._config.description_max_length).unwrap()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def create_task(
        self,
        *,
        title: Any,
        due_date: Any,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> TaskDTO:
        """
        Validate, sanitize and persist a new task, then announce it.

        Title and due date are checked before any sanitization work.
        ``status`` is a REST status value; omitted means OPEN.
        """
        validate_title(title, self._config.title_max_length).unwrap()
        parsed_due_date = validate_due_date(due_date).unwrap()

        fields = {
            "title": self._sanitize_title(title),
            "description": self._clean_description(description),
            "status": validate_status(status).unwrap(),
            "due_date": parsed_due_date,
        }

        task = self._store.create_task(fields)
        logger.info(f"Created task {task.id}")

        self.notify_best_effort(task.id, TaskAction.CREATED)
        return task

    def get_task(self, task_id: Any) -> Optional[TaskDTO]:
        """Return the task, or None when no task has this id."""
        return self._store.get_task(_check_task_id(task_id))

    def list_tasks(self, status: Optional[str] = None) -> List[TaskDTO]:
        """
        List tasks, newest first, optionally filtered by a REST status value.

        The filter is validated before the store is touched.
        """
        status_filter: Optional[TaskStatus] = None
        if status:
            status_filter = validate_status(status).unwrap()
        return self._store.list_tasks(status_filter)

    def update_task(self, task_id: Any, changes: Mapping[str, Any]) -> Optional[TaskDTO]:
        """
        Merge the supplied fields into a task.

        Only keys present in ``changes`` are validated and written; anything
        omitted is left as stored. Returns None when no task has this id.
        """
        task_id = _check_task_id(task_id)

        fields: Dict[str, Any] = {}
        if "title" in changes:
            fields["title"] = self._clean_title(changes["title"])
        if "description" in changes:
            fields["description"] = self._clean_description(changes["description"])
        if "status" in changes:
            fields["status"] = validate_status(changes["status"]).unwrap()

        task = self._store.update_task(task_id, fields)
        if task is None:
            return None

        logger.info(f"Updated task {task.id} (version {task.version}, fields: {sorted(fields)})")
        self.notify_best_effort(task.id, TaskAction.UPDATED)
        return task

    # -------------------------------------------------------------------------
    # Notification
    # -------------------------------------------------------------------------

    def notify_best_effort(self, task_id: str, action: str) -> bool:
        """
        Publish a task action event without letting failure escape.

        Returns whether the notifier accepted the event; the caller's
        outcome never depends on it.
        """
        event = TaskActionEvent.now(task_id, action)
        try:
            self._notifier.publish(event)
        except Exception:
            logger.exception(f"Failed to publish task {action} event for {task_id}")
            return False
        return True


# =============================================================================
# Process-wide instance
# =============================================================================

_service: Optional[TaskLifecycleService] = None


def build_task_service(config: TaskServiceConfig) -> TaskLifecycleService:
    return TaskLifecycleService(
        store=MongoTaskStore.from_config(config),
        notifier=get_notifier(config.event_backend, queue_url=config.queue_url),
        config=config,
    )


def get_task_service() -> TaskLifecycleService:
    """Lazily build the service used by the REST and GraphQL surfaces."""
    global _service
    if _service is None:
        from django.conf import settings
        _service = build_task_service(TaskServiceConfig.from_settings(settings))
    return _service
