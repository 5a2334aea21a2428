"""
Consumer side of the task event channel.

Every backend (local handler, Celery worker, SQS Lambda) ends up here.
"""
import logging
from typing import Any, Dict

from apps.core.event_service import TaskActionEvent

logger = logging.getLogger(__name__)


def log_task_action(message: Dict[str, Any]) -> TaskActionEvent:
    """
    Parse an event message and record it.

    Raises ValueError for malformed messages; the transport decides
    whether that means reject, dead-letter or count as failed.
    """
    event = TaskActionEvent.from_message(message)
    logger.info(f"Task {event.task_id} was {event.action} at {event.timestamp.isoformat()}")
    return event
