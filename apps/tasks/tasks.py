"""Celery tasks for Tasks app."""
import logging

from celery import shared_task

from .consumers import log_task_action

logger = logging.getLogger(__name__)


@shared_task(name="apps.tasks.tasks.consume_task_action", acks_late=True)
def consume_task_action(message):
    """
    Consume a task action event published by CeleryEventNotifier.

    Malformed messages are logged and dropped, never retried.
    """
    try:
        event = log_task_action(message)
    except ValueError as e:
        logger.error(f"Rejected malformed task event {message!r}: {e}")
        return None
    return event.task_id
