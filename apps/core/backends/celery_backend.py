"""
Celery Event Backend - Async delivery via Celery + RabbitMQ.

Events are sent as the ``apps.tasks.tasks.consume_task_action`` Celery
task. CELERY_TASK_ROUTES sends it to the durable task exchange/queue, and
Celery's default delivery mode is persistent.

Usage:
    Set EVENT_BACKEND=celery in your .env file.
    Requires RabbitMQ (RABBITMQ_URL) and a Celery worker running.
"""

import uuid
import logging
from celery import current_app
from kombu.exceptions import OperationalError
from apps.core.event_service import EventNotifierInterface, TaskActionEvent

logger = logging.getLogger(__name__)

CONSUMER_TASK = "apps.tasks.tasks.consume_task_action"


class CeleryEventNotifier(EventNotifierInterface):
    """Publish events through the Celery broker."""

    def publish(self, event: TaskActionEvent) -> str:
        """Queue event via Celery."""
        message_id = str(uuid.uuid4())

        logger.info(f"[CELERY] Publishing task {event.action} event for {event.task_id} (id={message_id})")

        current_app.send_task(
            CONSUMER_TASK,
            args=[event.to_message()],
            task_id=message_id,
        )

        return message_id

    def is_connected(self) -> bool:
        try:
            with current_app.connection_for_write() as conn:
                conn.ensure_connection(max_retries=1)
            return True
        except (OSError, OperationalError) as e:
            logger.warning(f"[CELERY] Broker unreachable: {e}")
            return False
