"""
Local Event Backend - Synchronous delivery for development.

This backend hands events to in-process handlers immediately.
No RabbitMQ, SQS, or external dependencies required.

Usage:
    Set EVENT_BACKEND=local in your .env file.
"""

import uuid
import logging
from typing import Any, Callable, Dict, List
from apps.core.event_service import EventNotifierInterface, TaskActionEvent

logger = logging.getLogger(__name__)


# Event handler registry - every handler receives every event message
EVENT_HANDLERS: List[Callable[[Dict[str, Any]], Any]] = []


def register_handler(func):
    """Decorator to register an event handler."""
    EVENT_HANDLERS.append(func)
    return func


class LocalEventNotifier(EventNotifierInterface):
    """
    Deliver events synchronously in the same process.

    This is ideal for:
    - Local development without Docker/RabbitMQ
    - Unit testing with immediate delivery
    - Debugging consumers

    Note: Handlers run inside the publishing request. A failing handler
    raises out of publish(), exactly like a broker error would.
    """

    def publish(self, event: TaskActionEvent) -> str:
        """Deliver event synchronously."""
        message_id = str(uuid.uuid4())
        message = event.to_message()

        logger.info(f"[LOCAL] Delivering task {event.action} event for {event.task_id} (id={message_id})")

        for handler in EVENT_HANDLERS:
            try:
                handler(message)
            except Exception as e:
                logger.exception(f"[LOCAL] Handler {handler.__name__} failed: {e}")
                raise

        return message_id


# =============================================================================
# Event Handlers
# =============================================================================

@register_handler
def handle_task_action(message: Dict[str, Any]):
    """Log the task action, as the queue consumers do."""
    from apps.tasks.consumers import log_task_action
    return log_task_action(message)
