"""
Lambda Event Backend - Async delivery via AWS SQS + Lambda.

This backend sends event messages to SQS, which triggers
lambda_handlers.sqs_event_handler.

Usage:
    Set EVENT_BACKEND=lambda in your .env file.
    Requires:
    - AWS credentials configured
    - SQS queue created
    - Lambda consumer deployed

Environment Variables:
    EVENT_QUEUE_URL: SQS queue URL for event messages
    AWS_REGION: AWS region (default: ap-southeast-1)
"""

import os
import json
import logging
from typing import Optional
from apps.core.event_service import EventNotifierInterface, TaskActionEvent

logger = logging.getLogger(__name__)


class LambdaEventNotifier(EventNotifierInterface):
    """
    Publish events via AWS SQS.

    The message body is the event's wire format; the action travels as a
    message attribute as well so consumers can filter without parsing.
    """

    def __init__(self, queue_url: Optional[str] = None):
        self._sqs_client = None
        self._queue_url = queue_url or os.getenv('EVENT_QUEUE_URL')

        if not self._queue_url:
            logger.warning(
                "[LAMBDA] EVENT_QUEUE_URL not set. "
                "Lambda backend will fail on publish."
            )

    @property
    def sqs_client(self):
        """Lazy initialization of SQS client."""
        if self._sqs_client is None:
            import boto3
            self._sqs_client = boto3.client(
                'sqs',
                region_name=os.getenv('AWS_REGION', 'ap-southeast-1')
            )
        return self._sqs_client

    def publish(self, event: TaskActionEvent) -> str:
        """Send event to SQS."""
        if not self._queue_url:
            raise RuntimeError(
                "EVENT_QUEUE_URL environment variable not set. "
                "Cannot publish events to Lambda backend."
            )

        logger.info(f"[LAMBDA] Sending task {event.action} event for {event.task_id} to SQS")

        try:
            response = self.sqs_client.send_message(
                QueueUrl=self._queue_url,
                MessageBody=json.dumps(event.to_message()),
                MessageAttributes={
                    'Action': {
                        'DataType': 'String',
                        'StringValue': event.action,
                    },
                    'TaskId': {
                        'DataType': 'String',
                        'StringValue': event.task_id,
                    },
                },
            )
        except Exception as e:
            logger.exception(f"[LAMBDA] Failed to send task {event.action} event: {e}")
            raise

        message_id = response['MessageId']
        logger.info(f"[LAMBDA] Event queued. SQS MessageId: {message_id}")
        return message_id

    def is_connected(self) -> bool:
        return bool(self._queue_url)
