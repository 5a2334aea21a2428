"""
Lambda Handlers - Entry points for AWS Lambda functions.

This module provides Lambda handlers for:
1. SQS Event Consumption - task action events from LambdaEventNotifier
2. Django API (via Mangum) - HTTP requests through API Gateway
"""

import os
import json
import logging

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def sqs_event_handler(event, context):
    """
    AWS Lambda handler for SQS task event messages.

    Event structure:
    {
        "Records": [
            {
                "messageId": "...",
                "body": "{\"taskId\": \"...\", \"action\": \"created\", \"timestamp\": \"...\"}"
            }
        ]
    }

    Malformed records are counted as failed and reported back as batch item
    failures so SQS can route them to the DLQ; the rest of the batch is acked.
    """
    from apps.tasks.consumers import log_task_action

    processed = 0
    failures = []

    for record in event.get('Records', []):
        message_id = record.get('messageId', 'unknown')
        try:
            log_task_action(json.loads(record['body']))
            processed += 1
        except (KeyError, ValueError) as e:
            logger.error(f"Rejected task event {message_id}: {e}")
            failures.append({'itemIdentifier': message_id})

    logger.info(f"Processed {processed} task events, {len(failures)} failed")

    return {
        'batchItemFailures': failures,
    }


def api_handler(event, context):
    """
    AWS Lambda handler for HTTP requests via API Gateway.

    Uses Mangum to wrap Django's ASGI application.
    """
    from config.asgi import lambda_handler
    return lambda_handler(event, context)
