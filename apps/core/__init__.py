"""
Core app - Shared abstractions and utilities.

This app provides platform-agnostic interfaces for:
- Event publication (EventNotifierInterface)
- Service health reporting

These abstractions allow switching between:
- Local development (in-process delivery)
- Celery + RabbitMQ (production)
- AWS Lambda + SQS (serverless)
"""
