"""
ASGI config for the task management backend.

Serves REST (/api/v1), GraphQL (/graphql) and /health from one Django app.
Runs under Uvicorn/Daphne, or on AWS Lambda through Mangum.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

# Initialize Django at import time so a Lambda cold start pays for it once.
from django.core.asgi import get_asgi_application

application = get_asgi_application()


_lambda_handler = None


def lambda_handler(event, context):
    """
    AWS Lambda entry point for HTTP requests.

    The Mangum adapter is created on first invocation and reused.
    """
    global _lambda_handler
    if _lambda_handler is None:
        from mangum import Mangum
        _lambda_handler = Mangum(application, lifespan="off")
    return _lambda_handler(event, context)
