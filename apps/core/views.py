"""Operational endpoints."""
import time

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

_STARTED_AT = time.monotonic()


@require_GET
def health(request: HttpRequest):
    """
    Report liveness plus reachability of the document store and event channel.

    Always 200; dependency state is in the body.
    """
    from apps.tasks.services import get_task_service

    service = get_task_service()
    return JsonResponse({
        "status": "ok",
        "timestamp": timezone.now().isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "environment": settings.ENVIRONMENT,
        "mongodb": service.store.ping(),
        "eventBus": service.notifier.is_connected(),
    })
