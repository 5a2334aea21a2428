"""
Tasks API endpoints.

Provides create/read/list/update on the task resource. Partial updates
use merge semantics: only fields present in the PATCH body are applied.
Errors are returned as {"error", "code", "timestamp"}.
"""
import logging
from typing import List, Optional
from django.http import HttpRequest
from django.utils import timezone
from ninja import NinjaAPI, Router
from ninja.errors import ValidationError as SchemaValidationError
from pymongo.errors import PyMongoError

from .exceptions import TaskNotFound, TaskValidationError
from .schemas import ErrorOut, TaskIn, TaskOut, TaskPatchIn
from .services import get_task_service

logger = logging.getLogger(__name__)

router = Router(tags=["Tasks"])


def error_body(message: str, code: Optional[str] = None) -> dict:
    return {
        "error": message,
        "code": code,
        "timestamp": timezone.now().isoformat(),
    }


@router.post("", response={201: TaskOut, 400: ErrorOut}, by_alias=True)
def create_task_api(request: HttpRequest, payload: TaskIn):
    """
    Create a new task.

    ``status`` defaults to "открыта" when omitted.
    """
    task = get_task_service().create_task(
        title=payload.title,
        description=payload.description,
        due_date=payload.due_date,
        status=payload.status,
    )
    return 201, task


@router.get("", response=List[TaskOut], by_alias=True)
def list_tasks_api(request: HttpRequest, status: Optional[str] = None):
    """
    List tasks, newest first.

    Query Parameters:
    - status: Filter by status (открыта, в процессе, завершена, просрочена)
    """
    return get_task_service().list_tasks(status)


@router.get("/{task_id}", response={200: TaskOut, 404: ErrorOut}, by_alias=True)
def get_task_api(request: HttpRequest, task_id: str):
    """
    Get details of a single task.
    """
    task = get_task_service().get_task(task_id)
    if not task:
        raise TaskNotFound()
    return task


@router.patch("/{task_id}", response={200: TaskOut, 400: ErrorOut, 404: ErrorOut}, by_alias=True)
def update_task_api(request: HttpRequest, task_id: str, payload: TaskPatchIn):
    """
    Update a task with the fields present in the body.

    Explicit nulls are treated as omitted.
    """
    changes = {
        name: value
        for name, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    task = get_task_service().update_task(task_id, changes)
    if not task:
        raise TaskNotFound()
    return task


# =============================================================================
# Error mapping
# =============================================================================

def register_exception_handlers(api: NinjaAPI) -> None:
    """
    Map domain outcomes onto HTTP responses.

    Validation -> 400, not found -> 404, store failure -> 500.
    """

    @api.exception_handler(TaskValidationError)
    def on_task_validation_error(request, exc: TaskValidationError):
        logger.info(f"Rejected task request ({exc.code}): {exc.message}")
        return api.create_response(request, error_body(exc.message, exc.code), status=400)

    @api.exception_handler(SchemaValidationError)
    def on_schema_validation_error(request, exc: SchemaValidationError):
        first = exc.errors[0] if exc.errors else {}
        message = first.get("msg", "Validation error")
        return api.create_response(request, error_body(message, "invalid_request"), status=400)

    @api.exception_handler(TaskNotFound)
    def on_task_not_found(request, exc: TaskNotFound):
        return api.create_response(request, error_body(exc.message, "not_found"), status=404)

    @api.exception_handler(PyMongoError)
    def on_store_error(request, exc: PyMongoError):
        logger.exception(f"Task store failure: {exc}")
        return api.create_response(request, error_body("Internal server error"), status=500)
