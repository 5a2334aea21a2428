"""
GraphQL schema for tasks.

Same four operations as the REST surface, with statuses exposed as the
GraphQL ``TaskStatus`` enum. Inputs are translated to REST values before
they reach the service and results are translated back.

Domain errors (validation, not found) are returned with their message;
anything else is masked as "Internal server error".
"""
import logging
from enum import Enum
from typing import List, Optional

import strawberry
from graphql import GraphQLError
from strawberry.django.views import GraphQLView
from strawberry.extensions import MaskErrors
from strawberry.types import Info

from .dtos import TaskDTO
from .exceptions import TaskError, TaskNotFound
from .services import TaskLifecycleService, get_task_service
from .status import from_graphql, to_graphql, to_rest

logger = logging.getLogger(__name__)


@strawberry.enum(name="TaskStatus")
class GraphQLTaskStatus(Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"


def _rest_status(value: Optional[GraphQLTaskStatus]) -> Optional[str]:
    if value is None:
        return None
    return to_rest(from_graphql(value.value))


@strawberry.type(name="Task")
class TaskType:
    id: strawberry.ID
    title: str
    description: str
    status: GraphQLTaskStatus
    due_date: str
    created_at: str
    updated_at: str
    version: int

    @classmethod
    def from_dto(cls, task: TaskDTO) -> "TaskType":
        return cls(
            id=strawberry.ID(task.id),
            title=task.title,
            description=task.description,
            status=GraphQLTaskStatus(to_graphql(task.status)),
            due_date=task.due_date.isoformat(),
            created_at=task.created_at.isoformat(),
            updated_at=task.updated_at.isoformat(),
            version=task.version,
        )


@strawberry.input
class CreateTaskInput:
    title: str
    due_date: str
    description: Optional[str] = None
    status: Optional[GraphQLTaskStatus] = None


@strawberry.input
class UpdateTaskInput:
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[GraphQLTaskStatus] = None


def _service(info: Info) -> TaskLifecycleService:
    context = info.context
    if isinstance(context, dict) and context.get("service") is not None:
        return context["service"]
    return get_task_service()


@strawberry.type
class Query:
    @strawberry.field
    def get_task(self, info: Info, id: strawberry.ID) -> TaskType:
        task = _service(info).get_task(str(id))
        if not task:
            raise TaskNotFound()
        return TaskType.from_dto(task)

    @strawberry.field
    def get_tasks(self, info: Info, status: Optional[GraphQLTaskStatus] = None) -> List[TaskType]:
        tasks = _service(info).list_tasks(_rest_status(status))
        return [TaskType.from_dto(task) for task in tasks]


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create_task(self, info: Info, input: CreateTaskInput) -> TaskType:
        task = _service(info).create_task(
            title=input.title,
            description=input.description or "",
            due_date=input.due_date,
            status=_rest_status(input.status),
        )
        return TaskType.from_dto(task)

    @strawberry.mutation
    def update_task(self, info: Info, id: strawberry.ID, input: UpdateTaskInput) -> TaskType:
        changes = {}
        if input.title is not None:
            changes["title"] = input.title
        if input.description is not None:
            changes["description"] = input.description
        if input.status is not None:
            changes["status"] = _rest_status(input.status)

        task = _service(info).update_task(str(id), changes)
        if not task:
            raise TaskNotFound()
        return TaskType.from_dto(task)


def _is_internal_error(error: GraphQLError) -> bool:
    original = error.original_error
    if original is None or isinstance(original, TaskError):
        return False
    logger.error(f"GraphQL resolver failure: {original!r}")
    return True


class TaskSchema(strawberry.Schema):
    def process_errors(self, errors, execution_context=None):
        # Validation and not-found are caller outcomes, not faults
        unexpected = []
        for error in errors:
            if isinstance(error.original_error, TaskError):
                logger.info(f"GraphQL request rejected: {error.message}")
            else:
                unexpected.append(error)
        if unexpected:
            super().process_errors(unexpected, execution_context)


schema = TaskSchema(
    query=Query,
    mutation=Mutation,
    extensions=[
        lambda: MaskErrors(should_mask_error=_is_internal_error, error_message="Internal server error"),
    ],
)


class TaskGraphQLView(GraphQLView):
    """Django view serving the task schema; resolvers get the shared service via context."""

    def get_context(self, request, response):
        return {"request": request, "response": response, "service": get_task_service()}
