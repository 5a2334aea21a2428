"""
Task status vocabulary.

One canonical enum, two external representations:
- REST / storage values (the strings persisted in MongoDB and sent over REST)
- GraphQL enum values

Both mappings are bijections over the four canonical statuses. Unknown
external values raise UnknownStatusError.
"""
from enum import Enum
from typing import List

from .exceptions import UnknownStatusError


class TaskStatus(Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"


_REST_VALUES = {
    TaskStatus.OPEN: "открыта",
    TaskStatus.IN_PROGRESS: "в процессе",
    TaskStatus.COMPLETED: "завершена",
    TaskStatus.EXPIRED: "просрочена",
}

_GRAPHQL_VALUES = {
    TaskStatus.OPEN: "OPEN",
    TaskStatus.IN_PROGRESS: "IN_PROGRESS",
    TaskStatus.COMPLETED: "COMPLETED",
    TaskStatus.EXPIRED: "EXPIRED",
}

_FROM_REST = {value: status for status, value in _REST_VALUES.items()}
_FROM_GRAPHQL = {value: status for status, value in _GRAPHQL_VALUES.items()}


def rest_values() -> List[str]:
    return [_REST_VALUES[status] for status in TaskStatus]


def graphql_values() -> List[str]:
    return [_GRAPHQL_VALUES[status] for status in TaskStatus]


def _unknown(choices: List[str]) -> UnknownStatusError:
    return UnknownStatusError(
        "invalid_status",
        f"Invalid status. Must be one of: {', '.join(choices)}",
    )


def to_rest(status: TaskStatus) -> str:
    return _REST_VALUES[status]


def from_rest(value: str) -> TaskStatus:
    try:
        return _FROM_REST[value]
    except (KeyError, TypeError):
        raise _unknown(rest_values()) from None


def to_graphql(status: TaskStatus) -> str:
    return _GRAPHQL_VALUES[status]


def from_graphql(value: str) -> TaskStatus:
    try:
        return _FROM_GRAPHQL[value]
    except (KeyError, TypeError):
        raise _unknown(graphql_values()) from None
