"""Domain errors raised by the task lifecycle."""


class TaskError(Exception):
    """Base class for task domain errors."""


class TaskValidationError(TaskError):
    """
    Caller-supplied data failed a field rule.

    ``code`` is machine-readable (e.g. ``title_too_long``); ``message`` is
    meant for the API response.
    """

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class SanitizationError(TaskValidationError):
    """Free text still held forbidden patterns or characters after cleaning."""


class UnknownStatusError(TaskValidationError):
    """An external status value has no canonical counterpart."""


class InvalidTaskId(TaskValidationError):
    """The task id is missing or not a string."""

    def __init__(self):
        super().__init__("invalid_task_id", "Invalid task ID")


class TaskNotFound(TaskError):
    def __init__(self, message: str = "Task not found"):
        super().__init__(message)
        self.message = message
