"""
Field validation and sanitization for task input.

Every function here is pure and returns a ValidationResult instead of
raising, so callers can branch on ``result.valid`` / ``result.code``.
``result.unwrap()`` converts a failure into the matching TaskValidationError.

Sanitization order:
1. strip markup (tags and their attributes, so payloads hidden in
   attributes such as ``onerror=`` or ``href="javascript:..."`` go with them;
   ``script`` and ``style`` elements are dropped with their content)
2. reject text that still carries a forbidden pattern
3. reject text with any character outside the allow-list
4. trim
"""
import re
from dataclasses import dataclass
from datetime import datetime, time, timezone as dt_timezone
from typing import Any, Optional

import nh3
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import SanitizationError, TaskValidationError, UnknownStatusError
from .status import TaskStatus, from_rest

DEFAULT_TITLE_MAX_LENGTH = 100
DEFAULT_DESCRIPTION_MAX_LENGTH = 500

FORBIDDEN_PATTERN = re.compile(r"alert\s*\(|javascript:|onerror\s*=|onload\s*=", re.IGNORECASE)
ALLOWED_TEXT = re.compile(r"[\w\s.,!?@#\-()\[\]{}:;\"'«»–—]+")
NON_TEXT_TAGS = {"script", "style"}

_ERRORS_BY_CODE = {
    "forbidden_pattern": SanitizationError,
    "forbidden_characters": SanitizationError,
    "invalid_status": UnknownStatusError,
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single field check."""
    valid: bool
    value: Any = None
    code: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: Any) -> "ValidationResult":
        return cls(valid=True, value=value)

    @classmethod
    def fail(cls, code: str, error: str) -> "ValidationResult":
        return cls(valid=False, code=code, error=error)

    def unwrap(self) -> Any:
        if self.valid:
            return self.value
        error_class = _ERRORS_BY_CODE.get(self.code, TaskValidationError)
        raise error_class(self.code, self.error)


def validate_title(title: Optional[str], max_length: int = DEFAULT_TITLE_MAX_LENGTH) -> ValidationResult:
    if not isinstance(title, str) or not title.strip():
        return ValidationResult.fail("title_required", "Title is required")
    if len(title) > max_length:
        return ValidationResult.fail(
            "title_too_long", f"Title too long (max {max_length} characters)"
        )
    return ValidationResult.ok(title)


def validate_description(
    description: Optional[str], max_length: int = DEFAULT_DESCRIPTION_MAX_LENGTH
) -> ValidationResult:
    description = description or ""
    if not isinstance(description, str):
        return ValidationResult.fail("invalid_description", "Description must be text")
    if len(description) > max_length:
        return ValidationResult.fail(
            "description_too_long", f"Description too long (max {max_length} characters)"
        )
    return ValidationResult.ok(description)


def validate_due_date(due_date: Optional[str]) -> ValidationResult:
    """
    Parse an ISO-8601 date or date-time into an aware UTC datetime.

    Naive values are taken as UTC; a bare date means midnight UTC.
    """
    invalid = ValidationResult.fail("invalid_due_date", "Invalid due date format")
    if not isinstance(due_date, str) or not due_date.strip():
        return invalid

    text = due_date.strip()
    try:
        parsed = parse_datetime(text)
        if parsed is None:
            day = parse_date(text)
            if day is None:
                return invalid
            parsed = datetime.combine(day, time.min)
    except ValueError:
        # Well formed but out of range, e.g. month 13
        return invalid

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return ValidationResult.ok(parsed.astimezone(dt_timezone.utc))


def validate_status(status: Optional[str]) -> ValidationResult:
    """Map a REST status value to TaskStatus; empty means OPEN."""
    if status is None or status == "":
        return ValidationResult.ok(TaskStatus.OPEN)
    try:
        return ValidationResult.ok(from_rest(status))
    except UnknownStatusError as e:
        return ValidationResult.fail(e.code, e.message)


def sanitize(text: str) -> ValidationResult:
    if not isinstance(text, str):
        return ValidationResult.fail("forbidden_characters", "Input contains forbidden characters")

    clean = nh3.clean(text, tags=set(), clean_content_tags=NON_TEXT_TAGS)

    if FORBIDDEN_PATTERN.search(clean):
        return ValidationResult.fail("forbidden_pattern", "Input contains forbidden patterns")
    if not ALLOWED_TEXT.fullmatch(clean):
        return ValidationResult.fail("forbidden_characters", "Input contains forbidden characters")

    return ValidationResult.ok(clean.strip())
