"""
API Schemas for Tasks app.
Pydantic/Ninja schemas for request/response validation.

Wire names are camelCase (``dueDate``, ``_id``) and statuses use the REST
vocabulary. Field rules (lengths, sanitization, date parsing) live in the
service so both surfaces report identical errors.
"""
from typing import Optional
from datetime import datetime
from ninja import Field, Schema

from .status import to_rest


# =============================================================================
# Request Schemas
# =============================================================================

class TaskIn(Schema):
    """Schema for creating a task."""
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = Field(None, alias="dueDate")
    status: Optional[str] = None


class TaskPatchIn(Schema):
    """Schema for a partial update; only fields present in the body are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


# =============================================================================
# Response Schemas
# =============================================================================

class TaskOut(Schema):
    id: str = Field(..., serialization_alias="_id")
    title: str
    description: str
    status: str
    due_date: datetime = Field(..., serialization_alias="dueDate")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")
    version: int

    @staticmethod
    def resolve_status(obj):
        return to_rest(obj.status)


class ErrorOut(Schema):
    error: str
    code: Optional[str] = None
    timestamp: datetime
