"""
Audit log schemas.
"""

from pydantic import Field
from typing import Any, Optional
from enum import Enum

from models.base import BaseSchema


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    IMPORT = "IMPORT"


class AuditLogCreate(BaseSchema):
    """One audit_logs row."""

    action: AuditAction
    entity_type: str = Field(..., examples=["Unit"])
    entity_id: str = Field(..., examples=["csv:12", "bulk:3"])
    old_values: dict[str, Any] = Field(default_factory=dict)
    new_values: dict[str, Any] = Field(default_factory=dict)
    changes: Optional[dict[str, Any]] = None
    metadata: Optional[dict[str, Any]] = None
    user_id: str
    organization_id: str
