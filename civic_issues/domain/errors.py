# SPDX-License-Identifier: Apache-2.0

"""
Error taxonomy for the issue lifecycle.

Every business-rule failure is one of four kinds. Each error carries the
structured detail an adapter needs to render a precise message: the field
name for validation failures, the attempted transition for state failures,
the deny reason for authorization failures and the missing entity for lookups.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Kinds of failure the lifecycle can report."""
    VALIDATION = "validation"
    STATE = "state"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"


class DenyReason(str, Enum):
    """Why the authorization policy denied an operation."""
    NOT_OWNER = "not_owner"
    INSUFFICIENT_ROLE = "insufficient_role"
    NOT_ASSIGNED_HANDLER = "not_assigned_handler"
    ADMINISTRATOR_ONLY = "administrator_only"
    ASSIGNED_TO_OTHER = "assigned_to_other"
    INACTIVE_ACTOR = "inactive_actor"


class IssueError(Exception):
    """Base class for lifecycle failures."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for logging and transport adapters."""
        return {"kind": self.kind.value, "message": self.message}


class IssueValidationError(IssueError):
    """A field invariant was violated."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        return data


class IssueStateError(IssueError):
    """The operation is illegal in the issue's current lifecycle state."""

    kind = ErrorKind.STATE

    def __init__(self, message: str, current_status: Any = None, target_status: Any = None):
        super().__init__(message)
        self.current_status = current_status
        self.target_status = target_status

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.current_status is not None:
            data["current_status"] = _value(self.current_status)
        if self.target_status is not None:
            data["target_status"] = _value(self.target_status)
        return data


class AuthorizationError(IssueError):
    """The actor lacks permission for the operation."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(self, reason: DenyReason, message: str, operation: Any = None):
        super().__init__(message)
        self.reason = reason
        self.operation = operation

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason.value
        if self.operation is not None:
            data["operation"] = _value(self.operation)
        return data


class NotFoundError(IssueError):
    """A referenced issue or actor does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: Optional[str]):
        super().__init__(f"{entity.capitalize()} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["entity"] = self.entity
        data["entity_id"] = self.entity_id
        return data


def _value(item: Any) -> Any:
    return item.value if isinstance(item, Enum) else item
