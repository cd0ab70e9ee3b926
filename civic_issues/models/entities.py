# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the civic issue tracker.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict
from .base import BaseEntity
from .enums import Role, IssueStatus, Priority, Category
from ..domain.errors import IssueValidationError, IssueStateError


TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 200
DESCRIPTION_MIN_LENGTH = 20
DESCRIPTION_MAX_LENGTH = 2000
LOCATION_MAX_LENGTH = 500


class ActorRef(BaseModel):
    """Reference to an actor as recorded on an issue."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Actor identifier")
    role: Role = Field(..., description="Role the actor held when referenced")


class Actor(BaseModel):
    """Authenticated user acting on issues."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Actor identifier")
    role: Role = Field(..., description="Actor role")
    name: Optional[str] = Field(None, min_length=2, max_length=100, description="Display name")
    email: Optional[str] = Field(None, max_length=255, description="Email address")
    active: bool = Field(default=True, description="False once the account is soft deleted")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate actor name."""
        if v is None:
            return v
        if not v.strip():
            raise ValueError('Actor name cannot be empty')
        return v.strip()

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        if v is None:
            return v
        import re
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, v.lower()):
            raise ValueError('Invalid email format')
        return v.lower()

    def ref(self) -> ActorRef:
        return ActorRef(id=self.id, role=self.role)

    def is_administrator(self) -> bool:
        return self.role == Role.ADMINISTRATOR

    def is_handler(self) -> bool:
        return self.role == Role.HANDLER

    def is_reporter(self) -> bool:
        return self.role == Role.REPORTER

    def can_be_assigned(self) -> bool:
        """Only handlers and administrators can work on issues."""
        return self.role != Role.REPORTER


class Issue(BaseEntity):
    """
    Municipal issue reported by a citizen.

    Field types are enforced by pydantic; business invariants (lengths,
    required references, assignee role) are checked by ``validate`` so that a
    snapshot loaded from storage can be inspected even when it is invalid.
    Every mutator returns a new, validated ``Issue``.
    """

    title: Optional[str] = Field(None, description="Short summary")
    description: Optional[str] = Field(None, description="Detailed description")
    location: Optional[str] = Field(None, description="Where the problem is")
    category: Optional[Category] = Field(None, description="Issue classification")
    priority: Optional[Priority] = Field(default=Priority.MEDIUM, description="Urgency")
    status: Optional[IssueStatus] = Field(default=IssueStatus.OPEN, description="Lifecycle status")
    reported_by: Optional[ActorRef] = Field(None, description="Reporter, immutable after creation")
    assigned_to: Optional[ActorRef] = Field(None, description="Handler or administrator working on it")
    resolved_at: Optional[datetime] = Field(None, description="First time the issue was resolved")
    closed_at: Optional[datetime] = Field(None, description="Closing timestamp")

    @classmethod
    def report(
        cls,
        title: Optional[str],
        description: Optional[str],
        category: Optional[Category],
        location: Optional[str],
        reporter: Optional[ActorRef],
        now: datetime,
        priority: Optional[Priority] = None,
    ) -> "Issue":
        """Build a new open issue and validate it."""
        issue = cls(
            title=_clean(title),
            description=_clean(description),
            location=_clean(location),
            category=category,
            priority=priority or Priority.default(),
            status=IssueStatus.OPEN,
            reported_by=reporter,
            created_at=now,
            updated_at=now,
        )
        return issue.validate()

    @property
    def reporter_id(self) -> Optional[str]:
        return self.reported_by.id if self.reported_by else None

    @property
    def assignee_id(self) -> Optional[str]:
        return self.assigned_to.id if self.assigned_to else None

    def is_closed(self) -> bool:
        return self.status == IssueStatus.CLOSED

    def is_assigned(self) -> bool:
        return self.assigned_to is not None

    def is_assigned_to(self, actor_id: str) -> bool:
        return self.assignee_id is not None and self.assignee_id == actor_id

    def is_reported_by(self, actor_id: str) -> bool:
        return self.reporter_id is not None and self.reporter_id == actor_id

    def validation_error(self) -> Optional[IssueValidationError]:
        """Return the first violated invariant, or None if the issue is valid."""
        error = (
            _check_text(self.title, 'title', 'Title', TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)
            or _check_text(self.description, 'description', 'Description',
                           DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH)
            or _check_text(self.location, 'location', 'Location', None, LOCATION_MAX_LENGTH)
        )
        if error:
            return error

        if self.category is None:
            return IssueValidationError('category', 'Category cannot be null')
        if self.status is None:
            return IssueValidationError('status', 'Status cannot be null')
        if self.priority is None:
            return IssueValidationError('priority', 'Priority cannot be null')
        if self.reported_by is None:
            return IssueValidationError('reported_by', 'Reporter cannot be null')

        if self.assigned_to is not None and self.assigned_to.role == Role.REPORTER:
            return IssueValidationError(
                'assigned_to', 'Issues can only be assigned to handlers or administrators'
            )

        if (self.closed_at is not None) != (self.status == IssueStatus.CLOSED):
            return IssueValidationError(
                'closed_at', 'closed_at must be set exactly when the issue is closed'
            )

        return None

    def validate(self) -> "Issue":
        """Raise the first violated invariant; return self when valid."""
        error = self.validation_error()
        if error:
            raise error
        return self

    def update_details(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        *,
        now: datetime,
    ) -> "Issue":
        """Change title and/or description. None keeps the current value."""
        self._require_not_closed('update')
        self._require_not_deleted('update')

        changes = {}
        if title is not None:
            changes['title'] = title.strip()
        if description is not None:
            changes['description'] = description.strip()
        if not changes:
            return self

        return self.evolve(updated_at=now, **changes).validate()

    def change_priority(self, priority: Priority, *, now: datetime) -> "Issue":
        self._require_not_closed('change priority of')
        if priority is None:
            raise IssueValidationError('priority', 'Priority cannot be null')
        return self.evolve(priority=priority, updated_at=now).validate()

    def recategorize(self, category: Category, *, now: datetime) -> "Issue":
        self._require_not_closed('update')
        self._require_not_deleted('update')
        if category is None:
            raise IssueValidationError('category', 'Category cannot be null')
        return self.evolve(category=category, updated_at=now).validate()

    def relocate(self, location: str, *, now: datetime) -> "Issue":
        self._require_not_closed('update')
        self._require_not_deleted('update')
        return self.evolve(location=_clean(location), updated_at=now).validate()

    def assign_to(self, assignee: ActorRef, *, now: datetime) -> "Issue":
        """Assign the issue to a handler or administrator."""
        if assignee is None:
            raise IssueValidationError('assigned_to', 'Cannot assign to null user')
        if assignee.role == Role.REPORTER:
            raise IssueValidationError(
                'assigned_to', 'Issues can only be assigned to handlers or administrators'
            )
        self._require_not_closed('assign')
        self._require_not_deleted('assign')

        return self.evolve(assigned_to=assignee, updated_at=now).validate()

    def unassign(self, *, now: datetime) -> "Issue":
        self._require_not_closed('unassign')
        self._require_not_deleted('unassign')
        if not self.is_assigned():
            return self
        return self.evolve(assigned_to=None, updated_at=now).validate()

    def transition_to(self, target: IssueStatus, *, now: datetime) -> "Issue":
        """
        Move the issue to another status.

        Entering Resolved stamps ``resolved_at`` the first time only; reopening
        keeps the original resolution timestamp. Entering Closed stamps
        ``closed_at``.
        """
        from ..domain.status import validate_transition

        if target is None:
            raise IssueValidationError('status', 'Status cannot be null')
        self._require_not_deleted('change status of')

        error = validate_transition(self.status, target)
        if error:
            raise error

        changes = {'status': target, 'updated_at': now}
        if target == IssueStatus.RESOLVED and self.resolved_at is None:
            changes['resolved_at'] = now
        if target == IssueStatus.CLOSED:
            changes['closed_at'] = now

        return self.evolve(**changes).validate()

    def soft_delete(self, *, now: datetime) -> "Issue":
        if self.is_deleted():
            raise IssueStateError('Issue is already deleted', current_status=self.status)
        return self.evolve(deleted_at=now, updated_at=now).validate()

    def restore(self, *, now: datetime) -> "Issue":
        if not self.is_deleted():
            raise IssueStateError('Issue is not deleted', current_status=self.status)
        return self.evolve(deleted_at=None, updated_at=now).validate()

    def _require_not_closed(self, action: str) -> None:
        if self.is_closed():
            raise IssueStateError(f'Cannot {action} closed issue', current_status=self.status)

    def _require_not_deleted(self, action: str) -> None:
        if self.is_deleted():
            raise IssueStateError(f'Cannot {action} deleted issue', current_status=self.status)


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def _check_text(
    value: Optional[str],
    field: str,
    label: str,
    min_length: Optional[int],
    max_length: int,
) -> Optional[IssueValidationError]:
    """Non-blank first, then length bounds on the trimmed value."""
    if value is None or not value.strip():
        return IssueValidationError(field, f'{label} cannot be empty')
    length = len(value.strip())
    if min_length is not None and length < min_length:
        return IssueValidationError(
            field, f'{label} must be at least {min_length} characters long'
        )
    if length > max_length:
        return IssueValidationError(field, f'{label} cannot exceed {max_length} characters')
    return None


def validate_issue(issue: Issue) -> Optional[IssueValidationError]:
    """
    Check an issue snapshot against the entity invariants.

    Args:
        issue: Issue to check

    Returns:
        The first violated invariant, or None if the issue is valid
    """
    return issue.validation_error()
