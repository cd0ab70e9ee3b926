# SPDX-License-Identifier: Apache-2.0

"""
Issue lifecycle domain logic.

This module contains the pure command handlers for the issue workflow. Every
mutating command runs the same steps: state preconditions, the authorization
policy, the entity mutation, and re-validation. The first failing step
short-circuits and is returned in the LifecycleResult; the issue passed in is
never modified, so a failed command applies nothing.

The caller supplies already-loaded actors and issues and the current time.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional
from ..models.entities import Actor, Issue
from ..models.enums import Category, IssueStatus, Priority
from .authorization import Operation, authorize, filter_visible_issues
from .errors import (
    DenyReason, ErrorKind, IssueError, IssueStateError, IssueValidationError,
    AuthorizationError
)
from .sla import is_overdue
from .status import is_terminal, validate_transition


@dataclass
class CreateIssueCommand:
    """Data for reporting a new issue."""
    title: Optional[str]
    description: Optional[str]
    category: Optional[Category]
    location: Optional[str]
    priority: Optional[Priority] = None


@dataclass
class UpdateIssueCommand:
    """Fields to change on an issue. None leaves a field untouched."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    location: Optional[str] = None

    def is_empty(self) -> bool:
        return all(
            value is None for value in
            (self.title, self.description, self.priority, self.category, self.location)
        )


@dataclass
class IssueFilters:
    """Filters for issue queries."""
    status: Optional[IssueStatus] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    reporter_id: Optional[str] = None
    assignee_id: Optional[str] = None
    include_deleted: bool = False
    overdue_only: bool = False
    search_term: Optional[str] = None


@dataclass
class LifecycleResult:
    """Result of an issue lifecycle command."""
    success: bool
    issue: Optional[Issue] = None
    error: Optional[IssueError] = None

    @classmethod
    def ok(cls, issue: Issue) -> "LifecycleResult":
        return cls(success=True, issue=issue)

    @classmethod
    def failed(cls, error: IssueError) -> "LifecycleResult":
        return cls(success=False, error=error)

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None


def _check_allowed(
    operation: Operation,
    actor: Actor,
    issue: Issue,
    target_status: Optional[IssueStatus] = None
) -> Optional[AuthorizationError]:
    result = authorize(operation, actor, issue, target_status)
    if result.allowed:
        return None
    return result.to_error(operation)


def _check_editable(issue: Issue, action: str) -> Optional[IssueStateError]:
    if issue.is_deleted():
        return IssueStateError(f"Cannot {action} deleted issue", current_status=issue.status)
    if issue.is_closed():
        return IssueStateError(f"Cannot {action} closed issue", current_status=issue.status)
    return None


def create_issue(command: CreateIssueCommand, reporter: Actor, now: datetime) -> LifecycleResult:
    """
    Report a new issue.

    The status is always Open and the priority defaults to Medium.

    Args:
        command: Issue data
        reporter: Actor reporting the issue
        now: Current time

    Returns:
        LifecycleResult with the new, not yet persisted issue or the first error
    """
    if not reporter.active:
        return LifecycleResult.failed(AuthorizationError(
            DenyReason.INACTIVE_ACTOR, "Inactive users cannot report issues"
        ))

    try:
        issue = Issue.report(
            title=command.title,
            description=command.description,
            category=command.category,
            location=command.location,
            reporter=reporter.ref(),
            now=now,
            priority=command.priority,
        )
    except IssueError as e:
        return LifecycleResult.failed(e)

    return LifecycleResult.ok(issue)


def update_issue(
    issue: Issue,
    actor: Actor,
    command: UpdateIssueCommand,
    now: datetime
) -> LifecycleResult:
    """
    Update title, description, priority, category and/or location.

    Args:
        issue: Issue to update
        actor: Acting user
        command: Fields to change
        now: Current time

    Returns:
        LifecycleResult with the updated issue or the first error
    """
    state_error = _check_editable(issue, "update")
    if state_error:
        return LifecycleResult.failed(state_error)

    auth_error = _check_allowed(Operation.UPDATE, actor, issue)
    if auth_error:
        return LifecycleResult.failed(auth_error)

    try:
        if command.is_empty():
            return LifecycleResult.ok(issue.validate())

        updated = issue
        if command.title is not None or command.description is not None:
            updated = updated.update_details(command.title, command.description, now=now)
        if command.priority is not None:
            updated = updated.change_priority(command.priority, now=now)
        if command.category is not None:
            updated = updated.recategorize(command.category, now=now)
        if command.location is not None:
            updated = updated.relocate(command.location, now=now)
        updated.validate()
    except IssueError as e:
        return LifecycleResult.failed(e)

    return LifecycleResult.ok(updated)


def assign_issue(
    issue: Issue,
    actor: Actor,
    assignee: Optional[Actor],
    now: datetime
) -> LifecycleResult:
    """
    Assign an issue to a handler or administrator, or unassign it.

    Args:
        issue: Issue to assign
        actor: Acting user
        assignee: New assignee, or None to clear the assignment
        now: Current time

    Returns:
        LifecycleResult with the updated issue or the first error
    """
    state_error = _check_editable(issue, "assign")
    if state_error:
        return LifecycleResult.failed(state_error)

    auth_error = _check_allowed(Operation.ASSIGN, actor, issue)
    if auth_error:
        return LifecycleResult.failed(auth_error)

    try:
        if assignee is None:
            updated = issue.unassign(now=now)
        elif not assignee.active:
            raise IssueValidationError("assigned_to", "Cannot assign to an inactive user")
        else:
            updated = issue.assign_to(assignee.ref(), now=now)
    except IssueError as e:
        return LifecycleResult.failed(e)

    return LifecycleResult.ok(updated)


def change_status(
    issue: Issue,
    actor: Actor,
    target_status: IssueStatus,
    now: datetime
) -> LifecycleResult:
    """
    Move an issue to another status.

    Same-status requests and requests on a closed issue fail with a state
    error for every role, before the policy is consulted.

    Args:
        issue: Issue to transition
        actor: Acting user
        target_status: Requested status
        now: Current time

    Returns:
        LifecycleResult with the updated issue or the first error
    """
    if target_status is None:
        return LifecycleResult.failed(IssueValidationError("status", "Status cannot be null"))

    if issue.is_deleted():
        return LifecycleResult.failed(IssueStateError(
            "Cannot change status of deleted issue",
            current_status=issue.status,
            target_status=target_status
        ))

    if issue.status == target_status or is_terminal(issue.status):
        return LifecycleResult.failed(validate_transition(issue.status, target_status))

    auth_error = _check_allowed(Operation.CHANGE_STATUS, actor, issue, target_status)
    if auth_error:
        return LifecycleResult.failed(auth_error)

    try:
        updated = issue.transition_to(target_status, now=now)
    except IssueError as e:
        return LifecycleResult.failed(e)

    return LifecycleResult.ok(updated)


def delete_issue(issue: Issue, actor: Actor, now: datetime) -> LifecycleResult:
    """Soft delete an issue. Administrators only."""
    if issue.is_deleted():
        return LifecycleResult.failed(IssueStateError(
            "Issue is already deleted", current_status=issue.status
        ))

    auth_error = _check_allowed(Operation.DELETE, actor, issue)
    if auth_error:
        return LifecycleResult.failed(auth_error)

    try:
        updated = issue.soft_delete(now=now)
    except IssueError as e:
        return LifecycleResult.failed(e)

    return LifecycleResult.ok(updated)


def restore_issue(issue: Issue, actor: Actor, now: datetime) -> LifecycleResult:
    """Undo a soft delete. Administrators only."""
    if not issue.is_deleted():
        return LifecycleResult.failed(IssueStateError(
            "Issue is not deleted", current_status=issue.status
        ))

    auth_error = _check_allowed(Operation.RESTORE, actor, issue)
    if auth_error:
        return LifecycleResult.failed(auth_error)

    try:
        updated = issue.restore(now=now)
    except IssueError as e:
        return LifecycleResult.failed(e)

    return LifecycleResult.ok(updated)


def get_visible_issue(issue: Issue, actor: Actor) -> Optional[Issue]:
    """Return the issue if the actor may view it, otherwise None."""
    if authorize(Operation.VIEW, actor, issue).allowed:
        return issue
    return None


def filter_issues(
    issues: Iterable[Issue],
    filters: IssueFilters,
    now: Optional[datetime] = None
) -> List[Issue]:
    """
    Filter issues based on criteria.

    Args:
        issues: Issues to filter
        filters: Filter criteria
        now: Current time, required when filtering on overdue issues

    Returns:
        Filtered list of issues, in the order given
    """
    if filters.overdue_only and now is None:
        raise ValueError("now is required to filter overdue issues")

    filtered = list(issues)

    if not filters.include_deleted:
        filtered = [i for i in filtered if not i.is_deleted()]

    if filters.status is not None:
        filtered = [i for i in filtered if i.status == filters.status]

    if filters.priority is not None:
        filtered = [i for i in filtered if i.priority == filters.priority]

    if filters.category is not None:
        filtered = [i for i in filtered if i.category == filters.category]

    if filters.reporter_id:
        filtered = [i for i in filtered if i.is_reported_by(filters.reporter_id)]

    if filters.assignee_id:
        filtered = [i for i in filtered if i.is_assigned_to(filters.assignee_id)]

    if filters.overdue_only:
        filtered = [i for i in filtered if is_overdue(i, now)]

    # Search title, description and location
    if filters.search_term and filters.search_term.strip():
        search_lower = filters.search_term.strip().lower()
        filtered = [
            i for i in filtered
            if search_lower in (i.title or "").lower()
            or search_lower in (i.description or "").lower()
            or search_lower in (i.location or "").lower()
        ]

    return filtered


def list_visible_issues(
    actor: Actor,
    candidates: Iterable[Issue],
    filters: Optional[IssueFilters] = None,
    now: Optional[datetime] = None
) -> List[Issue]:
    """
    Apply filters and the view policy to a caller-supplied candidate set.

    Args:
        actor: Acting user
        candidates: Issues to consider, typically newest first
        filters: Optional filter criteria
        now: Current time, required for overdue filtering

    Returns:
        Issues the actor may view, in candidate order
    """
    filtered = filter_issues(candidates, filters or IssueFilters(), now)
    return filter_visible_issues(actor, filtered)
