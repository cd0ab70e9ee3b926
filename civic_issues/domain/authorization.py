# SPDX-License-Identifier: Apache-2.0

"""
Authorization domain logic for issue operations.

This module contains one pure decision function per operation kind. Each
takes the acting user and the issue snapshot (plus the requested status for
status changes) and returns an AuthorizationResult. State preconditions such
as "issue is closed" are not role rules and are checked by the lifecycle,
not here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional
from ..models.entities import Actor, Issue
from ..models.enums import IssueStatus, Role
from .errors import AuthorizationError, DenyReason
from .status import allowed_targets


class Operation(str, Enum):
    """Operations subject to authorization."""
    VIEW = "view"
    UPDATE = "update"
    ASSIGN = "assign"
    CHANGE_STATUS = "change_status"
    DELETE = "delete"
    RESTORE = "restore"


@dataclass(frozen=True)
class AuthorizationResult:
    """Result of an authorization check."""
    allowed: bool
    reason: Optional[DenyReason] = None
    message: Optional[str] = None

    def to_error(self, operation: Optional[Operation] = None) -> AuthorizationError:
        """Convert a denial into the error reported to callers."""
        if self.allowed:
            raise ValueError("Cannot build an error from an allowed result")
        return AuthorizationError(self.reason, self.message, operation=operation)


ALLOWED = AuthorizationResult(allowed=True)


def _deny(reason: DenyReason, message: str) -> AuthorizationResult:
    return AuthorizationResult(allowed=False, reason=reason, message=message)


def _unknown_role(role: Role) -> AuthorizationResult:
    raise ValueError(f"Unknown role: {role}")


def can_view_issue(actor: Actor, issue: Issue) -> AuthorizationResult:
    """
    Check if an actor can see an issue.

    Administrators see everything. Handlers see unassigned issues and issues
    assigned to them. Reporters see only the issues they reported.
    """
    if actor.role == Role.ADMINISTRATOR:
        return ALLOWED

    if actor.role == Role.HANDLER:
        if not issue.is_assigned() or issue.is_assigned_to(actor.id):
            return ALLOWED
        return _deny(DenyReason.ASSIGNED_TO_OTHER, "Issue is assigned to another handler")

    if actor.role == Role.REPORTER:
        if issue.is_reported_by(actor.id):
            return ALLOWED
        return _deny(DenyReason.NOT_OWNER, "Reporters can only view their own issues")

    return _unknown_role(actor.role)


def can_update_issue(actor: Actor, issue: Issue) -> AuthorizationResult:
    """Handlers and administrators can update any issue; reporters only their own."""
    if actor.role in (Role.ADMINISTRATOR, Role.HANDLER):
        return ALLOWED

    if actor.role == Role.REPORTER:
        if issue.is_reported_by(actor.id):
            return ALLOWED
        return _deny(DenyReason.NOT_OWNER, "You are not authorized to update this issue")

    return _unknown_role(actor.role)


def can_assign_issue(actor: Actor, issue: Issue) -> AuthorizationResult:
    """Assigning and unassigning are reserved for handlers and administrators."""
    if actor.role in (Role.ADMINISTRATOR, Role.HANDLER):
        return ALLOWED

    if actor.role == Role.REPORTER:
        return _deny(DenyReason.INSUFFICIENT_ROLE, "Only handlers or administrators can assign issues")

    return _unknown_role(actor.role)


def can_change_status(actor: Actor, issue: Issue, target_status: IssueStatus) -> AuthorizationResult:
    """
    Check if an actor can move an issue to ``target_status``.

    Args:
        actor: Acting user
        issue: Issue snapshot
        target_status: Requested status

    Returns:
        AuthorizationResult; transition legality is checked separately
    """
    if target_status == IssueStatus.OPEN:
        # Anyone can reopen, subject to the state machine
        return ALLOWED

    if target_status == IssueStatus.IN_PROGRESS:
        if actor.role in (Role.ADMINISTRATOR, Role.HANDLER):
            return ALLOWED
        return _deny(DenyReason.INSUFFICIENT_ROLE, "Only handlers or administrators can start work on an issue")

    if target_status == IssueStatus.RESOLVED:
        if actor.role == Role.ADMINISTRATOR:
            return ALLOWED
        if actor.role == Role.HANDLER:
            if issue.is_assigned_to(actor.id):
                return ALLOWED
            return _deny(DenyReason.NOT_ASSIGNED_HANDLER, "Only the assigned handler can resolve this issue")
        return _deny(DenyReason.INSUFFICIENT_ROLE, "Reporters cannot resolve issues")

    if target_status == IssueStatus.CLOSED:
        if actor.role == Role.ADMINISTRATOR:
            return ALLOWED
        return _deny(DenyReason.ADMINISTRATOR_ONLY, "Only administrators can close issues")

    raise ValueError(f"Unknown status: {target_status}")


def can_delete_issue(actor: Actor, issue: Issue) -> AuthorizationResult:
    if actor.role == Role.ADMINISTRATOR:
        return ALLOWED
    return _deny(DenyReason.ADMINISTRATOR_ONLY, "Only administrators can delete issues")


def can_restore_issue(actor: Actor, issue: Issue) -> AuthorizationResult:
    if actor.role == Role.ADMINISTRATOR:
        return ALLOWED
    return _deny(DenyReason.ADMINISTRATOR_ONLY, "Only administrators can restore issues")


_POLICIES: Dict[Operation, Callable[[Actor, Issue], AuthorizationResult]] = {
    Operation.VIEW: can_view_issue,
    Operation.UPDATE: can_update_issue,
    Operation.ASSIGN: can_assign_issue,
    Operation.DELETE: can_delete_issue,
    Operation.RESTORE: can_restore_issue,
}


def authorize(
    operation: Operation,
    actor: Actor,
    issue: Issue,
    target_status: Optional[IssueStatus] = None
) -> AuthorizationResult:
    """
    Decide whether ``actor`` may perform ``operation`` on ``issue``.

    Inactive (soft deleted) actors are denied every operation.

    Raises:
        ValueError: if a status change is checked without a target status
    """
    if not actor.active:
        return _deny(DenyReason.INACTIVE_ACTOR, "Inactive users cannot act on issues")

    if operation == Operation.CHANGE_STATUS:
        if target_status is None:
            raise ValueError("target_status is required for status changes")
        return can_change_status(actor, issue, target_status)

    return _POLICIES[operation](actor, issue)


def filter_visible_issues(actor: Actor, issues: Iterable[Issue]) -> List[Issue]:
    """Keep only the issues the actor may view, preserving order."""
    return [issue for issue in issues if authorize(Operation.VIEW, actor, issue).allowed]


def permitted_status_targets(actor: Actor, issue: Issue) -> List[IssueStatus]:
    """Statuses the actor could move the issue to right now."""
    if issue.is_deleted() or not actor.active:
        return []
    return [
        target for target in allowed_targets(issue.status)
        if can_change_status(actor, issue, target).allowed
    ]


def permitted_operations(actor: Actor, issue: Issue) -> List[Operation]:
    """
    Operations the actor could perform on the issue in its current state.

    Combines the policy with the lifecycle's state preconditions so adapters
    can render affordance links that will actually succeed.
    """
    operations = []
    for operation in Operation:
        if operation == Operation.CHANGE_STATUS:
            if permitted_status_targets(actor, issue):
                operations.append(operation)
            continue

        if not authorize(operation, actor, issue).allowed:
            continue

        if operation in (Operation.UPDATE, Operation.ASSIGN):
            if issue.is_deleted() or issue.is_closed():
                continue
        elif operation == Operation.DELETE and issue.is_deleted():
            continue
        elif operation == Operation.RESTORE and not issue.is_deleted():
            continue

        operations.append(operation)

    return operations


def get_deny_reason_description(reason: DenyReason) -> str:
    """
    Get human-readable description for a deny reason.

    Args:
        reason: Deny reason code

    Returns:
        Human-readable description
    """
    descriptions = {
        DenyReason.NOT_OWNER: "The issue was reported by someone else",
        DenyReason.INSUFFICIENT_ROLE: "Your role does not allow this operation",
        DenyReason.NOT_ASSIGNED_HANDLER: "Only the handler assigned to the issue can do this",
        DenyReason.ADMINISTRATOR_ONLY: "Only administrators can do this",
        DenyReason.ASSIGNED_TO_OTHER: "The issue is assigned to another handler",
        DenyReason.INACTIVE_ACTOR: "Your account is inactive",
    }

    return descriptions.get(reason, f"Denied: {reason}")
