# SPDX-License-Identifier: Apache-2.0

"""
Issue status state machine.

Pure functions over ``IssueStatus`` values. The table below is the single
source of truth for which transitions are legal; it says nothing about who
may perform them (see ``domain.authorization``).
"""

from typing import Dict, FrozenSet, List, Optional
from ..models.enums import IssueStatus
from .errors import IssueStateError


ALLOWED_TRANSITIONS: Dict[IssueStatus, FrozenSet[IssueStatus]] = {
    IssueStatus.OPEN: frozenset({IssueStatus.IN_PROGRESS, IssueStatus.CLOSED}),
    IssueStatus.IN_PROGRESS: frozenset({IssueStatus.RESOLVED, IssueStatus.OPEN}),
    IssueStatus.RESOLVED: frozenset({IssueStatus.OPEN, IssueStatus.CLOSED}),
    IssueStatus.CLOSED: frozenset(),  # Terminal state
}


def can_transition(current_status: IssueStatus, new_status: IssueStatus) -> bool:
    """
    Check if a status transition is legal.

    Args:
        current_status: Current issue status
        new_status: Desired new status

    Returns:
        True if the transition is allowed. Self-transitions never are.
    """
    if current_status == new_status:
        return False
    return new_status in ALLOWED_TRANSITIONS[current_status]


def is_terminal(status: IssueStatus) -> bool:
    """Closed issues can never change status again."""
    return not ALLOWED_TRANSITIONS[status]


def is_active(status: IssueStatus) -> bool:
    """Open and in-progress issues still need attention."""
    return status in (IssueStatus.OPEN, IssueStatus.IN_PROGRESS)


def allowed_targets(status: IssueStatus) -> List[IssueStatus]:
    """Statuses reachable from ``status`` in one step, in declaration order."""
    return [target for target in IssueStatus if target in ALLOWED_TRANSITIONS[status]]


def validate_transition(
    current_status: IssueStatus,
    new_status: IssueStatus
) -> Optional[IssueStateError]:
    """
    Validate an issue status transition.

    Args:
        current_status: Current issue status
        new_status: Desired new status

    Returns:
        IssueStateError describing the rejected transition, or None
    """
    if current_status == new_status:
        return IssueStateError(
            f"Issue is already {current_status.value}",
            current_status=current_status,
            target_status=new_status
        )

    if is_terminal(current_status):
        return IssueStateError(
            f"Invalid status transition from {current_status.value} to {new_status.value}: "
            f"{current_status.value} is a final state",
            current_status=current_status,
            target_status=new_status
        )

    if not can_transition(current_status, new_status):
        return IssueStateError(
            f"Invalid status transition from {current_status.value} to {new_status.value}",
            current_status=current_status,
            target_status=new_status
        )

    return None
