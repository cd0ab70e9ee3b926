# SPDX-License-Identifier: Apache-2.0

"""
Priority and SLA model.

Each priority carries a rank (1 = most urgent), an assignment SLA counted
from creation for unassigned issues, and a resolution SLA counted from the
last update for assigned issues. Overdue checks take the current time as a
parameter; nothing here reads the clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional
from ..models.enums import IssueStatus, Priority
from ..models.entities import Issue


@dataclass(frozen=True)
class SlaPolicy:
    """Service level targets for one priority."""
    rank: int
    assignment_hours: int
    resolution_hours: int


SLA_TABLE: Dict[Priority, SlaPolicy] = {
    Priority.CRITICAL: SlaPolicy(rank=1, assignment_hours=1, resolution_hours=4),
    Priority.HIGH: SlaPolicy(rank=2, assignment_hours=4, resolution_hours=24),
    Priority.MEDIUM: SlaPolicy(rank=3, assignment_hours=24, resolution_hours=72),
    Priority.LOW: SlaPolicy(rank=4, assignment_hours=72, resolution_hours=168),
}

_SETTLED = (IssueStatus.RESOLVED, IssueStatus.CLOSED)


def priority_rank(priority: Priority) -> int:
    return SLA_TABLE[priority].rank


def assignment_sla(priority: Priority) -> timedelta:
    """Time allowed between creation and assignment."""
    return timedelta(hours=SLA_TABLE[priority].assignment_hours)


def resolution_sla(priority: Priority) -> timedelta:
    """Time allowed between the last update of an assigned issue and resolution."""
    return timedelta(hours=SLA_TABLE[priority].resolution_hours)


def is_higher_priority(priority: Priority, other: Priority) -> bool:
    """True if ``priority`` is more urgent than ``other``."""
    return priority_rank(priority) < priority_rank(other)


def sla_deadline(issue: Issue) -> Optional[datetime]:
    """
    Deadline the issue is currently measured against.

    Args:
        issue: Issue snapshot

    Returns:
        Assignment deadline for unassigned issues, resolution deadline for
        assigned ones, None once the issue is resolved or closed
    """
    if issue.status in _SETTLED:
        return None

    if issue.is_assigned():
        return issue.updated_at + resolution_sla(issue.priority)
    return issue.created_at + assignment_sla(issue.priority)


def is_overdue(issue: Issue, now: datetime) -> bool:
    """Check whether the issue has missed its current SLA."""
    deadline = sla_deadline(issue)
    if deadline is None:
        return False
    return now > deadline


def hours_until_overdue(issue: Issue, now: datetime) -> Optional[int]:
    """
    Remaining SLA budget in whole hours.

    Partial hours are truncated toward zero, so an issue 90 minutes past its
    deadline reports -1.

    Args:
        issue: Issue snapshot
        now: Current time

    Returns:
        Whole hours left before the issue is overdue, negative once it is;
        None for resolved and closed issues, which are no longer measured
    """
    deadline = sla_deadline(issue)
    if deadline is None:
        return None
    return int((deadline - now).total_seconds() / 3600)


def find_overdue_issues(issues: Iterable[Issue], now: datetime) -> List[Issue]:
    """Issues that have missed their SLA, for escalation."""
    return [issue for issue in issues if is_overdue(issue, now)]


def sort_by_urgency(issues: Iterable[Issue], now: datetime) -> List[Issue]:
    """
    Order issues for a work queue.

    Most urgent priority first; within a priority, the issue with the least
    remaining budget first. Settled issues go last.
    """
    def urgency_key(issue: Issue):
        deadline = sla_deadline(issue)
        if deadline is None:
            return (1, priority_rank(issue.priority), timedelta.max)
        return (0, priority_rank(issue.priority), deadline - now)

    return sorted(issues, key=urgency_key)
