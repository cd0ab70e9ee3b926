# SPDX-License-Identifier: Apache-2.0

"""
Issue application service.

Thin adapter around the lifecycle core: it resolves actors and issues from
the repositories, supplies the current time, calls the pure command handler,
persists successful results and records logs and trace spans. It adds no
business rules of its own.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional
from opentelemetry import trace

from ..domain import lifecycle
from ..domain.errors import NotFoundError
from ..domain.lifecycle import (
    CreateIssueCommand, IssueFilters, LifecycleResult, UpdateIssueCommand
)
from ..models.entities import Actor, Issue
from ..models.enums import IssueStatus
from .repository import IssueRepository, UserRepository

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IssueService:
    """Id-based entry point used by transport adapters."""

    def __init__(
        self,
        issue_repository: IssueRepository,
        user_repository: UserRepository,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the issue service.

        Args:
            issue_repository: Issue persistence port
            user_repository: Actor lookup port
            clock: Callable returning the current time, defaults to UTC now
        """
        self.issues = issue_repository
        self.users = user_repository
        self.clock = clock or utc_now

    def create_issue(self, reporter_id: str, command: CreateIssueCommand) -> LifecycleResult:
        """Report a new issue on behalf of ``reporter_id``."""
        with tracer.start_as_current_span("issue_service.create") as span:
            span.set_attribute("actor.id", reporter_id)

            reporter = self.users.find_by_id(reporter_id)
            if reporter is None:
                return self._finish("create", None, reporter_id, span,
                                    LifecycleResult.failed(NotFoundError("user", reporter_id)))

            result = lifecycle.create_issue(command, reporter, self.clock())
            return self._finish("create", None, reporter_id, span, result)

    def update_issue(self, issue_id: str, actor_id: str, command: UpdateIssueCommand) -> LifecycleResult:
        return self._execute(
            "update", issue_id, actor_id,
            lambda issue, actor, now: lifecycle.update_issue(issue, actor, command, now)
        )

    def assign_issue(self, issue_id: str, actor_id: str, assignee_id: Optional[str]) -> LifecycleResult:
        """Assign to ``assignee_id``, or unassign when it is None."""
        def assign(issue: Issue, actor: Actor, now: datetime) -> LifecycleResult:
            assignee = None
            if assignee_id is not None:
                assignee = self.users.find_by_id(assignee_id)
                if assignee is None:
                    return LifecycleResult.failed(NotFoundError("user", assignee_id))
            return lifecycle.assign_issue(issue, actor, assignee, now)

        return self._execute("assign", issue_id, actor_id, assign)

    def change_status(self, issue_id: str, actor_id: str, target_status: IssueStatus) -> LifecycleResult:
        return self._execute(
            "change_status", issue_id, actor_id,
            lambda issue, actor, now: lifecycle.change_status(issue, actor, target_status, now)
        )

    def delete_issue(self, issue_id: str, actor_id: str) -> LifecycleResult:
        return self._execute("delete", issue_id, actor_id, lifecycle.delete_issue)

    def restore_issue(self, issue_id: str, actor_id: str) -> LifecycleResult:
        return self._execute("restore", issue_id, actor_id, lifecycle.restore_issue)

    def get_issue(self, issue_id: str, actor_id: str) -> LifecycleResult:
        """
        Fetch a single issue.

        Issues the actor may not view are reported as not found so their
        existence is not disclosed.
        """
        with tracer.start_as_current_span("issue_service.get") as span:
            span.set_attributes({"issue.id": issue_id, "actor.id": actor_id})

            actor = self.users.find_by_id(actor_id)
            if actor is None:
                return LifecycleResult.failed(NotFoundError("user", actor_id))

            issue = self.issues.find_by_id(issue_id)
            visible = lifecycle.get_visible_issue(issue, actor) if issue else None
            if visible is None:
                span.set_attribute("issue.found", False)
                return LifecycleResult.failed(NotFoundError("issue", issue_id))

            span.set_attribute("issue.found", True)
            return LifecycleResult.ok(visible)

    def list_issues(self, actor_id: str, filters: Optional[IssueFilters] = None) -> List[Issue]:
        """
        List the issues an actor may view, newest first.

        Raises:
            NotFoundError: if the actor does not exist
        """
        with tracer.start_as_current_span("issue_service.list") as span:
            span.set_attribute("actor.id", actor_id)

            actor = self.users.find_by_id(actor_id)
            if actor is None:
                raise NotFoundError("user", actor_id)

            issues = lifecycle.list_visible_issues(
                actor, self.issues.find_all(), filters, now=self.clock()
            )
            span.set_attribute("issue.count", len(issues))
            return issues

    def _execute(
        self,
        operation: str,
        issue_id: str,
        actor_id: str,
        handler: Callable[[Issue, Actor, datetime], LifecycleResult]
    ) -> LifecycleResult:
        with tracer.start_as_current_span(f"issue_service.{operation}") as span:
            span.set_attributes({"issue.id": issue_id, "actor.id": actor_id})

            actor = self.users.find_by_id(actor_id)
            if actor is None:
                result = LifecycleResult.failed(NotFoundError("user", actor_id))
                return self._finish(operation, issue_id, actor_id, span, result)

            issue = self.issues.find_by_id(issue_id)
            if issue is None:
                result = LifecycleResult.failed(NotFoundError("issue", issue_id))
                return self._finish(operation, issue_id, actor_id, span, result)

            result = handler(issue, actor, self.clock())
            return self._finish(operation, issue_id, actor_id, span, result)

    def _finish(
        self,
        operation: str,
        issue_id: Optional[str],
        actor_id: str,
        span,
        result: LifecycleResult
    ) -> LifecycleResult:
        """Persist a successful result and record the outcome."""
        span.set_attribute("operation.success", result.success)

        if not result.success:
            span.set_attribute("error.kind", result.error.kind.value)
            logger.warning(
                f"Issue {operation} rejected: {result.error.message}",
                extra={
                    "operation": operation,
                    "issue_id": issue_id,
                    "actor_id": actor_id,
                    "error_kind": result.error.kind.value,
                    "error_detail": result.error.to_dict()
                }
            )
            return result

        saved = self.issues.save(result.issue)
        logger.info(
            f"Issue {operation} succeeded",
            extra={
                "operation": operation,
                "issue_id": saved.id,
                "actor_id": actor_id,
                "status": saved.status.value
            }
        )
        return LifecycleResult.ok(saved)
