# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Issue workflow acceptance tests.

Drives complete issue workflows through IssueService and checks that the
business rules hold end to end.
"""

import pytest

from civic_issues.domain.errors import DenyReason, ErrorKind
from civic_issues.domain.lifecycle import CreateIssueCommand, IssueFilters, UpdateIssueCommand
from civic_issues.models.enums import Category, IssueStatus, Priority


def report_pothole(service, reporter_id, title="Pothole on Elm"):
    return service.create_issue(reporter_id, CreateIssueCommand(
        title=title,
        description="Large hole in the asphalt",
        category=Category.INFRASTRUCTURE,
        location="Elm St",
    ))


class TestReportedScenarios:
    """Walk through the reference scenarios for the issue workflow."""

    def test_reporter_creates_issue(self, service, actors):
        result = report_pothole(service, actors["reporter"].id)

        assert result.success is True
        assert result.issue.status == IssueStatus.OPEN
        assert result.issue.priority == Priority.MEDIUM

    def test_reporter_cannot_start_work(self, service, actors):
        issue = report_pothole(service, actors["reporter"].id).issue

        result = service.change_status(issue.id, actors["reporter"].id, IssueStatus.IN_PROGRESS)

        assert result.error_kind == ErrorKind.AUTHORIZATION
        assert result.error.reason == DenyReason.INSUFFICIENT_ROLE

    def test_assigned_handler_resolves(self, service, actors):
        issue = report_pothole(service, actors["reporter"].id).issue
        handler_id = actors["handler"].id

        assert service.assign_issue(issue.id, actors["admin"].id, handler_id).success
        assert service.change_status(issue.id, handler_id, IssueStatus.IN_PROGRESS).success

        result = service.change_status(issue.id, handler_id, IssueStatus.RESOLVED)

        assert result.success is True
        assert result.issue.resolved_at is not None

    def test_closed_is_terminal(self, service, actors):
        issue = report_pothole(service, actors["reporter"].id).issue
        admin_id = actors["admin"].id

        assert service.change_status(issue.id, admin_id, IssueStatus.CLOSED).success

        result = service.change_status(issue.id, admin_id, IssueStatus.OPEN)

        assert result.error_kind == ErrorKind.STATE

    def test_short_title_rejected(self, service, actors):
        result = report_pothole(service, actors["reporter"].id, title="short")

        assert result.error_kind == ErrorKind.VALIDATION
        assert result.error.field == "title"

    def test_deleted_issue_cannot_be_updated(self, service, actors):
        issue = report_pothole(service, actors["reporter"].id).issue
        admin_id = actors["admin"].id

        assert service.delete_issue(issue.id, admin_id).success

        result = service.update_issue(issue.id, admin_id, UpdateIssueCommand(priority=Priority.HIGH))

        assert result.error_kind == ErrorKind.STATE


class TestLifecycleProperties:

    def test_every_successful_result_is_valid(self, service, actors):
        reporter_id = actors["reporter"].id
        handler_id = actors["handler"].id
        admin_id = actors["admin"].id
        issue_id = report_pothole(service, reporter_id).issue.id

        steps = [
            lambda: service.update_issue(issue_id, reporter_id, UpdateIssueCommand(priority=Priority.HIGH)),
            lambda: service.assign_issue(issue_id, admin_id, handler_id),
            lambda: service.change_status(issue_id, handler_id, IssueStatus.IN_PROGRESS),
            lambda: service.update_issue(issue_id, handler_id, UpdateIssueCommand(title="x")),
            lambda: service.change_status(issue_id, handler_id, IssueStatus.RESOLVED),
            lambda: service.change_status(issue_id, reporter_id, IssueStatus.OPEN),
            lambda: service.assign_issue(issue_id, handler_id, None),
            lambda: service.change_status(issue_id, admin_id, IssueStatus.CLOSED),
            lambda: service.assign_issue(issue_id, admin_id, handler_id),
            lambda: service.delete_issue(issue_id, admin_id),
            lambda: service.restore_issue(issue_id, admin_id),
        ]

        outcomes = []
        for step in steps:
            result = step()
            outcomes.append(result.success)
            if result.success:
                assert result.issue.validation_error() is None

        assert outcomes == [True, True, True, False, True, True, True, True, False, True, True]

    @pytest.mark.parametrize("role", ["reporter", "handler", "admin"])
    def test_same_status_always_rejected(self, service, actors, role):
        issue = report_pothole(service, actors["reporter"].id).issue

        result = service.change_status(issue.id, actors[role].id, IssueStatus.OPEN)

        assert result.error_kind == ErrorKind.STATE

    def test_resolution_and_close_timestamps(self, service, actors):
        handler_id = actors["handler"].id
        admin_id = actors["admin"].id
        issue_id = report_pothole(service, actors["reporter"].id).issue.id

        service.assign_issue(issue_id, admin_id, handler_id)
        service.change_status(issue_id, handler_id, IssueStatus.IN_PROGRESS)
        first_resolution = service.change_status(issue_id, handler_id, IssueStatus.RESOLVED).issue.resolved_at

        reopened = service.change_status(issue_id, actors["reporter"].id, IssueStatus.OPEN).issue
        assert reopened.resolved_at == first_resolution

        service.change_status(issue_id, handler_id, IssueStatus.IN_PROGRESS)
        again = service.change_status(issue_id, handler_id, IssueStatus.RESOLVED).issue
        assert again.resolved_at == first_resolution
        assert again.closed_at is None

        closed = service.change_status(issue_id, admin_id, IssueStatus.CLOSED).issue
        assert closed.closed_at == closed.updated_at
        assert service.change_status(issue_id, admin_id, IssueStatus.CLOSED).error_kind == ErrorKind.STATE


class TestVisibility:

    def test_handlers_see_unassigned_and_their_own(self, service, actors):
        reporter_id = actors["reporter"].id
        admin_id = actors["admin"].id
        mine = report_pothole(service, reporter_id, title="Pothole on Elm, first").issue
        theirs = report_pothole(service, reporter_id, title="Pothole on Elm, second").issue
        free = report_pothole(service, reporter_id, title="Pothole on Elm, third").issue

        service.assign_issue(mine.id, admin_id, actors["handler"].id)
        service.assign_issue(theirs.id, admin_id, actors["other_handler"].id)

        visible = service.list_issues(actors["handler"].id)

        assert [i.id for i in visible] == [free.id, mine.id]
        assert service.get_issue(theirs.id, actors["handler"].id).error_kind == ErrorKind.NOT_FOUND

    def test_deleted_issues_only_on_request(self, service, actors):
        admin_id = actors["admin"].id
        issue = report_pothole(service, actors["reporter"].id).issue
        service.delete_issue(issue.id, admin_id)

        assert service.list_issues(admin_id) == []
        assert [i.id for i in service.list_issues(admin_id, IssueFilters(include_deleted=True))] == [issue.id]
