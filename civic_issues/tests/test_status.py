# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the issue status state machine.
"""

import pytest
from itertools import product

from civic_issues.domain.errors import IssueStateError
from civic_issues.domain.status import (
    allowed_targets, can_transition, is_active, is_terminal, validate_transition
)
from civic_issues.models.enums import IssueStatus

OPEN = IssueStatus.OPEN
IN_PROGRESS = IssueStatus.IN_PROGRESS
RESOLVED = IssueStatus.RESOLVED
CLOSED = IssueStatus.CLOSED

LEGAL = {
    (OPEN, IN_PROGRESS), (OPEN, CLOSED),
    (IN_PROGRESS, RESOLVED), (IN_PROGRESS, OPEN),
    (RESOLVED, OPEN), (RESOLVED, CLOSED),
}


class TestTransitionTable:
    """Test the transition table over every ordered pair."""

    @pytest.mark.parametrize("current,target", list(product(IssueStatus, IssueStatus)))
    def test_every_pair(self, current, target):
        assert can_transition(current, target) is ((current, target) in LEGAL)

    @pytest.mark.parametrize("status", list(IssueStatus))
    def test_self_transitions_denied(self, status):
        assert can_transition(status, status) is False

    @pytest.mark.parametrize("target", list(IssueStatus))
    def test_closed_is_terminal(self, target):
        assert can_transition(CLOSED, target) is False

    def test_is_terminal(self):
        assert [s for s in IssueStatus if is_terminal(s)] == [CLOSED]

    def test_is_active(self):
        assert [s for s in IssueStatus if is_active(s)] == [OPEN, IN_PROGRESS]

    def test_allowed_targets(self):
        assert allowed_targets(OPEN) == [IN_PROGRESS, CLOSED]
        assert allowed_targets(RESOLVED) == [OPEN, CLOSED]
        assert allowed_targets(CLOSED) == []


class TestValidateTransition:

    def test_valid_transition(self):
        assert validate_transition(OPEN, IN_PROGRESS) is None

    def test_invalid_transition_carries_statuses(self):
        error = validate_transition(OPEN, RESOLVED)

        assert isinstance(error, IssueStateError)
        assert error.current_status == OPEN
        assert error.target_status == RESOLVED
        assert error.to_dict()["target_status"] == "resolved"

    def test_same_status(self):
        assert "already" in validate_transition(RESOLVED, RESOLVED).message

    def test_from_closed(self):
        assert "final state" in validate_transition(CLOSED, OPEN).message
