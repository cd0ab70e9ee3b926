# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Fixtures for end-to-end issue workflow tests.
"""

import pytest
from datetime import datetime, timedelta, timezone

from civic_issues.models.entities import Actor
from civic_issues.models.enums import Role
from civic_issues.services import IssueService, InMemoryIssueRepository, InMemoryUserRepository


class SteppingClock:
    """Returns a strictly later time on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        self.current = self.current + self.step
        return self.current


@pytest.fixture
def actors():
    """One actor per role, plus a second handler."""
    return {
        "reporter": Actor(id="citizen-1", role=Role.REPORTER, name="Maria Silva"),
        "handler": Actor(id="crew-1", role=Role.HANDLER, name="Public Works Crew"),
        "other_handler": Actor(id="crew-2", role=Role.HANDLER, name="Parks Crew"),
        "admin": Actor(id="admin-1", role=Role.ADMINISTRATOR, name="City Admin"),
    }


@pytest.fixture
def service(actors):
    clock = SteppingClock(datetime(2024, 5, 6, 8, 0, tzinfo=timezone.utc))
    return IssueService(
        InMemoryIssueRepository(),
        InMemoryUserRepository(list(actors.values())),
        clock=clock
    )
