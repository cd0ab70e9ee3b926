# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import pytest
from datetime import datetime, timezone
from bson import ObjectId

from civic_issues.models.entities import Actor, Issue
from civic_issues.models.enums import Category, IssueStatus, Priority, Role


@pytest.fixture
def now():
    """Fixed current time for deterministic tests."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def reporter():
    return Actor(id=str(ObjectId()), role=Role.REPORTER, name="Maria Silva", email="maria@example.com")


@pytest.fixture
def other_reporter():
    return Actor(id=str(ObjectId()), role=Role.REPORTER, name="Joao Souza")


@pytest.fixture
def handler():
    return Actor(id=str(ObjectId()), role=Role.HANDLER, name="Public Works Crew")


@pytest.fixture
def other_handler():
    return Actor(id=str(ObjectId()), role=Role.HANDLER, name="Sanitation Crew")


@pytest.fixture
def admin():
    return Actor(id=str(ObjectId()), role=Role.ADMINISTRATOR, name="City Admin")


@pytest.fixture
def sample_issue_data(reporter, now):
    """Sample issue data for testing."""
    return {
        "id": str(ObjectId()),
        "title": "Broken streetlight on Main St",
        "description": "The streetlight in front of number 42 has been out for a week",
        "location": "42 Main St",
        "category": Category.INFRASTRUCTURE,
        "priority": Priority.MEDIUM,
        "status": IssueStatus.OPEN,
        "reported_by": reporter.ref(),
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def make_issue(sample_issue_data):
    """Factory building issues from the sample data with overrides."""
    def _make(**overrides):
        return Issue(**{**sample_issue_data, **overrides})
    return _make


@pytest.fixture
def issue(make_issue):
    return make_issue()
