# SPDX-License-Identifier: Apache-2.0

"""
Services package - adapters around the issue lifecycle core.
"""

from .issues import IssueService
from .repository import (
    IssueRepository,
    UserRepository,
    InMemoryIssueRepository,
    InMemoryUserRepository
)
from .problems import build_problem_response, http_status_for

__all__ = [
    'IssueService',
    'IssueRepository',
    'UserRepository',
    'InMemoryIssueRepository',
    'InMemoryUserRepository',
    'build_problem_response',
    'http_status_for'
]
