# SPDX-License-Identifier: Apache-2.0

"""
Repository ports and in-memory implementations.

The lifecycle core never touches storage. IssueService talks to these
protocols; the in-memory repositories back tests and local runs the way a
document store would, assigning ObjectId strings on first save.
"""

import logging
from typing import Dict, List, Optional, Protocol
from ..models.base import generate_object_id
from ..models.entities import Actor, Issue

logger = logging.getLogger(__name__)


class IssueRepository(Protocol):
    """Persistence port for issues."""

    def find_by_id(self, issue_id: str) -> Optional[Issue]:
        ...

    def find_all(self) -> List[Issue]:
        ...

    def save(self, issue: Issue) -> Issue:
        ...


class UserRepository(Protocol):
    """Lookup port for actors."""

    def find_by_id(self, user_id: str) -> Optional[Actor]:
        ...


class InMemoryIssueRepository:
    """
    Dictionary-backed issue repository.

    Not thread-safe. ``find_all`` returns issues newest first, matching the
    order list views expect.
    """

    def __init__(self):
        self._issues: Dict[str, Issue] = {}

    def find_by_id(self, issue_id: str) -> Optional[Issue]:
        return self._issues.get(issue_id)

    def find_all(self) -> List[Issue]:
        return sorted(self._issues.values(), key=lambda issue: issue.created_at, reverse=True)

    def save(self, issue: Issue) -> Issue:
        """
        Store an issue snapshot.

        Args:
            issue: Issue to store; an id is generated if it has none

        Returns:
            The stored snapshot
        """
        if issue.id is None:
            issue = issue.evolve(id=generate_object_id())
            logger.debug(f"Assigned id {issue.id} to new issue")
        self._issues[issue.id] = issue
        return issue

    def count(self) -> int:
        return len(self._issues)


class InMemoryUserRepository:
    """Dictionary-backed actor lookup."""

    def __init__(self, actors: Optional[List[Actor]] = None):
        self._actors: Dict[str, Actor] = {actor.id: actor for actor in actors or []}

    def find_by_id(self, user_id: str) -> Optional[Actor]:
        return self._actors.get(user_id)

    def add(self, actor: Actor) -> Actor:
        self._actors[actor.id] = actor
        return actor
