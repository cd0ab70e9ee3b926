# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Problem detail formatting for lifecycle errors.

Maps each error kind to a transport status and builds RFC 7807 style
dictionaries that carry the structured detail of the error, so HTTP or CLI
adapters can render precise messages without inspecting exception types.
"""

from typing import Any, Dict, Optional, Tuple

from ..domain.errors import ErrorKind, IssueError


PROBLEM_TYPES: Dict[ErrorKind, Tuple[str, str, int]] = {
    ErrorKind.VALIDATION: ("validation-error", "Validation Error", 422),
    ErrorKind.STATE: ("invalid-state", "Invalid Issue State", 409),
    ErrorKind.AUTHORIZATION: ("insufficient-permissions", "Insufficient Permissions", 403),
    ErrorKind.NOT_FOUND: ("resource-not-found", "Resource Not Found", 404),
}

DEFAULT_PROBLEM_BASE_URL = "https://civic-issues.example.org/problems"


def http_status_for(error: IssueError) -> int:
    """HTTP status code an adapter should use for the error."""
    return PROBLEM_TYPES[error.kind][2]


def build_problem_response(
    error: IssueError,
    instance: str,
    base_url: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build an RFC 7807 problem response for a lifecycle error.

    Args:
        error: Lifecycle error
        instance: Path of the request that failed
        base_url: Base URL for problem type URIs

    Returns:
        Problem response dictionary
    """
    error_type, title, status = PROBLEM_TYPES[error.kind]
    problem = {
        'type': f"{base_url or DEFAULT_PROBLEM_BASE_URL}/{error_type}",
        'title': title,
        'status': status,
        'detail': error.message,
        'instance': instance
    }

    # Structured detail without the fields already present above
    extensions = {
        key: value for key, value in error.to_dict().items()
        if key not in ('kind', 'message')
    }
    if extensions:
        problem['errors'] = [extensions]

    return problem
