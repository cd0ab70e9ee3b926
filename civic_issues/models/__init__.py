# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas for the civic issue tracker.
"""

# Base models
from .base import BaseEntity, generate_object_id

# Enumerations
from .enums import (
    Role,
    IssueStatus,
    Priority,
    Category,
    department_for,
    requires_immediate_attention
)

# Core entities
from .entities import (
    Actor,
    ActorRef,
    Issue,
    validate_issue
)

__all__ = [
    # Base models
    "BaseEntity",
    "generate_object_id",

    # Enumerations
    "Role",
    "IssueStatus",
    "Priority",
    "Category",
    "department_for",
    "requires_immediate_attention",

    # Core entities
    "Actor",
    "ActorRef",
    "Issue",
    "validate_issue"
]
