# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the civic issue tracker.
"""

from enum import Enum
from typing import Dict


class Role(str, Enum):
    """Actor roles. Each actor holds exactly one."""
    REPORTER = "reporter"
    HANDLER = "handler"
    ADMINISTRATOR = "administrator"


class IssueStatus(str, Enum):
    """Issue lifecycle status enumeration."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str, Enum):
    """Issue priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def default(cls) -> "Priority":
        """Priority given to new issues when none is requested."""
        return cls.MEDIUM


class Category(str, Enum):
    """Issue classification. Informational only."""
    INFRASTRUCTURE = "infrastructure"
    SANITATION = "sanitation"
    SAFETY = "safety"
    ENVIRONMENT = "environment"
    OTHER = "other"

    @classmethod
    def default(cls) -> "Category":
        return cls.OTHER


DEPARTMENTS: Dict[Category, str] = {
    Category.INFRASTRUCTURE: "Public Works",
    Category.SANITATION: "Sanitation",
    Category.SAFETY: "Public Safety",
    Category.ENVIRONMENT: "Environmental Services",
    Category.OTHER: "General Administration",
}


def department_for(category: Category) -> str:
    """Department that usually handles issues of the given category."""
    return DEPARTMENTS[category]


def requires_immediate_attention(category: Category) -> bool:
    """Safety issues are flagged for immediate attention."""
    return category == Category.SAFETY
