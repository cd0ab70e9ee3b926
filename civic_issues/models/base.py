# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base entity models with common fields and timestamps.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict
from bson import ObjectId


def generate_object_id() -> str:
    """Generate a new ObjectId as string."""
    return str(ObjectId())


class BaseEntity(BaseModel):
    """
    Base entity with common fields for all domain objects.

    Entities are immutable snapshots. State changes produce a new instance
    through ``evolve`` so a caller's snapshot is never altered behind its back.
    """

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Snapshots are never changed in place
        frozen=True,
    )

    id: Optional[str] = Field(None, description="Unique identifier, absent until persisted")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    deleted_at: Optional[datetime] = Field(None, description="Soft delete timestamp")
    schema_version: int = Field(default=1, description="Schema version for migrations")

    def evolve(self, **changes: Any):
        """Return a copy of this entity with the given fields replaced."""
        return self.model_copy(update=changes)

    def is_deleted(self) -> bool:
        """Check if entity is soft deleted."""
        return self.deleted_at is not None

    def is_persisted(self) -> bool:
        return self.id is not None
