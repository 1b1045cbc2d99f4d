"""
Base model for fact records (expenses, votes, propositions, attendance).

Facts are append-mostly and upserted on a natural key so that re-running a
sync never duplicates them.
"""
from datetime import datetime
from typing import ClassVar, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class FactRecord(BaseModel):
    """A source fact keyed by a natural key."""
    model_config = ConfigDict(
        use_enum_values=True,
        validate_default=True,
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    # Target collection and the fields that identify "the same fact"
    collection: ClassVar[str]
    natural_key_fields: ClassVar[tuple[str, ...]]

    id: Optional[ObjectId] = Field(None, alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def natural_key(self) -> dict:
        return {field: getattr(self, field) for field in self.natural_key_fields}

    def to_document(self) -> dict:
        return self.model_dump(exclude={"id", "created_at", "updated_at"})
