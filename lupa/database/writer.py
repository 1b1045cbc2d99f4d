"""
Upsert writer: the persistence gateway of the pipeline.

Every write is an idempotent create-or-update: fields in the payload
overwrite stored values, created_at is only set on insert, updated_at is
always refreshed. A rerun that sees no source-side change touches nothing
but updated_at.
"""
import logging
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from lupa.config.constants import COLLECTION_POLITICIANS
from lupa.database.normalization import utcnow
from lupa.models.fact import FactRecord
from lupa.models.politician import Office, Politician

logger = logging.getLogger(__name__)


class UpsertWriter:
    """Writes canonical politicians and fact records."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    @property
    def politicians(self):
        return self.db[COLLECTION_POLITICIANS]

    async def upsert_politician(
        self,
        politician: Politician,
        existing_id: Optional[ObjectId] = None,
        creation_filter: Optional[dict] = None,
    ) -> bool:
        """
        Create or update a politician.

        Args:
            politician: Merged canonical record to persist
            existing_id: Id of the stored record the resolver matched
            creation_filter: Identity filter used when nothing matched

        Returns:
            True if this was a new insert, False if update
        """
        if existing_id is not None:
            filter_ = {"_id": existing_id}
        elif creation_filter:
            filter_ = creation_filter
        else:
            raise ValueError("upsert_politician needs an existing id or a creation filter")

        return await self._upsert(self.politicians, filter_, politician.to_document())

    async def upsert_fact(self, fact: FactRecord) -> bool:
        """
        Create or update a fact on its natural key.

        Returns:
            True if this was a new insert, False if update
        """
        return await self._upsert(self.db[fact.collection], fact.natural_key(), fact.to_document())

    async def set_offices(
        self,
        politician_id: ObjectId,
        current: Optional[Office],
        history: list[Office],
    ) -> None:
        """Overwrite only the office fields of a stored politician."""
        await self.politicians.update_one(
            {"_id": politician_id},
            {
                "$set": {
                    "current_office": current.model_dump() if current else None,
                    "office_history": [office.model_dump() for office in history],
                    "updated_at": utcnow(),
                }
            },
        )

    async def _upsert(self, collection, filter_: dict, payload: dict) -> bool:
        now = utcnow()
        payload = dict(payload)
        payload["updated_at"] = now

        result = await collection.update_one(
            filter_,
            {"$set": payload, "$setOnInsert": {"created_at": now}},
            upsert=True,
        )
        return result.upserted_id is not None
