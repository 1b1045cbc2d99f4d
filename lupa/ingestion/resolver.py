"""
Entity resolution: decide whether an incoming record is a known person.

Match order:
    1. exact tax id (CPF)
    2. normalized civil name + birth date within one day

Several name/birth-date candidates resolve to the first by _id, so
resolution is deterministic across runs. A candidate carrying a different
tax id than the incoming record is a different person.
"""
import logging
from datetime import timedelta
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from lupa.config.constants import COLLECTION_POLITICIANS
from lupa.models.politician import PersonIdentity

logger = logging.getLogger(__name__)

BIRTH_DATE_TOLERANCE = timedelta(days=1)


class PoliticianResolver:
    """Looks up canonical politicians by identity."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[COLLECTION_POLITICIANS]

    async def resolve(self, identity: PersonIdentity) -> Optional[dict]:
        """
        Find the stored politician an identity refers to.

        Returns:
            The stored document, or None when this is a new person
        """
        if identity.tax_id:
            doc = await self.collection.find_one({"tax_id": identity.tax_id})
            if doc is not None:
                return doc

        name = identity.normalized_name
        if not name or identity.birth_date is None:
            return None

        cursor = self.collection.find({
            "civil_name_normalized": name,
            "birth_date": {
                "$gte": identity.birth_date - BIRTH_DATE_TOLERANCE,
                "$lte": identity.birth_date + BIRTH_DATE_TOLERANCE,
            },
        }).sort("_id", ASCENDING)

        candidates = await cursor.to_list(length=None)
        for doc in candidates:
            stored_tax_id = doc.get("tax_id")
            if stored_tax_id and identity.tax_id and stored_tax_id != identity.tax_id:
                continue
            if len(candidates) > 1:
                logger.debug(f"{len(candidates)} candidates for {identity}, using {doc['_id']}")
            return doc
        return None

    async def external_index(self) -> dict[str, dict]:
        """
        Map source ids to canonical politician ids.

        Returns:
            {"camara": {camara_id: _id}, "senado": {senado_code: _id}}
        """
        index: dict[str, dict] = {"camara": {}, "senado": {}}
        cursor = self.collection.find(
            {"$or": [{"camara_id": {"$ne": None}}, {"senado_code": {"$ne": None}}]},
            {"camara_id": 1, "senado_code": 1},
        )
        async for doc in cursor:
            if doc.get("camara_id") is not None:
                index["camara"][doc["camara_id"]] = doc["_id"]
            if doc.get("senado_code"):
                index["senado"][doc["senado_code"]] = doc["_id"]
        return index

    async def camara_ids(self) -> dict[int, ObjectId]:
        """Câmara deputy id -> canonical politician id."""
        return (await self.external_index())["camara"]
