"""
Politician sync: turn one source observation into a canonical record.

Steps for every observation:
    1. resolve the identity to a stored politician (or nobody)
    2. if it reports a head of state in office, demote every other holder
    3. apply the reported office to the mandate history
    4. merge the reported attributes (non-null fields overwrite)
    5. upsert
"""
import asyncio
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from lupa.config.constants import COLLECTION_POLITICIANS
from lupa.database.normalization import utcnow
from lupa.database.writer import UpsertWriter
from lupa.ingestion.mandates import (
    MandateState,
    apply_observation,
    demote_head_of_state,
    is_same_person,
)
from lupa.ingestion.resolver import PoliticianResolver
from lupa.models.politician import OfficeType, Politician, PoliticianObservation

logger = logging.getLogger(__name__)


class IdentityError(ValueError):
    """A record carries neither a tax id nor a civil name with birth date."""


class PoliticianSync:
    """Reconciles observations from every source into the politicians collection."""

    def __init__(self, db: AsyncIOMotorDatabase, writer: Optional[UpsertWriter] = None):
        self.db = db
        self.collection = db[COLLECTION_POLITICIANS]
        self.resolver = PoliticianResolver(db)
        self.writer = writer or UpsertWriter(db)
        # Head-of-state writes are serialized so two can't both survive
        self._head_of_state_lock = asyncio.Lock()

    async def sync(self, observation: PoliticianObservation) -> bool:
        """
        Reconcile one observation.

        Returns:
            True if a new politician was created, False if one was updated

        Raises:
            IdentityError: if the observation cannot be tied to a person
        """
        identity = observation.identity
        if not identity.is_usable:
            raise IdentityError(f"No usable identity for {observation.name or 'unnamed record'}")

        if observation.office.type == OfficeType.PRESIDENT.value and observation.office.in_office:
            async with self._head_of_state_lock:
                return await self._sync(observation, enforce_head_of_state=True)
        return await self._sync(observation)

    async def _sync(self, observation: PoliticianObservation, enforce_head_of_state: bool = False) -> bool:
        identity = observation.identity
        now = utcnow()

        existing = await self.resolver.resolve(identity)
        if existing is None and enforce_head_of_state:
            existing = await self.find_head_of_state(observation)
        existing_id = existing["_id"] if existing else None

        if enforce_head_of_state:
            await self.enforce_head_of_state(observation, exclude_id=existing_id)

        if existing is not None:
            politician = Politician.model_validate(existing)
        else:
            politician = Politician()

        state = apply_observation(MandateState.from_document(existing), observation.office, now)
        politician = politician.merge(observation)
        politician.current_office = state.current
        politician.office_history = state.history

        inserted = await self.writer.upsert_politician(
            politician,
            existing_id=existing_id,
            creation_filter=identity.creation_filter(),
        )
        logger.debug(f"{'Created' if inserted else 'Updated'} {politician}")
        return inserted

    async def find_head_of_state(self, observation: PoliticianObservation) -> Optional[dict]:
        """Stored head of state in office who is the incoming person, if any."""
        identity = observation.identity
        cursor = self.collection.find({
            "current_office.type": OfficeType.PRESIDENT.value,
            "current_office.in_office": True,
        })
        async for holder in cursor:
            if is_same_person(holder, identity):
                return holder
        return None

    async def enforce_head_of_state(self, observation: PoliticianObservation, exclude_id=None) -> int:
        """
        Demote every stored head of state who is not the incoming person.

        Returns:
            Number of politicians demoted
        """
        identity = observation.identity
        now = utcnow()
        demoted = 0

        cursor = self.collection.find({
            "current_office.type": OfficeType.PRESIDENT.value,
            "current_office.in_office": True,
        })
        async for holder in cursor:
            if exclude_id is not None and holder["_id"] == exclude_id:
                continue
            if is_same_person(holder, identity):
                continue

            state = demote_head_of_state(MandateState.from_document(holder), now)
            await self.writer.set_offices(holder["_id"], state.current, state.history)
            demoted += 1
            logger.info(f"Demoted former head of state: {holder.get('name') or holder.get('civil_name')}")

        return demoted
