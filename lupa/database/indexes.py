"""
Database Indexes Module

Creates the MongoDB indexes the sync relies on: identity lookups on the
politicians collection and one unique index per fact natural key.

Usage:
    from lupa.database.indexes import create_all_indexes
    await create_all_indexes(db)
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import OperationFailure

from lupa.config.constants import COLLECTION_POLITICIANS
from lupa.models import Attendance, Expense, Proposition, Vote

logger = logging.getLogger(__name__)


async def create_politicians_indexes(db: AsyncIOMotorDatabase):
    """Create indexes for the politicians collection"""
    collection = db[COLLECTION_POLITICIANS]

    logger.info("Creating politicians indexes...")

    await collection.create_index(
        [("tax_id", ASCENDING)],
        name="idx_tax_id",
        sparse=True
    )

    await collection.create_index(
        [("civil_name_normalized", ASCENDING), ("birth_date", ASCENDING)],
        name="idx_civil_name_birth_date"
    )

    await collection.create_index(
        [("camara_id", ASCENDING)],
        name="idx_camara_id",
        sparse=True
    )

    await collection.create_index(
        [("senado_code", ASCENDING)],
        name="idx_senado_code",
        sparse=True
    )

    await collection.create_index(
        [("current_office.type", ASCENDING), ("current_office.in_office", ASCENDING)],
        name="idx_current_office"
    )


async def create_fact_indexes(db: AsyncIOMotorDatabase):
    """Create one unique natural-key index per fact collection"""
    for model in (Expense, Vote, Proposition, Attendance):
        logger.info(f"Creating {model.collection} indexes...")
        await db[model.collection].create_index(
            [(field, ASCENDING) for field in model.natural_key_fields],
            name=f"idx_{model.collection}_natural_key",
            unique=True
        )


async def create_all_indexes(db: AsyncIOMotorDatabase):
    """
    Create every index used by the sync.

    Index conflicts (an existing index with different options) are logged
    and left alone.
    """
    for create in (create_politicians_indexes, create_fact_indexes):
        try:
            await create(db)
        except OperationFailure as e:
            logger.warning(f"Index creation skipped ({create.__name__}): {e}")
