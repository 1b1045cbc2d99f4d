"""
MongoDB connection management.

The sync runs entirely on the async (motor) client. Failing to reach the
store at startup is the one fatal error of a run: nothing after it could
succeed.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from lupa.config.settings import settings

logger = logging.getLogger(__name__)


class DatabaseUnavailable(RuntimeError):
    """The persistence store could not be reached."""


# ============================================================
# Asynchronous Client
# ============================================================

_async_client: AsyncIOMotorClient | None = None


def get_async_client() -> AsyncIOMotorClient:
    """Get or create the asynchronous MongoDB client."""
    global _async_client
    if _async_client is None:
        _async_client = AsyncIOMotorClient(
            settings.MONGODB_URI,
            serverSelectionTimeoutMS=settings.MONGODB_CONNECT_TIMEOUT_MS,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            minPoolSize=settings.MONGODB_MIN_POOL_SIZE,
        )
    return _async_client


def get_async_database() -> AsyncIOMotorDatabase:
    """Get the asynchronous database instance."""
    client = get_async_client()
    return client[settings.MONGODB_DATABASE]


async def close_async_client() -> None:
    """Close the asynchronous client connection."""
    global _async_client
    if _async_client is not None:
        _async_client.close()
        _async_client = None


# ============================================================
# Startup check
# ============================================================

async def check_connection(db: AsyncIOMotorDatabase) -> None:
    """
    Ping the store.

    Raises:
        DatabaseUnavailable: if the ping fails for any reason
    """
    try:
        result = await db.command("ping")
    except PyMongoError as e:
        raise DatabaseUnavailable(f"Cannot reach MongoDB: {e}") from e

    if result.get("ok") != 1.0:
        raise DatabaseUnavailable(f"Unexpected ping reply from MongoDB: {result}")
    logger.info(f"Connected to MongoDB: {db.name}")
