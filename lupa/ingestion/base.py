"""
Base ingester class.

Every source family is an ingester: fetch the raw records, transform each
into our models, load them. Items are processed by a bounded worker pool;
a failing item is logged and counted, never fatal to the run.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from lupa.database.normalization import utcnow
from lupa.database.writer import UpsertWriter
from lupa.models.fact import FactRecord
from lupa.models.politician import PoliticianObservation
from lupa.ingestion.client import FetchError, RateLimitedClient
from lupa.ingestion.politicians import IdentityError, PoliticianSync
from lupa.ingestion.resolver import PoliticianResolver
from lupa.ingestion.workers import run_pool

R = TypeVar('R')
T = TypeVar('T')


class BaseIngester(ABC, Generic[R, T]):
    """
    Base class for all data ingesters.

    Subclasses set `workers` and implement fetch_data, transform and load.
    The database and the source's HTTP client are injected, so a run never
    opens or closes connections on its own.
    """

    workers: int = 1

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        client: Optional[RateLimitedClient] = None,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.db = db
        self.client = client
        self.writer = UpsertWriter(db)
        self._stats_lock = asyncio.Lock()
        self.reset_stats()

    @abstractmethod
    async def fetch_data(self, **kwargs) -> List[R]:
        """
        Fetch raw records from the source.

        Errors here abort the ingester (there is nothing to process).

        Args:
            **kwargs: Parameters for fetching data

        Returns:
            Raw records to process
        """
        pass

    @abstractmethod
    async def transform(self, raw_data: R) -> Optional[T]:
        """
        Transform a raw record into our model.

        May fetch more detail from the source. Returns None to skip the
        record without counting an error.
        """
        pass

    @abstractmethod
    async def load(self, item: T) -> bool:
        """
        Load item into database (upsert).

        Returns:
            True if new insert, False if update
        """
        pass

    async def process_item(self, raw_item: R):
        """
        Process a single raw record through the ETL pipeline.

        A record may expand into several items (one per vote, expense...);
        each is loaded on its own so one bad write does not lose the rest.

        Args:
            raw_item: Raw data from source
        """
        try:
            transformed = await self.transform(raw_item)
        except (FetchError, IdentityError) as e:
            await self._count("errors")
            self.logger.warning(f"Skipping {self.describe(raw_item)}: {e}")
            return
        except Exception as e:
            await self._count("errors")
            self.logger.error(f"Error transforming {self.describe(raw_item)}: {e}", exc_info=True)
            return

        if transformed is None:
            await self._count("skipped")
            return

        items = transformed if isinstance(transformed, list) else [transformed]
        for item in items:
            try:
                was_insert = await self.load(item)
            except IdentityError as e:
                await self._count("errors")
                self.logger.warning(f"Skipping {self.describe(raw_item)}: {e}")
                continue
            except PyMongoError as e:
                await self._count("errors")
                self.logger.error(f"Database error on {self.describe(raw_item)}: {e}")
                continue
            except Exception as e:
                await self._count("errors")
                self.logger.error(f"Error loading {self.describe(raw_item)}: {e}", exc_info=True)
                continue

            await self._count("processed")
            await self._count("inserted" if was_insert else "updated")

    async def run(self, **kwargs) -> dict:
        """
        Execute the full ETL pipeline.

        Args:
            **kwargs: Passed to fetch_data()

        Returns:
            Statistics dict with counts and timing
        """
        self.logger.info(f"Starting {self.__class__.__name__}...")
        self.stats["started_at"] = utcnow()

        try:
            raw_items = await self.fetch_data(**kwargs)
            self.stats["fetched"] = len(raw_items)
            self.logger.info(f"Fetched {len(raw_items)} records")

            await run_pool(
                raw_items,
                self.process_item,
                workers=self.workers,
                label=self.__class__.__name__,
            )

        except Exception as e:
            self.logger.error(f"Fatal error during ingestion: {e}")
            raise

        finally:
            self.stats["completed_at"] = utcnow()
            duration = self.stats["completed_at"] - self.stats["started_at"]
            self.logger.info(
                f"Ingestion complete. "
                f"Processed: {self.stats['processed']}, "
                f"Inserted: {self.stats['inserted']}, "
                f"Updated: {self.stats['updated']}, "
                f"Skipped: {self.stats['skipped']}, "
                f"Errors: {self.stats['errors']}, "
                f"Duration: {duration}"
            )

        return self.stats

    def describe(self, raw_item: R) -> str:
        """Short label for a raw item in log messages."""
        return repr(raw_item)[:120]

    async def _count(self, key: str, amount: int = 1) -> None:
        async with self._stats_lock:
            self.stats[key] = self.stats.get(key, 0) + amount

    def reset_stats(self):
        """Reset statistics counters"""
        self.stats = {
            "fetched": 0,
            "processed": 0,
            "inserted": 0,
            "updated": 0,
            "skipped": 0,
            "errors": 0,
            "started_at": None,
            "completed_at": None
        }


class PoliticianIngester(BaseIngester[R, PoliticianObservation]):
    """Ingester whose items are observations of politicians."""

    def __init__(self, *args, politician_sync: Optional[PoliticianSync] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.politician_sync = politician_sync or PoliticianSync(self.db, writer=self.writer)

    async def load(self, item: PoliticianObservation) -> bool:
        return await self.politician_sync.sync(item)


class FactIngester(BaseIngester[R, FactRecord]):
    """Ingester whose items are fact records upserted on their natural key."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.resolver = PoliticianResolver(self.db)
        self.known_deputies: dict[int, ObjectId] = {}

    async def load_known_deputies(self) -> dict[int, ObjectId]:
        """Refresh the Câmara id -> politician id lookup."""
        self.known_deputies = await self.resolver.camara_ids()
        self.logger.info(f"{len(self.known_deputies)} known deputies")
        return self.known_deputies

    async def load(self, item: FactRecord) -> bool:
        return await self.writer.upsert_fact(item)
