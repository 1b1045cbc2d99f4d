"""
Sync command: run the data pipelines in sequence.

Each pipeline is one source family. They run in registry order, so
politicians exist before the facts that reference them and propositions
exist before the votes that link to them.

Usage:
    lupa-sync                              # Run everything
    lupa-sync --deputies --senators        # Selected sources only
    lupa-sync --votes --expenses --year 2023
    lupa-sync --dry-run                    # See what would run
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from lupa.config.constants import COLLECTION_POLITICIANS
from lupa.config.settings import settings
from lupa.database.connection import (
    DatabaseUnavailable,
    check_connection,
    close_async_client,
    get_async_database,
)
from lupa.database.indexes import create_all_indexes
from lupa.database.normalization import utcnow
from lupa.ingestion.camara_attendance import CamaraAttendanceIngester
from lupa.ingestion.camara_deputies import CamaraDeputiesIngester
from lupa.ingestion.camara_expenses import CamaraExpensesIngester
from lupa.ingestion.camara_propositions import CamaraPropositionsIngester
from lupa.ingestion.camara_votes import CamaraVotesIngester
from lupa.ingestion.client import RateLimitedClient, RateLimiter
from lupa.ingestion.executives import ExecutivesIngester
from lupa.ingestion.senado import SenadoIngester

logger = logging.getLogger(__name__)


class SyncContext:
    """What every pipeline gets: the database, one client per source, the year."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        camara: RateLimitedClient,
        senado: RateLimitedClient,
        year: int,
    ):
        self.db = db
        self.camara = camara
        self.senado = senado
        self.year = year

    @classmethod
    def create(cls, db: AsyncIOMotorDatabase, year: int) -> "SyncContext":
        return cls(
            db=db,
            camara=RateLimitedClient(RateLimiter(settings.CAMARA_REQUESTS_PER_SECOND)),
            senado=RateLimitedClient(RateLimiter(settings.SENADO_REQUESTS_PER_SECOND)),
            year=year,
        )

    async def close(self) -> None:
        await self.camara.close()
        await self.senado.close()


# ============================================================================
# Pipeline Definitions
# ============================================================================

class Pipeline:
    """Represents a single data pipeline"""

    def __init__(
        self,
        name: str,
        description: str,
        run_func: Callable[[SyncContext], Awaitable[dict]],
        year_scoped: bool = False,
    ):
        self.name = name
        self.description = description
        self.run_func = run_func
        self.year_scoped = year_scoped


async def sync_deputies(ctx: SyncContext) -> dict:
    return await CamaraDeputiesIngester(ctx.db, ctx.camara).run()


async def sync_propositions(ctx: SyncContext) -> dict:
    return await CamaraPropositionsIngester(ctx.db, ctx.camara).run(year=ctx.year)


async def sync_votes(ctx: SyncContext) -> dict:
    stats = await CamaraVotesIngester(ctx.db, ctx.camara).run(year=ctx.year)
    if stats["choices"]:
        tally = ", ".join(f"{choice}: {count}" for choice, count in stats["choices"].most_common())
        logger.info(f"Vote tally for {ctx.year}: {tally}")
    return stats


async def sync_expenses(ctx: SyncContext) -> dict:
    return await CamaraExpensesIngester(ctx.db, ctx.camara).run(year=ctx.year)


async def sync_attendance(ctx: SyncContext) -> dict:
    return await CamaraAttendanceIngester(ctx.db, ctx.camara).run(year=ctx.year)


async def sync_senators(ctx: SyncContext) -> dict:
    return await SenadoIngester(ctx.db, ctx.senado).run()


async def sync_president(ctx: SyncContext) -> dict:
    return await ExecutivesIngester(ctx.db).run(president=True, governors=False)


async def sync_governors(ctx: SyncContext) -> dict:
    return await ExecutivesIngester(ctx.db).run(president=False, governors=True)


# Registry order is execution order
PIPELINES: Dict[str, Pipeline] = {
    "deputies": Pipeline("deputies", "Federal deputies (Câmara)", sync_deputies),
    "senators": Pipeline("senators", "Senators in office (Senado)", sync_senators),
    "president": Pipeline("president", "Head of state (roster)", sync_president),
    "governors": Pipeline("governors", "State governors (roster)", sync_governors),
    "propositions": Pipeline("propositions", "Propositions (Câmara)", sync_propositions, year_scoped=True),
    "votes": Pipeline("votes", "Roll-call votes (Câmara)", sync_votes, year_scoped=True),
    "expenses": Pipeline("expenses", "Parliamentary quota expenses (Câmara)", sync_expenses, year_scoped=True),
    "attendance": Pipeline("attendance", "Event attendance (Câmara)", sync_attendance, year_scoped=True),
}


# ============================================================================
# Main Orchestration
# ============================================================================

def select_pipelines(args: argparse.Namespace) -> List[str]:
    """
    Pipelines chosen by the source flags, in registry order.

    No source flag (or --all) means every pipeline.
    """
    chosen = {name for name in PIPELINES if getattr(args, name, False)}
    if args.all or not chosen:
        return list(PIPELINES)
    return [name for name in PIPELINES if name in chosen]


async def run_pipelines(
    ctx: SyncContext,
    names: List[str],
    all_stats: Optional[Dict[str, dict]] = None,
) -> Dict[str, dict]:
    """
    Run pipelines one after another.

    A failing pipeline is logged and recorded; the next one still runs.
    Results land in `all_stats` as each pipeline finishes.
    """
    all_stats = all_stats if all_stats is not None else {}

    for i, name in enumerate(names, 1):
        pipeline = PIPELINES[name]
        logger.info(f"[{i}/{len(names)}] Running: {name} - {pipeline.description}")

        try:
            all_stats[name] = await pipeline.run_func(ctx)
        except Exception as e:
            logger.error(f"Pipeline '{name}' failed: {e}")
            all_stats[name] = {"error": str(e)}

    return all_stats


async def run_sync(
    names: List[str],
    year: int,
    db: Optional[AsyncIOMotorDatabase] = None,
    deadline: Optional[float] = None,
    ctx: Optional[SyncContext] = None,
) -> Dict[str, dict]:
    """
    Connect, run the selected pipelines within the deadline, report.

    Raises:
        DatabaseUnavailable: if MongoDB cannot be reached
    """
    db = db if db is not None else get_async_database()
    deadline = deadline if deadline is not None else settings.SYNC_DEADLINE_SECONDS

    await check_connection(db)
    await create_all_indexes(db)

    start_time = utcnow()
    all_stats: Dict[str, dict] = {}

    try:
        ctx = ctx or SyncContext.create(db, year)
    except Exception as e:
        logger.error(f"Cannot create source clients, nothing synced: {e}")
        return all_stats

    try:
        await asyncio.wait_for(run_pipelines(ctx, names, all_stats), timeout=deadline)
    except asyncio.TimeoutError:
        logger.error(f"Sync deadline of {deadline:.0f}s reached, remaining work abandoned")
    finally:
        await ctx.close()

    duration = utcnow() - start_time
    logger.info(f"Sync finished in {duration}")
    for name, stats in all_stats.items():
        if "error" in stats:
            logger.info(f"   {name}: FAILED - {stats['error']}")
        else:
            logger.info(
                f"   {name}: {stats.get('processed', 0)} processed, "
                f"{stats.get('inserted', 0)} new, {stats.get('errors', 0)} errors"
            )

    total = await db[COLLECTION_POLITICIANS].count_documents({})
    logger.info(f"Total politicians in database: {total}")

    return all_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lupa-sync",
        description="Sync Brazilian political data into the Lupa Cidadã database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run everything for the current year
  lupa-sync

  # Only politicians from the Câmara and the Senado
  lupa-sync --deputies --senators

  # Year-scoped facts for a past year
  lupa-sync --votes --propositions --expenses --attendance --year 2023

  # See what would run without running
  lupa-sync --dry-run
        """
    )

    sources = parser.add_argument_group("sources (none selected means all)")
    sources.add_argument("--deputies", action="store_true", help="Federal deputies from the Câmara")
    sources.add_argument("--senators", action="store_true", help="Senators from the Senado")
    sources.add_argument("--president", action="store_true", help="Head of state from the roster")
    sources.add_argument("--governors", action="store_true", help="Governors from the roster")
    sources.add_argument("--votes", action="store_true", help="Câmara roll-call votes of --year")
    sources.add_argument("--propositions", action="store_true", help="Câmara propositions of --year")
    sources.add_argument("--expenses", action="store_true", help="Câmara expenses of --year")
    sources.add_argument("--attendance", action="store_true", help="Câmara event attendance of --year")
    sources.add_argument("--all", action="store_true", help="Run every source")

    parser.add_argument(
        "--year",
        type=int,
        default=datetime.now().year,
        help="Year for votes, propositions, expenses and attendance (default: current year)"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would run without actually running"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the sync, return the process exit code."""
    args = build_parser().parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=settings.LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    names = select_pipelines(args)

    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION}")
    logger.info("Pipeline order:")
    for i, name in enumerate(names, 1):
        pipeline = PIPELINES[name]
        scope = f" [{args.year}]" if pipeline.year_scoped else ""
        logger.info(f"   {i}. {name}{scope} - {pipeline.description}")

    if args.dry_run:
        logger.info("Dry run complete. Use without --dry-run to actually run.")
        return 0

    try:
        await run_sync(names, args.year)
    except DatabaseUnavailable as e:
        logger.error(f"Cannot start sync: {e}")
        return 1
    finally:
        await close_async_client()

    return 0


def cli() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.warning("Sync interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    cli()
