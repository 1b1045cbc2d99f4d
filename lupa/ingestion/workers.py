"""
Bounded worker pool for per-item fan-out.

Items are queued up front and drained by a fixed number of asyncio tasks.
A failing item is logged and counted; it never stops the batch.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, TypeVar

from lupa.config.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PoolStats:
    total: int = 0
    processed: int = 0
    succeeded: int = 0
    failed: int = 0


async def run_pool(
    items: Iterable[T],
    handler: Callable[[T], Awaitable[object]],
    workers: int,
    label: str = "items",
    progress_every: int | None = None,
) -> PoolStats:
    """
    Run `handler` once per item with at most `workers` running at a time.

    Args:
        items: Work items; consumed eagerly
        handler: Coroutine function called with each item
        workers: Pool size
        label: Used in progress logs
        progress_every: Log progress every N processed items

    Returns:
        PoolStats for the batch
    """
    progress_every = progress_every or settings.PROGRESS_EVERY

    queue: asyncio.Queue = asyncio.Queue()
    for item in items:
        queue.put_nowait(item)

    stats = PoolStats(total=queue.qsize())
    if stats.total == 0:
        return stats

    lock = asyncio.Lock()

    async def worker() -> None:
        while True:
            try:
                item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            ok = True
            try:
                await handler(item)
            except Exception as e:
                ok = False
                logger.error(f"Error processing {label} item {item!r}: {e}")

            async with lock:
                stats.processed += 1
                if ok:
                    stats.succeeded += 1
                else:
                    stats.failed += 1
                if stats.processed % progress_every == 0:
                    logger.info(f"Processed {stats.processed}/{stats.total} {label}")

    await asyncio.gather(*(worker() for _ in range(min(max(1, workers), stats.total))))
    return stats
