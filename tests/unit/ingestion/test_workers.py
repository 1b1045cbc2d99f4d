"""Unit tests for the bounded worker pool."""

import asyncio

import pytest

from lupa.ingestion.workers import run_pool


class TestRunPool:
    """Tests for run_pool()."""

    @pytest.mark.asyncio
    async def test_every_item_handled_once(self):
        seen = []

        async def handler(item):
            await asyncio.sleep(0)
            seen.append(item)

        stats = await run_pool(range(25), handler, workers=4)

        assert sorted(seen) == list(range(25))
        assert stats.total == 25
        assert stats.processed == 25
        assert stats.succeeded == 25
        assert stats.failed == 0

    @pytest.mark.asyncio
    async def test_failures_are_counted_not_raised(self):
        async def handler(item):
            if item % 3 == 0:
                raise RuntimeError(f"bad item {item}")

        stats = await run_pool(range(9), handler, workers=2)

        assert stats.processed == 9
        assert stats.failed == 3
        assert stats.succeeded == 6

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        running = 0
        peak = 0

        async def handler(item):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        await run_pool(range(20), handler, workers=3)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        async def handler(item):
            raise AssertionError("should not be called")

        stats = await run_pool([], handler, workers=5)
        assert stats.total == 0
        assert stats.processed == 0

    @pytest.mark.asyncio
    async def test_zero_workers_still_runs(self):
        seen = []

        async def handler(item):
            seen.append(item)

        await run_pool(["a", "b"], handler, workers=0)
        assert seen == ["a", "b"]
