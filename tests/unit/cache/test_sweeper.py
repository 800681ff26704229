"""Tests for the expiry sweeper."""

import asyncio

import pytest

from storefront.cache.keys import EntityKind
from storefront.cache.service import StoreCache
from storefront.cache.sweeper import ExpirySweeper
from tests.factories import (
    HOUR_MS,
    FakeClock,
    make_category_list,
    make_product_page,
    make_profile,
)


class TestSweepOnce:
    """Tests for a single sweep cycle."""

    async def test_deletes_only_expired(self, cache: StoreCache, clock: FakeClock) -> None:
        """Expired products go, fresh categories and profiles stay."""
        await cache.products.save("store-1", 1, make_product_page())
        await cache.categories.save("store-1", make_category_list())
        await cache.profiles.save(make_profile())
        clock.advance(2 * HOUR_MS)

        deleted = await cache.sweep()

        assert deleted[EntityKind.PRODUCTS] == 1
        assert deleted[EntityKind.CATEGORIES] == 0
        assert deleted[EntityKind.PROFILE] == 0
        stats = await cache.stats()
        assert stats.products == 0
        assert stats.categories == 1
        assert stats.profiles == 3

    async def test_deletes_at_expiry_boundary(self, cache: StoreCache, clock: FakeClock) -> None:
        """An entry whose expires_at equals now is swept."""
        await cache.products.save("store-1", 1, make_product_page())
        clock.advance(HOUR_MS)

        deleted = await cache.sweep()
        assert deleted[EntityKind.PRODUCTS] == 1

    async def test_records_cycle(self, cache: StoreCache) -> None:
        """Each cycle is counted and its result kept."""
        await cache.sweep()
        await cache.sweep()

        assert cache.sweeper.cycles == 2
        assert set(cache.sweeper.last_sweep) == set(EntityKind)


class TestSweeperLifecycle:
    """Tests for the background sweep task."""

    def test_rejects_non_positive_interval(self) -> None:
        """The interval must be positive."""
        with pytest.raises(ValueError, match="must be positive"):
            ExpirySweeper({}, interval=0)

    async def test_start_sweeps_immediately(self, cache: StoreCache, clock: FakeClock) -> None:
        """Entries left from earlier are removed as soon as the sweeper starts."""
        await cache.products.save("store-1", 1, make_product_page())
        clock.advance(2 * HOUR_MS)

        await cache.sweeper.start()
        try:
            assert cache.sweeper.is_running
            assert cache.sweeper.cycles == 1
            assert (await cache.stats()).products == 0
        finally:
            await cache.sweeper.stop()

    async def test_start_is_idempotent(self, cache: StoreCache) -> None:
        """A second start neither sweeps again nor spawns a second task."""
        await cache.sweeper.start()
        task = cache.sweeper._task
        await cache.sweeper.start()

        assert cache.sweeper._task is task
        assert cache.sweeper.cycles == 1
        await cache.sweeper.stop()

    async def test_stop_cancels_task(self, cache: StoreCache) -> None:
        """stop() ends the loop and clears the task."""
        await cache.sweeper.start()
        await cache.sweeper.stop()

        assert not cache.sweeper.is_running
        assert cache.sweeper._task is None

    async def test_stop_without_start(self, cache: StoreCache) -> None:
        """stop() on an idle sweeper is harmless."""
        await cache.sweeper.stop()
        assert not cache.sweeper.is_running

    async def test_loop_sweeps_on_interval(self, cache: StoreCache, clock: FakeClock) -> None:
        """The loop keeps sweeping while running."""
        sweeper = ExpirySweeper(cache._stores, clock=clock, interval=0.01)
        await sweeper.start()
        try:
            await cache.products.save("store-1", 1, make_product_page())
            clock.advance(2 * HOUR_MS)
            for _ in range(100):
                if (await cache.stats()).products == 0:
                    break
                await asyncio.sleep(0.01)
        finally:
            await sweeper.stop()

        assert sweeper.cycles > 1
        assert (await cache.stats()).products == 0
