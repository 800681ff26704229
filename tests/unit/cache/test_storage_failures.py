"""Tests for storage that fails after the cache was opened.

Each test drops the product table underneath a live cache, so every
product operation fails inside SQLite while the other kinds keep working.
"""

import pytest
import pytest_asyncio
from sqlalchemy import text

from storefront.cache.errors import CacheStorageError
from storefront.cache.keys import EntityKind
from storefront.cache.result import CacheMissReason
from storefront.cache.service import StoreCache
from tests.factories import HOUR_MS, FakeClock, make_category_list, make_product_page


@pytest_asyncio.fixture
async def broken_cache(cache: StoreCache) -> StoreCache:
    """A cache whose product table no longer exists."""
    assert cache._engine is not None
    async with cache._engine.begin() as conn:
        await conn.execute(text("DROP TABLE store_products"))
    return cache


class TestFacadeFailOpen:
    """Facade operations never raise when storage fails."""

    async def test_get_is_not_found(self, broken_cache: StoreCache) -> None:
        """A failed read is an ordinary miss."""
        result = await broken_cache.products.get("store-1", 1)

        assert result.valid is False
        assert result.reason is CacheMissReason.NOT_FOUND

    async def test_save_returns_normally(self, broken_cache: StoreCache) -> None:
        """A failed write is swallowed and nothing is stored."""
        await broken_cache.products.save("store-1", 1, make_product_page())

        assert (await broken_cache.products.get("store-1", 1)).valid is False

    async def test_invalidate_owner_is_zero(self, broken_cache: StoreCache) -> None:
        """A failed invalidation reports nothing removed."""
        assert await broken_cache.products.invalidate_owner("store-1") == 0

    async def test_other_kinds_unaffected(self, broken_cache: StoreCache) -> None:
        """Categories still round-trip while products fail."""
        await broken_cache.categories.save("store-1", make_category_list())

        assert (await broken_cache.categories.get("store-1")).valid is True

    async def test_failed_trim_keeps_saved_page(
        self, cache: StoreCache, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A page cap that cannot be enforced does not undo the save."""
        store = cache.products.store
        assert store is not None

        async def failing_trim(owner_id: str, keep: int) -> int:
            raise CacheStorageError("trim", store.table_name, RuntimeError("disk I/O error"))

        monkeypatch.setattr(store, "trim_owner", failing_trim)
        cache.products.max_pages_per_store = 1

        await cache.products.save("store-1", 1, make_product_page())

        assert (await cache.products.get("store-1", 1)).valid is True


class TestMaintenanceFailOpen:
    """Cross-kind operations isolate the failing kind."""

    async def test_invalidate_all_continues(self, broken_cache: StoreCache) -> None:
        """Other kinds are still invalidated."""
        await broken_cache.categories.save("store-1", make_category_list())

        removed = await broken_cache.invalidate_all_for_owner("store-1")

        assert removed[EntityKind.PRODUCTS] == 0
        assert removed[EntityKind.CATEGORIES] == 1

    async def test_sweep_continues(self, broken_cache: StoreCache, clock: FakeClock) -> None:
        """Expired entries of other kinds are still swept."""
        await broken_cache.categories.save("store-1", make_category_list())
        clock.advance(7 * HOUR_MS)

        deleted = await broken_cache.sweep()

        assert deleted[EntityKind.PRODUCTS] == 0
        assert deleted[EntityKind.CATEGORIES] == 1
        assert broken_cache.sweeper.cycles == 1

    async def test_clear_all_continues(self, broken_cache: StoreCache) -> None:
        """Other kinds are still cleared."""
        await broken_cache.categories.save("store-1", make_category_list())

        removed = await broken_cache.clear_all()

        assert removed[EntityKind.PRODUCTS] == 0
        assert removed[EntityKind.CATEGORIES] == 1

    async def test_stats_counts_failing_kind_as_zero(self, broken_cache: StoreCache) -> None:
        """Stats report 0 for the failing kind and real counts elsewhere."""
        await broken_cache.categories.save("store-1", make_category_list())

        stats = await broken_cache.stats()

        assert stats.products == 0
        assert stats.categories == 1

    async def test_health_check_still_answers(self, broken_cache: StoreCache) -> None:
        """The database itself is still reachable."""
        assert await broken_cache.health_check() is True
