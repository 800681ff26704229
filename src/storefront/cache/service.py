"""Composition root for the storefront cache.

``StoreCache`` owns the database engine, the four entity facades, the
invalidator and the sweeper task. It is created explicitly and passed to
callers; there is no process-wide instance.

Example:
    async with StoreCache(Settings(cache_database_url=url)) as cache:
        result = await cache.profiles.get("acme")
        if not result.valid:
            profile = await api.fetch_profile("acme")
            await cache.profiles.save(profile)

If the database cannot be opened the cache runs degraded: every read is
a miss and every write a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from storefront.cache.codec import Clock, EntryCodec, system_clock
from storefront.cache.entities import (
    CategoryCache,
    EntityCache,
    ProductPageCache,
    ProfileCache,
    ReviewPageCache,
)
from storefront.cache.errors import CacheStorageError
from storefront.cache.invalidation import CacheInvalidator
from storefront.cache.keys import EntityKind
from storefront.cache.store import CacheStore
from storefront.cache.sweeper import ExpirySweeper
from storefront.cache.ttl import TtlPolicy
from storefront.config import Settings
from storefront.persistence.db import (
    close_db,
    create_cache_engine,
    create_session_factory,
    health_check,
    init_db,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Entry counts per entity kind."""

    profiles: int = 0
    products: int = 0
    categories: int = 0
    reviews: int = 0

    @property
    def total(self) -> int:
        return self.profiles + self.products + self.categories + self.reviews


class StoreCache:
    """Local cache for store profiles, product pages, categories and reviews."""

    def __init__(self, settings: Settings | None = None, clock: Clock = system_clock) -> None:
        self.settings = settings or Settings()
        self.clock = clock
        self.policy = TtlPolicy.from_settings(self.settings)
        self.codec = EntryCodec(self.policy, clock)

        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._stores: dict[EntityKind, CacheStore] = {}
        self._initialized = False

        max_pages = self.settings.max_pages_per_store
        self.profiles = ProfileCache(None, self.codec)
        self.products = ProductPageCache(None, self.codec, max_pages_per_store=max_pages)
        self.categories = CategoryCache(None, self.codec)
        self.reviews = ReviewPageCache(None, self.codec, max_pages_per_store=max_pages)
        self.invalidator = CacheInvalidator(self.facades)
        self.sweeper = self._build_sweeper()

    def _build_sweeper(self) -> ExpirySweeper:
        return ExpirySweeper(
            self._stores, clock=self.clock, interval=self.settings.sweep_interval_seconds
        )

    def _attach_stores(self, stores: dict[EntityKind, CacheStore]) -> None:
        """Point every facade at its store (or detach them with an empty dict)."""
        self._stores = stores
        for kind, facade in self.facades.items():
            facade.store = stores.get(kind)
        self.sweeper = self._build_sweeper()

    @property
    def facades(self) -> dict[EntityKind, EntityCache]:
        return {
            EntityKind.PROFILE: self.profiles,
            EntityKind.PRODUCTS: self.products,
            EntityKind.CATEGORIES: self.categories,
            EntityKind.REVIEWS: self.reviews,
        }

    @property
    def degraded(self) -> bool:
        """True when no storage backs the cache (every read misses)."""
        return not self._stores

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def init(self) -> None:
        """Open the database, create tables and start the sweeper.

        Storage failures leave the cache degraded instead of raising.
        """
        if self._initialized:
            return
        self._initialized = True

        if not self.settings.cache_enabled:
            logger.info("Store cache disabled by configuration")
            return

        try:
            engine = create_cache_engine(self.settings.cache_database_url)
        except (SQLAlchemyError, OSError, ValueError) as e:
            logger.error(f"Store cache unavailable, running without cache: {e}")
            return

        try:
            await init_db(engine)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Store cache unavailable, running without cache: {e}")
            await engine.dispose()
            return

        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._attach_stores(
            {kind: CacheStore(kind, self._session_factory) for kind in EntityKind}
        )

        if self.settings.sweep_enabled:
            await self.sweeper.start()

        logger.info(f"Store cache ready at {self.settings.cache_database_url}")

    async def teardown(self) -> None:
        """Stop the sweeper and close the database."""
        await self.sweeper.stop()

        if self._engine is not None:
            await close_db(self._engine)

        self._engine = None
        self._session_factory = None
        self._attach_stores({})
        self._initialized = False

    async def __aenter__(self) -> StoreCache:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.teardown()

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    async def invalidate_all_for_owner(self, owner_id: str) -> dict[EntityKind, int]:
        """Drop every cached entry of a store across all kinds."""
        return await self.invalidator.invalidate_all_for_owner(owner_id)

    async def clear_all(self) -> dict[EntityKind, int]:
        """Drop every cached entry."""
        return await self.invalidator.clear_all()

    async def sweep(self) -> dict[EntityKind, int]:
        """Run one expiry sweep now."""
        return await self.sweeper.sweep_once()

    async def stats(self) -> CacheStats:
        """Count cached entries per kind (zeros when degraded)."""
        counts: dict[EntityKind, int] = {}
        for kind, store in self._stores.items():
            try:
                counts[kind] = await store.count()
            except CacheStorageError as e:
                logger.warning(f"Failed to count {kind.value} cache entries: {e}")
                counts[kind] = 0

        return CacheStats(
            profiles=counts.get(EntityKind.PROFILE, 0),
            products=counts.get(EntityKind.PRODUCTS, 0),
            categories=counts.get(EntityKind.CATEGORIES, 0),
            reviews=counts.get(EntityKind.REVIEWS, 0),
        )

    async def health_check(self) -> bool:
        """Check that the cache database answers."""
        if self._session_factory is None:
            return False
        return await health_check(self._session_factory)
