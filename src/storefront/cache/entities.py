"""Per-entity cache facades.

One facade per entity kind composes the key schema, TTL policy, entry
codec and storage adapter behind a uniform async contract:

- ``save(...)``: write through; storage failures are logged and swallowed
- ``get(...)``: returns a ``CacheResult``; never raises
- ``invalidate_owner(owner_id)``: remove every entry of a store in this kind

Caching is an optimization layered over a data path that must work with
the cache disabled, so no facade method lets a storage error reach the
caller.

Example:
    result = await cache.products.get(store_id, page=2)
    if not result.valid:
        page = await api.fetch_products(store_id, page=2)
        await cache.products.save(store_id, 2, page)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Generic, TypeVar

from pydantic import BaseModel

from storefront.cache.codec import CacheEntry, EntryCodec, encode_payload
from storefront.cache.errors import CacheStorageError
from storefront.cache.keys import EntityKind, build_key
from storefront.cache.result import CacheResult
from storefront.cache.store import CacheStore
from storefront.core.model import CategoryList, ProductPage, ReviewPage, StoreProfile
from storefront.observability.metrics import (
    record_cache_hit,
    record_cache_miss,
    record_cache_write,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class EntityCache(Generic[ModelT]):
    """Base facade for one entity kind.

    A facade built without a store (``store=None``) is in degraded mode:
    every read is a miss and every write a no-op.
    """

    kind: EntityKind
    model: type[ModelT]

    def __init__(self, store: CacheStore | None, codec: EntryCodec) -> None:
        self.store = store
        self.codec = codec

    @property
    def available(self) -> bool:
        return self.store is not None

    # -------------------------------------------------------------------------
    # Shared read/write paths
    # -------------------------------------------------------------------------

    async def _get(self, key: str) -> CacheResult[ModelT]:
        if self.store is None:
            return self._miss(CacheResult.not_found(), key)

        try:
            row = await self.store.get(key)
        except CacheStorageError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return self._miss(CacheResult.not_found(), key)

        if row is None:
            return self._miss(CacheResult.not_found(), key)

        result = self.codec.unwrap(row, self.model)
        if not result.valid:
            return self._miss(result, key)

        record_cache_hit(self.kind.value)
        logger.debug(f"Cache hit: {key}")
        return result

    def _miss(self, result: CacheResult[ModelT], key: str) -> CacheResult[ModelT]:
        reason = result.reason.value if result.reason else "not_found"
        record_cache_miss(self.kind.value, reason)
        if result.is_stale:
            logger.info(f"Cache expired: {key}")
        elif reason == "corrupted":
            logger.warning(f"Corrupted cache entry left in place: {key}")
        else:
            logger.debug(f"Cache miss ({reason}): {key}")
        return result

    async def _save(
        self,
        entries: Sequence[CacheEntry[ModelT]],
        replace_owner: str | None = None,
    ) -> bool:
        """Write entries in one transaction. Returns False if nothing was stored.

        With ``replace_owner`` the owner's existing rows are deleted in the
        same transaction, so no key outlives the snapshot being written.
        """
        if self.store is None or not entries:
            return False

        # Every entry of one save shares the same payload snapshot
        payload = encode_payload(entries[0].payload)
        rows = [self.codec.row_from_bytes(entry, payload, self.store.table) for entry in entries]

        try:
            if replace_owner is None:
                await self.store.put_many(rows)
            else:
                await self.store.replace_owner(replace_owner, rows)
        except CacheStorageError as e:
            logger.warning(f"Cache write failed for {[entry.key for entry in entries]}: {e}")
            return False

        record_cache_write(self.kind.value, len(rows))
        return True

    async def invalidate_owner(self, owner_id: str) -> int:
        """Remove every entry of ``owner_id`` in this kind.

        Returns the number of entries removed (0 when storage is unavailable).
        """
        if self.store is None:
            return 0
        try:
            removed = await self.store.delete_owner(owner_id)
        except CacheStorageError as e:
            logger.warning(f"Cache invalidation failed for {self.kind.value} {owner_id}: {e}")
            return 0

        logger.debug(f"Invalidated {removed} {self.kind.value} entries for store {owner_id}")
        return removed


class PaginatedEntityCache(EntityCache[ModelT]):
    """Facade for kinds stored as independent pages per store."""

    def __init__(
        self,
        store: CacheStore | None,
        codec: EntryCodec,
        max_pages_per_store: int | None = None,
    ) -> None:
        super().__init__(store, codec)
        self.max_pages_per_store = max_pages_per_store

    async def save(self, store_id: str, page: int, payload: ModelT) -> None:
        """Cache one page of ``store_id``. Other pages are left untouched.

        Raises:
            ValueError: ``payload`` belongs to another store or page.
        """
        payload_store = getattr(payload, "store_id", store_id)
        payload_page = getattr(payload, "page", page)
        if payload_store != store_id or payload_page != page:
            raise ValueError(
                f"{self.kind.value} payload for store {payload_store} page {payload_page} "
                f"cannot be cached as store {store_id} page {page}"
            )

        key = build_key(self.kind, store_id, page)
        entry = self.codec.wrap(self.kind, key, store_id, payload, variant=str(page))
        if not await self._save([entry]):
            return

        logger.debug(f"Cached {self.kind.value} page {page} for store {store_id}")
        if self.max_pages_per_store is not None:
            await self._trim(store_id)

    async def get(self, store_id: str, page: int = 1) -> CacheResult[ModelT]:
        return await self._get(build_key(self.kind, store_id, page))

    async def _trim(self, store_id: str) -> None:
        assert self.store is not None and self.max_pages_per_store is not None
        try:
            trimmed = await self.store.trim_owner(store_id, self.max_pages_per_store)
        except CacheStorageError as e:
            logger.warning(f"Page trim failed for {self.kind.value} {store_id}: {e}")
            return
        if trimmed:
            logger.debug(f"Trimmed {trimmed} {self.kind.value} pages for store {store_id}")


class ProfileCache(EntityCache[StoreProfile]):
    """Store profiles, cached under every alias of the store.

    The id, subdomain and username keys are written in one transaction with
    the same payload bytes and timestamps, so any alias resolves to the same
    snapshot. Aliases dropped since the previous save (a renamed subdomain
    or username) are deleted in that transaction.
    """

    kind = EntityKind.PROFILE
    model = StoreProfile

    async def save(self, profile: StoreProfile) -> None:
        now = self.codec.now()
        entries = [
            self.codec.wrap(
                self.kind,
                build_key(self.kind, alias),
                profile.id,
                profile,
                variant=alias,
                now=now,
            )
            for alias in profile.aliases
        ]
        if await self._save(entries, replace_owner=profile.id):
            logger.info(
                f"Cached store profile for {profile.store_name} ({len(entries)} keys)"
            )

    async def get(self, alias: str) -> CacheResult[StoreProfile]:
        """Look up a profile by id, subdomain or username."""
        return await self._get(build_key(self.kind, alias))


class ProductPageCache(PaginatedEntityCache[ProductPage]):
    """Product listing pages, one entry per page number."""

    kind = EntityKind.PRODUCTS
    model = ProductPage


class CategoryCache(EntityCache[CategoryList]):
    """Consolidated category listing, one entry per store."""

    kind = EntityKind.CATEGORIES
    model = CategoryList

    async def save(self, store_id: str, payload: CategoryList) -> None:
        key = build_key(self.kind, store_id)
        entry = self.codec.wrap(self.kind, key, store_id, payload)
        if await self._save([entry]):
            logger.debug(f"Cached {len(payload.categories)} categories for store {store_id}")

    async def get(self, store_id: str) -> CacheResult[CategoryList]:
        return await self._get(build_key(self.kind, store_id))


class ReviewPageCache(PaginatedEntityCache[ReviewPage]):
    """Review pages with the rating stats of the fetch that produced them."""

    kind = EntityKind.REVIEWS
    model = ReviewPage
