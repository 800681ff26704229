"""Cross-entity cache invalidation.

When a mutation against the remote API is known to change a store's data,
the caller invalidates every cached kind of that store so the next read
misses and refetches:

    removed = await cache.invalidator.invalidate_all_for_owner(store_id)

Mutation flows that emit messages instead of calling methods can pass an
``InvalidationMessage`` to ``handle_invalidation``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from storefront.cache.errors import CacheStorageError
from storefront.cache.keys import EntityKind
from storefront.observability.logging import LogContext

if TYPE_CHECKING:
    from storefront.cache.entities import EntityCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvalidationMessage:
    """Request to drop cached data.

    ``owner_id=None`` drops every entry of every store.
    """

    owner_id: str | None

    @classmethod
    def for_owner(cls, owner_id: str) -> InvalidationMessage:
        return cls(owner_id=owner_id)

    @classmethod
    def everything(cls) -> InvalidationMessage:
        return cls(owner_id=None)


class CacheInvalidator:
    """Removes cached entries across every entity kind."""

    def __init__(self, caches: Mapping[EntityKind, EntityCache]) -> None:
        self._caches = dict(caches)

    async def invalidate_all_for_owner(self, owner_id: str) -> dict[EntityKind, int]:
        """Drop every page and alias of ``owner_id`` in every kind.

        Returns the number of entries removed per kind. Kinds whose storage
        is unavailable report 0.
        """
        removed: dict[EntityKind, int] = {}
        with LogContext(store_id=owner_id, operation="invalidate"):
            for kind, cache in self._caches.items():
                removed[kind] = await cache.invalidate_owner(owner_id)
            total = sum(removed.values())
            logger.info(f"Invalidated all cache for store {owner_id} ({total} entries)")
        return removed

    async def clear_all(self) -> dict[EntityKind, int]:
        """Drop every cached entry of every store (full reset)."""
        removed: dict[EntityKind, int] = {}
        for kind, cache in self._caches.items():
            removed[kind] = await _clear(cache)
        logger.info(f"Cleared all store cache ({sum(removed.values())} entries)")
        return removed

    async def handle_invalidation(self, message: InvalidationMessage) -> dict[EntityKind, int]:
        """Apply an invalidation message."""
        if message.owner_id is None:
            return await self.clear_all()
        return await self.invalidate_all_for_owner(message.owner_id)


async def _clear(cache: EntityCache) -> int:
    if cache.store is None:
        return 0
    try:
        return await cache.store.clear()
    except CacheStorageError as e:
        logger.warning(f"Failed to clear {cache.kind.value} cache: {e}")
        return 0
