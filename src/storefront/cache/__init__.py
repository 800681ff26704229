"""Local cache layer for store-facing data.

Provides TTL-based caching over an embedded SQLite database:
- Store profiles cached under every alias (id, subdomain, username)
- Product and review listings cached page by page
- Category listings cached per store
- Cross-entity invalidation per store
- Background sweeping of expired entries

Reads never raise: stale, corrupted and missing entries all come back as
``CacheResult`` misses so the caller falls back to the network.
"""

from storefront.cache.codec import CacheEntry, EntryCodec, system_clock
from storefront.cache.entities import (
    CategoryCache,
    EntityCache,
    ProductPageCache,
    ProfileCache,
    ReviewPageCache,
)
from storefront.cache.errors import CacheError, CacheStorageError, CorruptedEntryError
from storefront.cache.invalidation import CacheInvalidator, InvalidationMessage
from storefront.cache.keys import CacheKeys, EntityKind, build_key
from storefront.cache.result import CacheMissReason, CacheResult
from storefront.cache.service import CacheStats, StoreCache
from storefront.cache.store import CacheStore
from storefront.cache.sweeper import ExpirySweeper
from storefront.cache.ttl import TtlPolicy

__all__ = [
    # Entry point
    "StoreCache",
    "CacheStats",
    # Keys and policy
    "CacheKeys",
    "EntityKind",
    "build_key",
    "TtlPolicy",
    # Entries and results
    "CacheEntry",
    "EntryCodec",
    "system_clock",
    "CacheResult",
    "CacheMissReason",
    # Facades
    "EntityCache",
    "ProfileCache",
    "ProductPageCache",
    "CategoryCache",
    "ReviewPageCache",
    # Storage and maintenance
    "CacheStore",
    "CacheInvalidator",
    "InvalidationMessage",
    "ExpirySweeper",
    # Errors
    "CacheError",
    "CacheStorageError",
    "CorruptedEntryError",
]
