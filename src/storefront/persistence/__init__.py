"""Persistence layer for the storefront cache.

This module provides:
- Async SQLite engine and session factory (aiosqlite driver)
- One SQLAlchemy table per cached entity kind, indexed on owner and expiry
"""

from storefront.persistence.db import (
    close_db,
    create_cache_engine,
    create_session_factory,
    health_check,
    init_db,
    session_scope,
)
from storefront.persistence.tables import (
    Base,
    CacheEntryMixin,
    StoreCategoriesTable,
    StoreProductsTable,
    StoreProfileTable,
    StoreReviewsTable,
)

__all__ = [
    # DB
    "create_cache_engine",
    "create_session_factory",
    "session_scope",
    "init_db",
    "close_db",
    "health_check",
    # Tables
    "Base",
    "CacheEntryMixin",
    "StoreProfileTable",
    "StoreProductsTable",
    "StoreCategoriesTable",
    "StoreReviewsTable",
]
