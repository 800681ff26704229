"""Storage adapter over one cache table.

Wraps the async session factory with the handful of key-value operations
the cache needs: primary-key get, multi-row put in one transaction, and
deletes through the owner and expiry indexes. SQLAlchemy and OS errors
are re-raised as ``CacheStorageError``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.cache.errors import CacheStorageError
from storefront.cache.keys import EntityKind
from storefront.observability.metrics import record_cache_operation
from storefront.persistence.db import session_scope
from storefront.persistence.tables import (
    CacheEntryMixin,
    StoreCategoriesTable,
    StoreProductsTable,
    StoreProfileTable,
    StoreReviewsTable,
)

logger = logging.getLogger(__name__)

TABLES_BY_KIND: dict[EntityKind, type[CacheEntryMixin]] = {
    EntityKind.PROFILE: StoreProfileTable,
    EntityKind.PRODUCTS: StoreProductsTable,
    EntityKind.CATEGORIES: StoreCategoriesTable,
    EntityKind.REVIEWS: StoreReviewsTable,
}


class CacheStore:
    """Key-value operations on the table of one entity kind."""

    def __init__(
        self,
        kind: EntityKind,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self.kind = kind
        self.table = TABLES_BY_KIND[kind]
        self._session_factory = session_factory

    @property
    def table_name(self) -> str:
        return str(self.table.__tablename__)  # type: ignore[attr-defined]

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        start = time.perf_counter()
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except (SQLAlchemyError, OSError) as e:
            raise CacheStorageError(operation, self.table_name, e) from e
        finally:
            record_cache_operation(operation, self.kind.value, time.perf_counter() - start)

    async def get(self, key: str) -> CacheEntryMixin | None:
        """Fetch the row stored under ``key``."""
        async with self._transaction("get") as session:
            return await session.get(self.table, key)

    async def put_many(self, rows: Sequence[CacheEntryMixin]) -> None:
        """Write rows in a single transaction, overwriting existing keys.

        Either every row is written or none is.
        """
        async with self._transaction("put") as session:
            for row in rows:
                await session.merge(row)

    async def put(self, row: CacheEntryMixin) -> None:
        await self.put_many([row])

    async def replace_owner(self, owner_id: str, rows: Sequence[CacheEntryMixin]) -> None:
        """Delete every row of ``owner_id`` and write ``rows`` in one transaction.

        Keys no longer present in ``rows`` disappear together with the old
        snapshot.
        """
        table = self.table
        async with self._transaction("put") as session:
            await session.execute(
                delete(table).where(table.owner_id == owner_id)  # type: ignore[arg-type]
            )
            for row in rows:
                await session.merge(row)

    async def delete_owner(self, owner_id: str) -> int:
        """Delete every row of ``owner_id``. Returns the number removed."""
        table = self.table
        async with self._transaction("delete") as session:
            result = await session.execute(
                delete(table).where(table.owner_id == owner_id)  # type: ignore[arg-type]
            )
            return int(result.rowcount or 0)  # type: ignore[attr-defined]

    async def delete_expired(self, now: int) -> int:
        """Delete rows whose ``expires_at`` is at or before ``now``."""
        table = self.table
        async with self._transaction("sweep") as session:
            result = await session.execute(
                delete(table).where(table.expires_at <= now)  # type: ignore[arg-type]
            )
            return int(result.rowcount or 0)  # type: ignore[attr-defined]

    async def trim_owner(self, owner_id: str, keep: int) -> int:
        """Keep only the ``keep`` most recently cached rows of an owner."""
        table = self.table
        async with self._transaction("trim") as session:
            stale_keys = (
                select(table.key)
                .where(table.owner_id == owner_id)  # type: ignore[arg-type]
                .order_by(table.cached_at.desc(), table.key.desc())  # type: ignore[attr-defined]
                .offset(keep)
            )
            keys = list((await session.execute(stale_keys)).scalars())
            if not keys:
                return 0
            result = await session.execute(
                delete(table).where(table.key.in_(keys))  # type: ignore[attr-defined]
            )
            return int(result.rowcount or 0)  # type: ignore[attr-defined]

    async def count(self, owner_id: str | None = None) -> int:
        """Count rows, optionally for one owner."""
        table = self.table
        stmt = select(func.count()).select_from(table)  # type: ignore[arg-type]
        if owner_id is not None:
            stmt = stmt.where(table.owner_id == owner_id)  # type: ignore[arg-type]
        async with self._transaction("count") as session:
            return int((await session.execute(stmt)).scalar_one())

    async def keys(self, owner_id: str) -> list[str]:
        """Keys stored for an owner, in key order."""
        table = self.table
        stmt = (
            select(table.key)
            .where(table.owner_id == owner_id)  # type: ignore[arg-type]
            .order_by(table.key)
        )
        async with self._transaction("get") as session:
            return list((await session.execute(stmt)).scalars())

    async def clear(self) -> int:
        """Delete every row of this kind."""
        async with self._transaction("delete") as session:
            result = await session.execute(delete(self.table))  # type: ignore[arg-type]
            return int(result.rowcount or 0)  # type: ignore[attr-defined]
