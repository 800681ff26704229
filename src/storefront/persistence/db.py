"""Async engine and session factory for the embedded cache database.

Uses the SQLAlchemy 2.0 asyncio extension with the aiosqlite driver. The
engine is owned by the caller (``StoreCache``) rather than held in module
state, so tests can open isolated databases side by side.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def create_cache_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for the cache database.

    For file-backed SQLite the parent directory is created and the journal
    is switched to WAL so readers never wait on the sweeper.
    """
    url = make_url(database_url)
    connect_args: dict[str, Any] = {}

    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite and url.database and url.database != ":memory:":
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        connect_args["timeout"] = 5

    engine = create_async_engine(database_url, echo=echo, connect_args=connect_args)

    if is_sqlite:

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
            cursor = dbapi_connection.cursor()
            if url.database and url.database != ":memory:":
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Provide a transactional scope around a series of operations.

    Usage:
        async with session_scope(factory) as session:
            session.add(row)
    """
    session = session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db(engine: AsyncEngine) -> None:
    """Create the cache tables if they do not exist."""
    from storefront.persistence.tables import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()


async def health_check(session_factory: async_sessionmaker[AsyncSession]) -> bool:
    """Check database connectivity."""
    try:
        async with session_scope(session_factory) as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
