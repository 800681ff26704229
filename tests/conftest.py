"""Global pytest configuration and fixtures.

Every cache fixture opens its own SQLite file under ``tmp_path`` and runs
on a ``FakeClock`` so expiry is driven by the test, not by wall time.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from storefront.cache.service import StoreCache
from storefront.config import Settings
from tests.factories import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    """Settings for an isolated cache without the background sweeper."""
    return Settings(cache_database_url=database_url, sweep_enabled=False)


@pytest_asyncio.fixture
async def cache(settings: Settings, clock: FakeClock) -> AsyncIterator[StoreCache]:
    store_cache = StoreCache(settings, clock=clock)
    await store_cache.init()
    try:
        yield store_cache
    finally:
        await store_cache.teardown()
