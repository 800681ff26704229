"""Background sweeper for expired cache entries.

Readers never depend on the sweeper: ``get()`` checks expiry itself. The
sweeper only bounds storage growth from entries nobody reads again. It
runs one cycle when started, to clean up entries left by a previous
session, and then one cycle every ``interval`` seconds.

Example:
    sweeper = ExpirySweeper(stores, interval=1800)
    await sweeper.start()
    ...
    await sweeper.stop()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from storefront.cache.codec import Clock, system_clock
from storefront.cache.errors import CacheStorageError
from storefront.cache.keys import EntityKind
from storefront.cache.store import CacheStore
from storefront.observability.metrics import record_sweep_deleted

logger = logging.getLogger(__name__)

# Sweep every 30 minutes by default
DEFAULT_SWEEP_INTERVAL = 30 * 60.0


class ExpirySweeper:
    """Deletes expired entries of every kind on a fixed interval.

    The sweeper owns its asyncio task: ``start()`` creates it at most once
    and ``stop()`` cancels it and waits for it to finish.
    """

    def __init__(
        self,
        stores: Mapping[EntityKind, CacheStore],
        clock: Clock = system_clock,
        interval: float = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Sweep interval must be positive, got {interval}")
        self._stores = dict(stores)
        self.clock = clock
        self.interval = interval
        self._running = False
        self._task: asyncio.Task[None] | None = None
        self.last_sweep: dict[EntityKind, int] = {}
        self.cycles = 0

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Run one sweep now, then keep sweeping in the background."""
        if self._running:
            return

        self._running = True
        await self.sweep_once()
        self._task = asyncio.create_task(self._sweep_loop())
        logger.info(f"Started cache sweeper (interval {self.interval}s)")

    async def stop(self) -> None:
        """Stop the background sweep loop."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Stopped cache sweeper")

    async def _sweep_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval)
                await self.sweep_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in cache sweeper: {e}")

    async def sweep_once(self) -> dict[EntityKind, int]:
        """Delete entries with ``expires_at <= now`` from every kind.

        A failure on one kind is logged and does not stop the others.
        Returns the number of entries deleted per kind.
        """
        now = self.clock()
        deleted: dict[EntityKind, int] = {}

        for kind, store in self._stores.items():
            try:
                deleted[kind] = await store.delete_expired(now)
            except CacheStorageError as e:
                logger.warning(f"Sweep of {kind.value} cache failed: {e}")
                deleted[kind] = 0
                continue
            record_sweep_deleted(kind.value, deleted[kind])

        self.last_sweep = deleted
        self.cycles += 1

        total = sum(deleted.values())
        if total:
            logger.info(f"Cleared {total} expired cache entries")
        else:
            logger.debug("No expired cache entries to clear")
        return deleted
