"""Cache maintenance commands.

Usage:
    storefront-cache stats
    storefront-cache sweep
    storefront-cache invalidate STORE_ID
    storefront-cache clear --yes
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

import typer

from storefront.cache.keys import EntityKind
from storefront.cache.service import StoreCache
from storefront.config import Settings
from storefront.observability.logging import configure_logging

T = TypeVar("T")

DatabaseUrlOption = typer.Option(
    None,
    "--database-url",
    "-d",
    help="Cache database URL (defaults to STOREFRONT_CACHE_DATABASE_URL)",
)
LogLevelOption = typer.Option(
    None,
    "--log-level",
    "-l",
    help="Log level (defaults to STOREFRONT_LOG_LEVEL)",
)


def _run(
    database_url: Optional[str],
    log_level: Optional[str],
    operation: Callable[[StoreCache], Awaitable[T]],
) -> T:
    """Open the cache without the background sweeper and run ``operation``."""
    overrides: dict[str, object] = {"sweep_enabled": False}
    if database_url:
        overrides["cache_database_url"] = database_url
    settings = Settings(**overrides)  # type: ignore[arg-type]
    configure_logging(json_format=settings.log_json, level=log_level or settings.log_level)

    async def runner() -> T:
        async with StoreCache(settings) as cache:
            if cache.degraded:
                typer.echo(f"Cache database unavailable: {settings.cache_database_url}", err=True)
                raise typer.Exit(code=1)
            return await operation(cache)

    return asyncio.run(runner())


def _echo_counts(title: str, counts: dict[EntityKind, int]) -> None:
    typer.echo(title)
    for kind, count in counts.items():
        typer.echo(f"  {kind.value:<12} {count}")
    typer.echo(f"  {'total':<12} {sum(counts.values())}")


def stats(
    database_url: Optional[str] = DatabaseUrlOption,
    log_level: Optional[str] = LogLevelOption,
) -> None:
    """Show the number of cached entries per kind."""

    async def operation(cache: StoreCache) -> None:
        result = await cache.stats()
        _echo_counts(
            "Cached entries:",
            {
                EntityKind.PROFILE: result.profiles,
                EntityKind.PRODUCTS: result.products,
                EntityKind.CATEGORIES: result.categories,
                EntityKind.REVIEWS: result.reviews,
            },
        )

    _run(database_url, log_level, operation)


def sweep(
    database_url: Optional[str] = DatabaseUrlOption,
    log_level: Optional[str] = LogLevelOption,
) -> None:
    """Delete expired entries now."""

    async def operation(cache: StoreCache) -> None:
        _echo_counts("Expired entries deleted:", await cache.sweep())

    _run(database_url, log_level, operation)


def invalidate(
    store_id: str = typer.Argument(..., help="Store id whose entries are dropped"),
    database_url: Optional[str] = DatabaseUrlOption,
    log_level: Optional[str] = LogLevelOption,
) -> None:
    """Drop every cached entry of a store."""

    async def operation(cache: StoreCache) -> None:
        _echo_counts(
            f"Entries removed for store {store_id}:",
            await cache.invalidate_all_for_owner(store_id),
        )

    _run(database_url, log_level, operation)


def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    database_url: Optional[str] = DatabaseUrlOption,
    log_level: Optional[str] = LogLevelOption,
) -> None:
    """Drop every cached entry of every store."""
    if not yes:
        typer.confirm("Clear the whole storefront cache?", abort=True)

    async def operation(cache: StoreCache) -> None:
        _echo_counts("Entries removed:", await cache.clear_all())

    _run(database_url, log_level, operation)
