"""Time-to-live policy per entity kind.

Profiles change least often upstream, listings most often. The policy
rejects tables that break the ordering
profile >= categories >= products/reviews.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING

from storefront.cache.keys import EntityKind

if TYPE_CHECKING:
    from storefront.config import Settings

DEFAULT_TTLS: Mapping[EntityKind, timedelta] = MappingProxyType(
    {
        EntityKind.PROFILE: timedelta(hours=24),
        EntityKind.CATEGORIES: timedelta(hours=6),
        EntityKind.PRODUCTS: timedelta(hours=1),
        EntityKind.REVIEWS: timedelta(hours=1),
    }
)


class TtlPolicy:
    """Fixed table mapping entity kind to time-to-live."""

    def __init__(self, ttls: Mapping[EntityKind, timedelta] | None = None) -> None:
        table = dict(DEFAULT_TTLS)
        if ttls:
            table.update(ttls)

        for kind, ttl in table.items():
            if ttl <= timedelta(0):
                raise ValueError(f"TTL for {kind.value} must be positive, got {ttl}")

        listing = max(table[EntityKind.PRODUCTS], table[EntityKind.REVIEWS])
        if not table[EntityKind.PROFILE] >= table[EntityKind.CATEGORIES] >= listing:
            raise ValueError(
                "TTL ordering must be profile >= categories >= products/reviews, got "
                + ", ".join(f"{kind.value}={ttl}" for kind, ttl in table.items())
            )

        self._table: Mapping[EntityKind, timedelta] = MappingProxyType(table)

    @classmethod
    def from_settings(cls, settings: Settings) -> TtlPolicy:
        return cls(
            {
                EntityKind.PROFILE: timedelta(seconds=settings.ttl_profile_seconds),
                EntityKind.CATEGORIES: timedelta(seconds=settings.ttl_categories_seconds),
                EntityKind.PRODUCTS: timedelta(seconds=settings.ttl_products_seconds),
                EntityKind.REVIEWS: timedelta(seconds=settings.ttl_reviews_seconds),
            }
        )

    def ttl(self, kind: EntityKind) -> timedelta:
        return self._table[kind]

    def ttl_ms(self, kind: EntityKind) -> int:
        """TTL of a kind in milliseconds, the unit of cache timestamps."""
        return int(self._table[kind].total_seconds() * 1000)

    def as_dict(self) -> dict[str, float]:
        return {kind.value: ttl.total_seconds() for kind, ttl in self._table.items()}
