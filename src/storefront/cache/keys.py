"""Cache key schema for the storefront cache.

Key format: {kind}:{owner}[:{page}]

Where:
- kind: "profile", "products", "categories", "reviews"
- owner: store alias (profile) or store id (every other kind)
- page: 1-based page number, only for paginated kinds

Keys carry no random or time-based parts, so a key built after a restart
hits the entry written before it.
"""

from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    """Kinds of store-facing data held by the cache."""

    PROFILE = "profile"
    PRODUCTS = "products"
    CATEGORIES = "categories"
    REVIEWS = "reviews"

    @property
    def paginated(self) -> bool:
        return self in (EntityKind.PRODUCTS, EntityKind.REVIEWS)


class CacheKeys:
    """Cache key generator following a consistent naming convention."""

    SEPARATOR = ":"

    @classmethod
    def profile(cls, alias: str) -> str:
        """Key for a store profile looked up by id, subdomain or username."""
        return f"{EntityKind.PROFILE.value}:{alias}"

    @classmethod
    def products(cls, store_id: str, page: int) -> str:
        """Key for one page of a store's products."""
        return f"{EntityKind.PRODUCTS.value}:{store_id}:{page}"

    @classmethod
    def categories(cls, store_id: str) -> str:
        """Key for a store's category list."""
        return f"{EntityKind.CATEGORIES.value}:{store_id}"

    @classmethod
    def reviews(cls, store_id: str, page: int) -> str:
        """Key for one page of a store's reviews."""
        return f"{EntityKind.REVIEWS.value}:{store_id}:{page}"

    @classmethod
    def parse_key(cls, key: str) -> dict[str, str] | None:
        """Parse a cache key into its components.

        Returns None if the key doesn't match the expected format.
        """
        kind, _, rest = key.partition(cls.SEPARATOR)
        try:
            entity = EntityKind(kind)
        except ValueError:
            return None
        if not rest:
            return None

        if entity.paginated:
            owner, _, page = rest.rpartition(cls.SEPARATOR)
            if not owner or not page.isdigit():
                return None
            return {"kind": entity.value, "owner": owner, "variant": page}

        return {"kind": entity.value, "owner": rest, "variant": ""}


def build_key(kind: EntityKind, owner_id: str, variant: int | str | None = None) -> str:
    """Build the cache key for an entity kind and its identifying attributes.

    For profiles ``owner_id`` is the alias being looked up. Paginated kinds
    require ``variant`` to be the page number.
    """
    if kind is EntityKind.PROFILE:
        return CacheKeys.profile(owner_id)
    if kind is EntityKind.CATEGORIES:
        return CacheKeys.categories(owner_id)

    if variant is None:
        raise ValueError(f"{kind.value} keys require a page number")
    page = int(variant)
    if kind is EntityKind.PRODUCTS:
        return CacheKeys.products(owner_id, page)
    return CacheKeys.reviews(owner_id, page)
