"""SQLAlchemy ORM models for the embedded cache store.

One table per entity kind. Every row is a complete cache entry:
- key: deterministic cache key (primary key)
- owner_id: store id, indexed for per-store invalidation
- payload: orjson bytes of the entity payload
- cached_at / expires_at: epoch milliseconds, expires_at indexed for sweeping
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Index, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CacheEntryMixin:
    """Columns shared by every cache table."""

    key: Mapped[str] = mapped_column(String(512), primary_key=True)

    # Store id of the entry's owner (the profile id for every profile alias)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Alias for profiles, page number for paginated kinds
    variant: Mapped[str | None] = mapped_column(String(255), nullable=True)

    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    cached_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expires_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Index, ...]:
        return (
            Index(f"idx_{cls.__tablename__}_owner_id", "owner_id"),
            Index(f"idx_{cls.__tablename__}_expires_at", "expires_at"),
        )


class StoreProfileTable(CacheEntryMixin, Base):
    """Store profiles, one row per alias."""

    __tablename__ = "store_profiles"


class StoreProductsTable(CacheEntryMixin, Base):
    """Product listing pages, one row per page."""

    __tablename__ = "store_products"


class StoreCategoriesTable(CacheEntryMixin, Base):
    """Category listings, one row per store."""

    __tablename__ = "store_categories"


class StoreReviewsTable(CacheEntryMixin, Base):
    """Review pages, one row per page."""

    __tablename__ = "store_reviews"

