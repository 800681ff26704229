"""Tri-state result of a cache read."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CacheMissReason(str, Enum):
    """Why a read did not produce a valid hit."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    CORRUPTED = "corrupted"


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """Outcome of ``get()`` on a cache facade.

    ``valid`` is True only for a fresh hit. An expired result still carries
    the stale ``data`` so callers can render it while they refetch.
    """

    valid: bool
    data: T | None = None
    reason: CacheMissReason | None = None
    cached_at: int | None = None
    expires_at: int | None = None

    @classmethod
    def hit(cls, data: T, cached_at: int, expires_at: int) -> CacheResult[T]:
        return cls(valid=True, data=data, cached_at=cached_at, expires_at=expires_at)

    @classmethod
    def expired(cls, data: T, cached_at: int, expires_at: int) -> CacheResult[T]:
        return cls(
            valid=False,
            data=data,
            reason=CacheMissReason.EXPIRED,
            cached_at=cached_at,
            expires_at=expires_at,
        )

    @classmethod
    def not_found(cls) -> CacheResult[T]:
        return cls(valid=False, reason=CacheMissReason.NOT_FOUND)

    @classmethod
    def corrupted(cls) -> CacheResult[T]:
        return cls(valid=False, reason=CacheMissReason.CORRUPTED)

    @property
    def is_stale(self) -> bool:
        return self.reason is CacheMissReason.EXPIRED
