"""Entry codec: cache metadata around entity payloads.

``wrap`` stamps a payload with ``cached_at``/``expires_at`` before it is
stored; ``unwrap`` validates a stored row and strips the metadata again.
Payloads are stored as orjson bytes of their camelCase JSON form.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import orjson
from pydantic import BaseModel, ValidationError

from storefront.cache.errors import CorruptedEntryError
from storefront.cache.keys import EntityKind
from storefront.cache.result import CacheResult
from storefront.cache.ttl import TtlPolicy
from storefront.persistence.tables import CacheEntryMixin

ModelT = TypeVar("ModelT", bound=BaseModel)

# Clock returning epoch milliseconds
Clock = Callable[[], int]


def system_clock() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class CacheEntry(Generic[ModelT]):
    """A payload stamped with its cache metadata."""

    key: str
    owner_id: str
    payload: ModelT
    cached_at: int
    expires_at: int
    variant: str | None = None


def encode_payload(payload: BaseModel) -> bytes:
    """Serialize a payload to canonical JSON bytes (by alias)."""
    return orjson.dumps(payload.model_dump(mode="json", by_alias=True))


def decode_payload(key: str, data: bytes, model: type[ModelT]) -> ModelT:
    """Deserialize stored bytes into ``model``.

    Raises:
        CorruptedEntryError: bytes are not JSON or do not fit the model.
    """
    try:
        return model.model_validate(orjson.loads(data))
    except (orjson.JSONDecodeError, ValidationError, TypeError) as e:
        raise CorruptedEntryError(key, e) from e


class EntryCodec:
    """Stamps and validates cache entries against the TTL policy."""

    def __init__(self, policy: TtlPolicy, clock: Clock = system_clock) -> None:
        self.policy = policy
        self.clock = clock

    def now(self) -> int:
        return self.clock()

    def wrap(
        self,
        kind: EntityKind,
        key: str,
        owner_id: str,
        payload: ModelT,
        variant: str | None = None,
        now: int | None = None,
    ) -> CacheEntry[ModelT]:
        """Stamp ``payload`` with ``cached_at = now`` and its kind's expiry.

        Passing ``now`` lets several entries share one timestamp.
        """
        cached_at = self.now() if now is None else now
        return CacheEntry(
            key=key,
            owner_id=owner_id,
            payload=payload,
            cached_at=cached_at,
            expires_at=cached_at + self.policy.ttl_ms(kind),
            variant=variant,
        )

    @staticmethod
    def row_from_bytes(
        entry: CacheEntry[ModelT], payload: bytes, table: type[CacheEntryMixin]
    ) -> CacheEntryMixin:
        return table(
            key=entry.key,
            owner_id=entry.owner_id,
            variant=entry.variant,
            payload=payload,
            cached_at=entry.cached_at,
            expires_at=entry.expires_at,
        )

    def unwrap(self, row: CacheEntryMixin, model: type[ModelT]) -> CacheResult[ModelT]:
        """Validate a stored row and return its payload as a read result.

        Never raises: undecodable rows come back as ``corrupted``, rows past
        their expiry as ``expired`` with the stale payload attached.
        """
        try:
            payload = decode_payload(row.key, row.payload, model)
        except CorruptedEntryError:
            return CacheResult.corrupted()

        if self.now() > row.expires_at:
            return CacheResult.expired(payload, row.cached_at, row.expires_at)
        return CacheResult.hit(payload, row.cached_at, row.expires_at)
