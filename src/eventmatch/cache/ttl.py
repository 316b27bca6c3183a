"""
eventmatch.cache.ttl

Expiring, scope-keyed cache for a fetched collection.

Responsibilities:
- Persist a serialized collection alongside its scope key and fetch time.
- Serve it only for the same scope and within the TTL window.
- Clear everything on any miss so stale or foreign data is never returned.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from eventmatch.dates import Clock, utcnow
from eventmatch.db.store import KeyValueStore
from eventmatch.observability.logging import get_logger

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 30 * 60

log = get_logger(__name__)


class TTLCache(Generic[T]):
    """
    Cache for one collection at a time.

    `item_type` is the full collection type (e.g. `list[Recommendation]`); it drives both
    serialization and validation on read. Keys are namespaced so several caches can share
    one store.
    """

    def __init__(
        self,
        *,
        store: KeyValueStore,
        item_type: Any,
        namespace: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._adapter: TypeAdapter[T] = TypeAdapter(item_type)
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._payload_key = f"{namespace}.payload"
        self._fetched_at_key = f"{namespace}.fetched_at"
        self._scope_key = f"{namespace}.scope"

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    async def put(self, items: T, scope_key: str) -> None:
        payload = self._adapter.dump_json(items, by_alias=True).decode("utf-8")
        await self._store.set(self._payload_key, payload)
        await self._store.set(self._fetched_at_key, self._clock().isoformat())
        await self._store.set(self._scope_key, scope_key)

    async def get(self, scope_key: str) -> T | None:
        cached_scope = await self._store.get(self._scope_key)
        if cached_scope != scope_key:
            await self._miss("scope_mismatch")
            return None

        if not await self.is_valid():
            await self._miss("expired")
            return None

        payload = await self._store.get(self._payload_key)
        if not isinstance(payload, str):
            await self._miss("missing_payload")
            return None
        try:
            return self._adapter.validate_json(payload)
        except PydanticValidationError:
            await self._miss("corrupt_payload")
            return None

    async def is_valid(self) -> bool:
        age = await self.age()
        return age is not None and age < self._ttl

    async def age(self) -> timedelta | None:
        fetched_at = await self.fetched_at()
        if fetched_at is None:
            return None
        return self._clock() - fetched_at

    async def clear(self) -> None:
        await self._store.delete(self._payload_key, self._fetched_at_key, self._scope_key)

    async def fetched_at(self) -> datetime | None:
        raw = await self._store.get(self._fetched_at_key)
        if not isinstance(raw, str):
            return None
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
        # Timestamps are always written with an offset; a naive one is unusable.
        return parsed if parsed.tzinfo is not None else None

    async def _miss(self, reason: str) -> None:
        log.debug("cache_miss", cache=self._scope_key.rsplit(".", 1)[0], reason=reason)
        await self.clear()


# --- Module Notes -----------------------------------------------------------
# A negative age (clock moved backwards) still counts as fresh; the entry expires once
# the clock passes fetched_at + ttl again.
