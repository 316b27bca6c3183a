"""
eventmatch.db.store

Key/value persistence used by the session manager and the TTL caches.

Responsibilities:
- Define the `KeyValueStore` capability.
- Provide the SQLite-backed implementation and an in-memory double.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eventmatch.db.models import KeyValueEntry


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, *keys: str) -> None: ...


class SqlKeyValueStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> Any | None:
        async with self._session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            return None if entry is None else entry.value

    async def set(self, key: str, value: Any) -> None:
        async with self._session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await session.commit()

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        async with self._session_factory() as session:
            await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key.in_(keys)))
            await session.commit()


class InMemoryKeyValueStore:
    def __init__(self, initial: Iterable[tuple[str, Any]] = ()) -> None:
        self.data: dict[str, Any] = dict(initial)

    async def get(self, key: str) -> Any | None:
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self.data.pop(key, None)


# --- Module Notes -----------------------------------------------------------
# Values must be JSON-compatible. Structured payloads (cached collections, the user
# record) are stored as pre-serialized JSON strings by their owners.
