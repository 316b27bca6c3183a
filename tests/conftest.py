"""
tests.conftest

Shared fixtures: settings, fake backend, in-memory stores and a controllable clock.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import pytest_asyncio

from eventmatch.api.client import APIClient
from eventmatch.auth.token_store import InMemoryTokenStore
from eventmatch.db.store import InMemoryKeyValueStore
from eventmatch.http.transport import HttpxTransport
from eventmatch.settings import Settings
from tests.fake_backend import FakeBackend

BASE_URL = "http://backend.test/api"


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def settings() -> Settings:
    return Settings(env="test", backend_base_url=BASE_URL)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 8, 25, 12, 0, tzinfo=UTC))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def http(backend: FakeBackend) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=backend.app)) as client:
        yield client


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def api_client(settings: Settings, http: httpx.AsyncClient, token_store: InMemoryTokenStore) -> APIClient:
    return APIClient(settings=settings, transport=HttpxTransport(http=http), token_store=token_store)
