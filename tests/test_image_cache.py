"""
tests.test_image_cache

Image cache: de-duplicated concurrent loads, retry after failure, shielded fetches.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from eventmatch.cache.images import ImageCache

URL = "https://img.test/avatar.png"


class GatedHandler:
    """MockTransport handler that counts calls and blocks until released."""

    def __init__(self, *, status_code: int = 200, content: bytes = b"\x89PNG") -> None:
        self.calls = 0
        self.status_code = status_code
        self.content = content
        self.gate = asyncio.Event()

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        await self.gate.wait()
        return httpx.Response(self.status_code, content=self.content)


@pytest.mark.asyncio
async def test_concurrent_loads_share_one_request() -> None:
    handler = GatedHandler()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        cache = ImageCache(http=http)

        waiters = [asyncio.create_task(cache.load(URL)) for _ in range(5)]
        await asyncio.sleep(0)
        assert cache.inflight_count == 1

        handler.gate.set()
        results = await asyncio.gather(*waiters)

    assert results == [b"\x89PNG"] * 5
    assert handler.calls == 1
    assert cache.inflight_count == 0
    assert URL in cache


@pytest.mark.asyncio
async def test_cached_image_is_served_without_io() -> None:
    handler = GatedHandler()
    handler.gate.set()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        cache = ImageCache(http=http)
        await cache.load(URL)
        await cache.load(URL)
    assert handler.calls == 1


@pytest.mark.asyncio
async def test_failure_returns_none_to_all_waiters_and_is_retried() -> None:
    handler = GatedHandler(status_code=404)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        cache = ImageCache(http=http)

        waiters = [asyncio.create_task(cache.load(URL)) for _ in range(3)]
        await asyncio.sleep(0)
        handler.gate.set()
        assert await asyncio.gather(*waiters) == [None, None, None]
        assert handler.calls == 1
        assert URL not in cache
        assert cache.inflight_count == 0

        handler.status_code = 200
        assert await cache.load(URL) == b"\x89PNG"
        assert handler.calls == 2


@pytest.mark.asyncio
async def test_network_error_yields_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        assert await ImageCache(http=http).load(URL) is None


@pytest.mark.asyncio
async def test_abandoned_waiter_does_not_cancel_shared_load() -> None:
    handler = GatedHandler()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        cache = ImageCache(http=http)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(cache.load(URL), timeout=0.01)
        assert cache.inflight_count == 1

        second = asyncio.create_task(cache.load(URL))
        await asyncio.sleep(0)
        handler.gate.set()
        assert await second == b"\x89PNG"

    assert handler.calls == 1


@pytest.mark.asyncio
async def test_custom_decoder_rejecting_content_is_not_cached() -> None:
    handler = GatedHandler(content=b"not an image")
    handler.gate.set()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        cache = ImageCache(http=http, decoder=lambda content: None)
        assert await cache.load(URL) is None
        assert URL not in cache


@pytest.mark.asyncio
async def test_raising_decoder_yields_none_to_every_waiter() -> None:
    def decoder(content: bytes) -> bytes:
        raise ValueError("cannot identify image")

    handler = GatedHandler(content=b"garbage")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        cache = ImageCache(http=http, decoder=decoder)

        waiters = [asyncio.create_task(cache.load(URL)) for _ in range(2)]
        await asyncio.sleep(0)
        handler.gate.set()
        assert await asyncio.gather(*waiters) == [None, None]

    assert handler.calls == 1
    assert URL not in cache
    assert cache.inflight_count == 0
