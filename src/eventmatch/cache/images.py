"""
eventmatch.cache.images

In-memory image cache for profile and event photos.

Responsibilities:
- Serve already-loaded images without I/O.
- Collapse concurrent loads of the same URL into a single HTTP request.
- Drop the in-flight marker on completion or failure so later calls can retry.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx

from eventmatch.observability.logging import get_logger

log = get_logger(__name__)

ImageDecoder = Callable[[bytes], Any]


def raw_bytes(content: bytes) -> bytes | None:
    # Default decoder: any non-empty body is an image; an empty one is "no image".
    return content or None


class ImageCache:
    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        timeout: float = 30.0,
        decoder: ImageDecoder = raw_bytes,
    ) -> None:
        self._http = http
        self._timeout = timeout
        self._decode = decoder
        self._images: dict[str, Any] = {}
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    def __contains__(self, url: str) -> bool:
        return url in self._images

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    async def load(self, url: str) -> Any | None:
        """
        Return the decoded image for `url`, or None when it cannot be fetched or decoded.
        Callers that give up waiting do not cancel the shared fetch.
        """

        if url in self._images:
            return self._images[url]

        task = self._inflight.get(url)
        if task is None:
            task = asyncio.create_task(self._fetch(url))
            self._inflight[url] = task
            task.add_done_callback(lambda t, url=url: self._forget(url, t))
        return await asyncio.shield(task)

    def clear(self) -> None:
        self._images.clear()

    def _forget(self, url: str, task: asyncio.Task[Any]) -> None:
        if self._inflight.get(url) is task:
            del self._inflight[url]

    async def _fetch(self, url: str) -> Any | None:
        try:
            response = await self._http.get(url, timeout=self._timeout)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.info("image_load_failed", url=url, error=type(e).__name__)
            return None

        try:
            image = self._decode(response.content)
        except Exception as e:
            # Decoders are pluggable; any rejection of the bytes means "no image".
            log.info("image_decode_failed", url=url, error=type(e).__name__)
            return None
        if image is not None:
            self._images[url] = image
        return image


# --- Module Notes -----------------------------------------------------------
# Failed loads are not cached; the next `load` for the same URL issues a new request.
