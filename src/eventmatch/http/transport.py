"""
eventmatch.http.transport

Transport boundary.

Responsibilities:
- Execute a built request and hand back status + raw bytes.
- Translate every transport-level failure (DNS, timeout, reset) into `NetworkError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import httpx

from eventmatch.http.errors import NetworkError
from eventmatch.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RawResponse:
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    async def send(self, request: httpx.Request) -> RawResponse: ...


class HttpxTransport:
    """
    Production transport over a shared `httpx.AsyncClient`.
    The client is owned by the composition root; this class never closes it.
    """

    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def send(self, request: httpx.Request) -> RawResponse:
        try:
            response = await self._http.send(request)
            content = await response.aread()
        except httpx.TimeoutException as e:
            # Timeouts are not a separate kind; they surface as network errors.
            log.warning("transport_timeout", error=type(e).__name__)
            raise NetworkError(f"timed out: {e}") from e
        except httpx.TransportError as e:
            log.warning("transport_failed", error=type(e).__name__)
            raise NetworkError(str(e) or type(e).__name__) from e
        return RawResponse(
            status_code=response.status_code,
            content=content,
            headers=dict(response.headers),
        )


# --- Module Notes -----------------------------------------------------------
# Anything implementing `send` can stand in for the network in tests; in practice the
# test-suite keeps `HttpxTransport` and swaps the httpx transport underneath it.
