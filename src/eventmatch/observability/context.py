"""
eventmatch.observability.context

Call-scoped logging context.

Responsibilities:
- Generate a request id for every outgoing API call.
- Bind call metadata into structlog contextvars for the duration of the call.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


@contextmanager
def request_context(*, method: str, path: str, request_id: str | None = None) -> Iterator[str]:
    """
    Binds `request_id`, `method` and `path` for every log line emitted inside the block.
    Yields the request id so it can be forwarded as `x-request-id`.
    """

    rid = request_id or str(uuid.uuid4())
    tokens = structlog.contextvars.bind_contextvars(request_id=rid, method=method, path=path)
    try:
        yield rid
    finally:
        # Restore whatever the caller had bound; concurrent calls run in separate contexts.
        structlog.contextvars.reset_contextvars(**tokens)


# --- Module Notes -----------------------------------------------------------
# asyncio tasks copy the current context on creation, so concurrent API calls each
# see their own request id without explicit parameter threading.
