"""
eventmatch.api.client

Typed API client.

Responsibilities:
- Pull the bearer token from the token store and build requests.
- Send through the transport and decode the response envelope.
- Clear the stored token when the backend answers 401.
- Emit one structured log line per call (never the token).
"""

from __future__ import annotations

import time
from typing import Any, TypeVar

from eventmatch.auth.token_store import ACCESS_TOKEN_KEY, TokenStore
from eventmatch.http.endpoint import Endpoint
from eventmatch.http.envelope import Envelope, decode_response
from eventmatch.http.errors import APIError, ApiError, NoData, Unauthorized
from eventmatch.http.request_builder import build_request
from eventmatch.http.transport import Transport
from eventmatch.observability.context import request_context
from eventmatch.observability.logging import get_logger
from eventmatch.settings import Settings

T = TypeVar("T")

log = get_logger(__name__)


class APIClient:
    def __init__(
        self,
        *,
        settings: Settings,
        transport: Transport,
        token_store: TokenStore,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._tokens = token_store

    # -- token handling -------------------------------------------------------

    def set_auth_token(self, token: str) -> bool:
        ok = self._tokens.set(token, key=ACCESS_TOKEN_KEY)
        if not ok:
            # Non-fatal: the session keeps working until the process exits.
            log.warning("auth_token_not_persisted")
        return ok

    def clear_auth_token(self) -> None:
        self._tokens.clear(key=ACCESS_TOKEN_KEY)

    @property
    def has_auth_token(self) -> bool:
        return self._tokens.get(key=ACCESS_TOKEN_KEY) is not None

    # -- requests -------------------------------------------------------------

    async def request(self, endpoint: Endpoint, data_type: Any = Any) -> Envelope[Any]:
        """
        Execute `endpoint` and decode its envelope with `data_type` as the payload type.
        Every failure is raised as an `APIError` subclass.
        """

        with request_context(method=endpoint.method.value, path=endpoint.path) as request_id:
            request = build_request(
                endpoint,
                base_url=self._settings.backend_base_url,
                token=self._tokens.get(key=ACCESS_TOKEN_KEY),
                timeout=self._settings.request_timeout_seconds,
                cache_policy=self._settings.cache_policy,
            )
            request.headers["x-request-id"] = request_id

            started = time.perf_counter()
            try:
                raw = await self._transport.send(request)
                envelope = decode_response(raw.status_code, raw.content, data_type)
            except Unauthorized:
                # A rejected token is never retried; the session must sign in again.
                self.clear_auth_token()
                log.info("api_unauthorized", elapsed_ms=_elapsed_ms(started))
                raise
            except APIError as e:
                log.info("api_failed", error=type(e).__name__, elapsed_ms=_elapsed_ms(started))
                raise

            log.info(
                "api_ok",
                status_code=raw.status_code,
                success=envelope.success,
                elapsed_ms=_elapsed_ms(started),
            )
            return envelope

    async def request_data(self, endpoint: Endpoint, data_type: type[T] | Any) -> T:
        """
        Like `request`, but return `data`. A missing payload raises `ApiError` with the
        backend message when `success` is false, `NoData` otherwise.
        """

        envelope = await self.request(endpoint, data_type)
        if envelope.data is None:
            if not envelope.success:
                raise ApiError(envelope.message)
            raise NoData()
        return envelope.data


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


# --- Module Notes -----------------------------------------------------------
# The token is read from the store on every call so a sign-in in one task is seen by
# the next request from any other task without extra wiring.
