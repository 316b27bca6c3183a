"""
eventmatch.http.request_builder

Turns an `Endpoint` plus ambient auth state into an `httpx.Request`.

Responsibilities:
- Resolve base URL + path and reject anything that is not an absolute http(s) URL.
- Coerce query parameters to strings.
- Merge headers, attach the bearer token, serialize JSON bodies.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Literal

import httpx

from eventmatch.http.endpoint import Endpoint, QueryValue
from eventmatch.http.errors import EncodingError, InvalidURL

CachePolicy = Literal["protocol", "reload"]


def coerce_query_value(value: QueryValue) -> str:
    # JSON-style booleans so `?active=true` matches what the backend expects.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def resolve_url(base_url: str, path: str, query: Mapping[str, QueryValue]) -> httpx.URL:
    raw = base_url.rstrip("/") + "/" + path.lstrip("/") if path else base_url
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidURL(raw) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURL(raw)

    params = {k: coerce_query_value(v) for k, v in query.items() if v is not None}
    if params:
        url = url.copy_merge_params(params)
    return url


def encode_body(body: Any) -> bytes:
    try:
        # allow_nan=False: NaN/Infinity are not valid JSON and the backend would reject them.
        return json.dumps(body, allow_nan=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(str(e)) from e


def build_request(
    endpoint: Endpoint,
    *,
    base_url: str,
    token: str | None,
    timeout: float = 30.0,
    cache_policy: CachePolicy = "protocol",
) -> httpx.Request:
    url = resolve_url(base_url, endpoint.path, endpoint.query)

    headers: dict[str, str] = {"Accept": "application/json"}
    headers.update(endpoint.headers)
    if cache_policy == "reload":
        headers["Cache-Control"] = "no-cache"
    if token:
        headers["Authorization"] = f"Bearer {token}"

    content: bytes | None = None
    if endpoint.body is not None:
        content = encode_body(endpoint.body)
        headers["Content-Type"] = "application/json"

    return httpx.Request(
        endpoint.method.value,
        url,
        headers=headers,
        content=content,
        extensions={"timeout": httpx.Timeout(timeout).as_dict()},
    )


# --- Module Notes -----------------------------------------------------------
# Pure function: no I/O, no logging. Everything here is exercised synchronously in tests.
