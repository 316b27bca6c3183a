"""
eventmatch.http.endpoint

Declarative endpoint descriptor.

Responsibilities:
- Describe one backend call (path, method, query, headers, body) as an immutable value.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

QueryValue = str | int | float | bool | None


class HTTPMethod(enum.StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class Endpoint:
    """
    One backend call. Constructed per call site, usually via `eventmatch.api.endpoints`.
    `body` is any JSON-compatible value; `None` means no body is sent.
    """

    path: str
    method: HTTPMethod = HTTPMethod.GET
    query: Mapping[str, QueryValue] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None

    def __post_init__(self) -> None:
        # Copy the caller's dicts so later mutation cannot change an issued descriptor.
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "query", _frozen(self.query))
        object.__setattr__(self, "headers", _frozen(self.headers))


# --- Module Notes -----------------------------------------------------------
# The auth header is deliberately not part of the descriptor; the API client adds it
# from the token store when the request is built.
