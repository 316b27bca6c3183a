"""
eventmatch.http.envelope

Response envelope models and the status-code driven decoder.

Responsibilities:
- Model the backend's `{success, message, data, errors}` wrapper generically.
- Map HTTP status ranges to typed errors.
- Fail loudly on malformed success bodies; never default-construct payloads.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from eventmatch.http.errors import (
    DecodingError,
    Forbidden,
    NotFound,
    ServerError,
    Unauthorized,
    UnknownError,
    ValidationError,
)

T = TypeVar("T")

AUTH_REQUIRED_MESSAGE = "Authentication required"
VALIDATION_FALLBACK_MESSAGE = "Validation failed"


class APIErrorItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str | None = None
    message: str

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class Envelope(BaseModel, Generic[T]):
    """
    Uniform backend wrapper. `data` stays `None` when absent, whatever `success` says.
    """

    success: bool
    message: str
    data: T | None = None
    errors: list[APIErrorItem] = Field(default_factory=list)


class ErrorBody(BaseModel):
    # Simplified shape used by 401/422 responses; errors are plain strings here.
    # A body without `success` does not count as parsed.
    success: bool
    message: str | None = None
    errors: list[str] | None = None


def _parse_error_body(content: bytes) -> ErrorBody | None:
    if not content:
        return None
    try:
        return ErrorBody.model_validate_json(content)
    except PydanticValidationError:
        return None


def raise_for_status(status_code: int, content: bytes) -> None:
    """
    Raise the typed error for a non-2xx status. Returns silently for 2xx.
    Order matters: 401 and 404 are matched before the 400-403 range.
    """

    if 200 <= status_code <= 299:
        return
    if status_code == 401:
        body = _parse_error_body(content)
        if body is not None:
            raise Unauthorized(body.message or "Unauthorized")
        raise Unauthorized(AUTH_REQUIRED_MESSAGE)
    if 400 <= status_code <= 403:
        raise Forbidden(status_code)
    if status_code == 404:
        raise NotFound()
    if status_code == 422:
        body = _parse_error_body(content)
        if body is not None and body.errors is not None:
            raise ValidationError(body.errors)
        raise ValidationError([VALIDATION_FALLBACK_MESSAGE])
    if 500 <= status_code <= 599:
        raise ServerError(status_code)
    raise UnknownError(status_code)


def decode_envelope(content: bytes, data_type: Any) -> Envelope[Any]:
    try:
        return Envelope[data_type].model_validate_json(content)
    except PydanticValidationError as e:
        raise DecodingError(_summarize(e)) from e


def decode_response(status_code: int, content: bytes, data_type: Any) -> Envelope[Any]:
    raise_for_status(status_code, content)
    return decode_envelope(content, data_type)


def _summarize(error: PydanticValidationError) -> str:
    first = error.errors()[0] if error.error_count() else {}
    loc = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
    return f"{loc}: {first.get('msg', 'invalid payload')} ({error.error_count()} error(s))"


# --- Module Notes -----------------------------------------------------------
# A 422 body whose `errors` key is missing counts as unparseable and yields the
# generic message.
