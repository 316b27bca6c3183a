"""
eventmatch.dates

Date parsing rules shared by the decoder and the session layer.

Responsibilities:
- Strict ISO-8601 parsing for API payload dates (fractional seconds first).
- Lenient, fail-closed parsing of event end dates.
- A single clock type so tests can pin "now".
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator

Clock = Callable[[], datetime]

API_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)

EVENT_END_FORMATS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _try_formats(value: str, formats: tuple[str, ...]) -> datetime | None:
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_api_datetime(value: str) -> datetime:
    """
    Parse an internet date-time as sent by the backend. Raises `ValueError` when no
    format matches; callers must not substitute a default.
    """

    parsed = _try_formats(value.strip(), API_DATE_FORMATS)
    if parsed is None:
        raise ValueError(f"Unrecognized ISO8601 date: {value!r}")
    return parsed


def _validate_api_datetime(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        # Numbers would otherwise be accepted by pydantic as epoch seconds.
        raise ValueError(f"expected ISO8601 string, got {type(value).__name__}")
    return parse_api_datetime(value)


# Use for every datetime field decoded from an API payload.
ApiDateTime = Annotated[datetime, BeforeValidator(_validate_api_datetime)]


def parse_event_end(value: str | None) -> datetime | None:
    """
    Parse an event end timestamp with the prioritized format list.

    Naive results (the two formats without an offset) are taken as UTC. Returns `None`
    when nothing matches.
    """

    if not value:
        return None
    parsed = _try_formats(value.strip(), EVENT_END_FORMATS)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def is_still_active(end: str | None, *, now: datetime) -> bool:
    """True while `now` is before the parsed end date; unparseable ends count as inactive."""

    parsed = parse_event_end(end)
    if parsed is None:
        return False
    return now < parsed
