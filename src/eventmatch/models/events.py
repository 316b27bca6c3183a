"""
eventmatch.models.events

Event payloads: creation requests, validation results, and the locally
persisted summary of the event a user has joined.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class EventCreationPayload(BaseModel):
    name: str
    description: str
    # Sent as-is; callers format it with `datetime.isoformat()`.
    datetime: str
    location: str
    latitude: float
    longitude: float


class Creator(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    username: str | None = None


class EventDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    start: str
    end: str
    detail: str | None = None
    photo_link: str | None = None
    location_name: str | None = None
    location_address: str | None = None
    location_link: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    link: str | None = None
    status: str
    current_participants: int
    code: str
    creator: Creator
    is_attendee: bool | None = Field(default=None, alias="isAttendee")

    def to_summary(self) -> EventSummary:
        return EventSummary(
            name=self.name,
            photo_link=self.photo_link or "",
            current_participants=self.current_participants,
            code=self.code,
            end=self.end,
        )


class EventSummary(BaseModel):
    """
    The selected event as kept by the session layer. `end` stays a raw string; it is
    parsed leniently when the activity flag is computed.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    photo_link: str = ""
    current_participants: int = 0
    code: str
    end: str | None = None
