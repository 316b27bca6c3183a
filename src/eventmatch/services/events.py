"""
eventmatch.services.events

Event creation and join-code validation.
"""

from __future__ import annotations

from eventmatch.api import endpoints
from eventmatch.api.client import APIClient
from eventmatch.models.common import MutationResult
from eventmatch.models.events import EventCreationPayload, EventDetail


class EventService:
    def __init__(self, *, client: APIClient) -> None:
        self._client = client

    async def create_event(self, payload: EventCreationPayload) -> MutationResult:
        envelope = await self._client.request(endpoints.create_event(payload))
        return MutationResult(
            success=envelope.success,
            message=envelope.message,
            errors=[str(e) for e in envelope.errors],
        )

    async def validate_event(self, code: str) -> EventDetail:
        return await self._client.request_data(endpoints.validate_event(code), EventDetail)
