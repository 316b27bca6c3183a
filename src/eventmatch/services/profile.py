"""
eventmatch.services.profile

Profile completion and profession lookup.
"""

from __future__ import annotations

from typing import Any

from eventmatch.api import endpoints
from eventmatch.api.client import APIClient
from eventmatch.models.common import MutationResult
from eventmatch.models.users import Profession, UpdateProfilePayload


class ProfileService:
    def __init__(self, *, client: APIClient) -> None:
        self._client = client

    async def complete_profile(self, payload: UpdateProfilePayload) -> MutationResult:
        envelope = await self._client.request(endpoints.complete_profile(payload), Any)
        return MutationResult(
            success=envelope.success,
            message=envelope.message,
            errors=[str(e) for e in envelope.errors],
        )

    async def fetch_professions(self) -> list[Profession]:
        envelope = await self._client.request(endpoints.fetch_professions(), list[Profession])
        return envelope.data or []
