"""
eventmatch.services.attendee

Attendee flows: onboarding goals/answers, event registration, recommendations.

Responsibilities:
- Wrap the attendee endpoints with typed payloads/results.
- Serve recommendations cache-first for the selected event, falling back to the cache
  when the backend call fails.
- Collapse overlapping fetches for one event into a single request.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from eventmatch.api import endpoints
from eventmatch.api.client import APIClient
from eventmatch.cache.ttl import TTLCache
from eventmatch.http.errors import APIError, ApiError
from eventmatch.models.attendees import (
    AnswerSubmission,
    GoalsCategory,
    Recommendation,
    RecommendationBatch,
    RegisterAttendeePayload,
    RegisteredAttendee,
    SubmissionAck,
    SubmitGoalPayload,
)
from eventmatch.models.events import EventSummary
from eventmatch.observability.logging import get_logger
from eventmatch.session.state import SessionStateManager

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RecommendationResult:
    recommendations: list[Recommendation]
    from_cache: bool


class NoEventSelected(ApiError):
    def __init__(self) -> None:
        super().__init__("No event selected")


class AttendeeService:
    def __init__(
        self,
        *,
        client: APIClient,
        session: SessionStateManager,
        recommendation_cache: TTLCache[list[Recommendation]],
    ) -> None:
        self._client = client
        self._session = session
        self._cache = recommendation_cache
        self._inflight: dict[str, asyncio.Task[RecommendationResult]] = {}

    async def fetch_goals(self) -> list[GoalsCategory]:
        envelope = await self._client.request(endpoints.fetch_goals(), list[GoalsCategory])
        return envelope.data or []

    async def register(self, payload: RegisterAttendeePayload) -> RegisteredAttendee:
        return await self._client.request_data(endpoints.register_attendee(payload), RegisteredAttendee)

    async def submit_goals(self, payload: SubmitGoalPayload) -> SubmissionAck:
        return await self._client.request_data(endpoints.submit_goals(payload), SubmissionAck)

    async def submit_answers(self, payload: AnswerSubmission) -> SubmissionAck:
        return await self._client.request_data(endpoints.submit_answers(payload), SubmissionAck)

    async def fetch_recommendations(self, *, force_refresh: bool = False) -> RecommendationResult:
        """
        Recommendations for the selected event, keyed in the cache by the event code.
        A failed fetch falls back to any still-valid cached batch before re-raising.
        Concurrent callers for the same event share one backend request.
        """

        event = self._session.selected_event
        if event is None:
            raise NoEventSelected()
        scope = event.code

        if not force_refresh:
            cached = await self._cache.get(scope)
            if cached is not None:
                log.info("recommendations_from_cache", count=len(cached))
                return RecommendationResult(recommendations=cached, from_cache=True)

        task = self._inflight.get(scope)
        if task is None:
            task = asyncio.create_task(self._fetch_and_cache(scope), name=f"recommendations:{scope}")
            self._inflight[scope] = task
            task.add_done_callback(lambda t, scope=scope: self._forget(scope, t))
        else:
            log.info("recommendations_join_inflight", code=scope)
        return await asyncio.shield(task)

    async def _fetch_and_cache(self, scope: str) -> RecommendationResult:
        try:
            batch: RecommendationBatch = await self._client.request_data(
                endpoints.fetch_recommendations(), RecommendationBatch
            )
        except APIError as e:
            cached = await self._cache.get(scope)
            if cached is None:
                raise
            log.warning("recommendations_fallback_to_cache", error=type(e).__name__)
            return RecommendationResult(recommendations=cached, from_cache=True)

        await self._cache.put(batch.recommendations, scope)
        log.info("recommendations_fetched", count=len(batch.recommendations))
        return RecommendationResult(recommendations=batch.recommendations, from_cache=False)

    def _forget(self, scope: str, task: asyncio.Task[RecommendationResult]) -> None:
        if self._inflight.get(scope) is task:
            del self._inflight[scope]

    async def refresh_for_event(self, event: EventSummary) -> None:
        # Hook target for `SessionStateManager(on_event_activated=...)`.
        log.info("recommendations_refresh_triggered", code=event.code)
        await self.fetch_recommendations()
