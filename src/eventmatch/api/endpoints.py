"""
eventmatch.api.endpoints

Catalogue of backend endpoints consumed by the client.

Responsibilities:
- One factory per backend call so paths and payload encoding live in one place.
"""

from __future__ import annotations

from pydantic import BaseModel

from eventmatch.http.endpoint import Endpoint, HTTPMethod
from eventmatch.models.attendees import AnswerSubmission, RegisterAttendeePayload, SubmitGoalPayload
from eventmatch.models.events import EventCreationPayload
from eventmatch.models.users import UpdateProfilePayload


def _json(payload: BaseModel) -> dict:
    # Backend field names are the aliases; JSON mode turns Decimals into strings.
    return payload.model_dump(mode="json", by_alias=True)


def login() -> Endpoint:
    return Endpoint(path="/auth/callback", method=HTTPMethod.POST)


def create_event(payload: EventCreationPayload) -> Endpoint:
    return Endpoint(path="/events", method=HTTPMethod.POST, body=_json(payload))


def complete_profile(payload: UpdateProfilePayload) -> Endpoint:
    return Endpoint(path="/users/me/complete", method=HTTPMethod.POST, body=_json(payload))


def fetch_professions() -> Endpoint:
    return Endpoint(path="/users/professions")


def fetch_goals() -> Endpoint:
    return Endpoint(path="/attendee/goals-categories")


def validate_event(code: str) -> Endpoint:
    return Endpoint(path=f"/attendee/validate-event/{code}")


def register_attendee(payload: RegisterAttendeePayload) -> Endpoint:
    return Endpoint(path="/attendee/register", method=HTTPMethod.POST, body=_json(payload))


def submit_goals(payload: SubmitGoalPayload) -> Endpoint:
    return Endpoint(path="/attendee/goals", method=HTTPMethod.POST, body=_json(payload))


def submit_answers(payload: AnswerSubmission) -> Endpoint:
    return Endpoint(path="/attendee/answers", method=HTTPMethod.POST, body=_json(payload))


def fetch_recommendations(*, limit: int | None = None) -> Endpoint:
    return Endpoint(path="/attendee/recommendations", query={"limit": limit})
