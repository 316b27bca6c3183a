"""
tests.test_session_state

Session state manager: activity flag, persistence, navigation, restore.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any

import jwt
import pytest

from eventmatch.auth.token_store import InMemoryTokenStore
from eventmatch.db.store import InMemoryKeyValueStore
from eventmatch.models.events import EventSummary
from eventmatch.models.users import UserData, UserRole
from eventmatch.session.state import Keys, Screen, SessionStateManager
from tests.conftest import FrozenClock
from tests.fake_backend import USER_JSON


def _event(end: str | None, code: str = "MEET42") -> EventSummary:
    return EventSummary(
        name="Swift Meetup",
        photo_link="https://img.test/event.png",
        current_participants=12,
        code=code,
        end=end,
    )


def _user(**overrides: Any) -> UserData:
    return UserData.model_validate({**USER_JSON, **overrides})


def _manager(store, token_store, clock, hook=None) -> SessionStateManager:
    return SessionStateManager(store=store, token_store=token_store, clock=clock, on_event_activated=hook)


@pytest.mark.asyncio
async def test_past_event_is_inactive(store, token_store, clock: FrozenClock) -> None:
    session = _manager(store, token_store, clock)
    outcome = await session.set_selected_event(_event("2020-01-01T00:00:00Z"))
    assert outcome.is_active is False
    assert session.is_event_active is False
    assert outcome.refresh is None


@pytest.mark.asyncio
async def test_future_event_is_active_and_triggers_refresh(store, token_store, clock: FrozenClock) -> None:
    seen: list[str] = []

    async def hook(event: EventSummary) -> None:
        seen.append(event.code)

    session = _manager(store, token_store, clock, hook)
    end = (clock() + timedelta(hours=1)).strftime("%Y-%m-%dT%H:%M:%SZ")
    outcome = await session.set_selected_event(_event(end))

    assert outcome.is_active is True
    assert session.is_event_active is True
    assert outcome.refresh is not None
    await outcome.refresh
    assert seen == ["MEET42"]


@pytest.mark.asyncio
async def test_unparseable_end_fails_closed(store, token_store, clock: FrozenClock) -> None:
    session = _manager(store, token_store, clock)
    outcome = await session.set_selected_event(_event("end of summer"))
    assert outcome.is_active is False


@pytest.mark.asyncio
async def test_failing_refresh_hook_does_not_break_selection(store, token_store, clock: FrozenClock) -> None:
    async def hook(event: EventSummary) -> None:
        raise RuntimeError("backend down")

    session = _manager(store, token_store, clock, hook)
    outcome = await session.set_selected_event(_event("2999-01-01"))
    with pytest.raises(RuntimeError):
        await outcome.refresh
    assert session.selected_event is not None


@pytest.mark.asyncio
async def test_selected_event_subset_is_persisted_and_cleared(store: InMemoryKeyValueStore, token_store, clock) -> None:
    session = _manager(store, token_store, clock)
    await session.set_selected_event(_event("2999-01-01T00:00:00Z"))
    assert store.data[Keys.event_name] == "Swift Meetup"
    assert store.data[Keys.event_photo_link] == "https://img.test/event.png"
    assert store.data[Keys.event_participants] == 12
    assert store.data[Keys.event_code] == "MEET42"
    assert store.data[Keys.event_end] == "2999-01-01T00:00:00Z"
    assert store.data[Keys.event_active] is True

    await session.set_selected_event(None)
    assert not any(k.startswith("selected_event.") for k in store.data)
    assert session.is_event_active is False


class SlowStore(InMemoryKeyValueStore):
    async def set(self, key: str, value: Any) -> None:
        await asyncio.sleep(0)
        await super().set(key, value)


@pytest.mark.asyncio
async def test_readers_never_see_event_without_its_flag(token_store, clock: FrozenClock) -> None:
    session = _manager(SlowStore(), token_store, clock)
    await session.set_selected_event(_event("2999-01-01"))

    task = asyncio.create_task(session.set_selected_event(_event("2020-01-01", code="OLD")))
    observed = []
    while not task.done():
        snap = session.snapshot()
        observed.append((snap.selected_event.code, snap.is_event_active))
        await asyncio.sleep(0)
    await task

    assert observed
    for code, active in observed:
        assert active is (code == "MEET42")


@pytest.mark.asyncio
async def test_navigation_targets(store, token_store, clock) -> None:
    session = _manager(store, token_store, clock)
    assert session.screen is Screen.auth

    await session.set_authenticated(True, user=_user(isFirst=True))
    assert session.screen is Screen.onboarding

    await session.complete_onboarding()
    assert session.user.is_first is False
    assert session.screen is Screen.home_attendee

    await session.switch_role(UserRole.creator)
    assert session.screen is Screen.home_creator
    assert store.data[Keys.current_role] == "creator"

    session.go_to_update_profile()
    assert session.screen is Screen.update_profile
    session.finish_update_profile()
    assert session.screen is Screen.home_creator


@pytest.mark.asyncio
async def test_set_authenticated_without_user_keeps_screen(store, token_store, clock) -> None:
    session = _manager(store, token_store, clock)
    await session.set_authenticated(True)
    assert session.is_authenticated is True
    assert session.screen is Screen.auth


@pytest.mark.asyncio
async def test_logout_clears_everything(store: InMemoryKeyValueStore, token_store: InMemoryTokenStore, clock) -> None:
    session = _manager(store, token_store, clock)
    token_store.set("abc")
    await session.set_authenticated(True, user=_user(isFirst=False))
    await session.switch_role(UserRole.creator)
    await session.set_selected_event(_event("2999-01-01"))

    await session.logout()

    assert session.is_authenticated is False
    assert session.user is None
    assert session.current_role is UserRole.attendee
    assert session.selected_event is None
    assert session.is_event_active is False
    assert session.screen is Screen.auth
    assert store.data == {}
    assert token_store.get() is None


@pytest.mark.asyncio
async def test_load_revalidates_expired_event(store: InMemoryKeyValueStore, token_store, clock) -> None:
    # Persisted as active, but the event ended while the app was closed.
    store.data.update(
        {
            Keys.event_name: "Swift Meetup",
            Keys.event_code: "MEET42",
            Keys.event_end: "2025-08-25T11:00:00Z",
            Keys.event_participants: 12,
            Keys.event_active: True,
            Keys.current_role: "creator",
        }
    )
    session = _manager(store, token_store, clock)
    snap = await session.load()

    assert snap.selected_event is not None
    assert snap.selected_event.code == "MEET42"
    assert snap.is_event_active is False
    assert store.data[Keys.event_active] is False
    assert snap.current_role is UserRole.creator
    assert snap.screen is Screen.auth


@pytest.mark.asyncio
async def test_load_restores_user_with_live_token(store: InMemoryKeyValueStore, token_store, clock) -> None:
    store.data[Keys.user] = _user(isFirst=False).model_dump_json(by_alias=True)
    exp = int((clock() + timedelta(hours=1)).timestamp())
    token_store.set(jwt.encode({"sub": "u-1", "exp": exp}, "irrelevant", algorithm="HS256"))

    snap = await _manager(store, token_store, clock).load()
    assert snap.is_authenticated is True
    assert snap.user.id == "u-1"
    assert snap.screen is Screen.home_attendee


@pytest.mark.asyncio
async def test_load_drops_user_with_expired_token(store: InMemoryKeyValueStore, token_store, clock) -> None:
    store.data[Keys.user] = _user().model_dump_json(by_alias=True)
    exp = int((clock() - timedelta(minutes=1)).timestamp())
    token_store.set(jwt.encode({"sub": "u-1", "exp": exp}, "irrelevant", algorithm="HS256"))

    snap = await _manager(store, token_store, clock).load()
    assert snap.is_authenticated is False
    assert snap.screen is Screen.auth
    assert Keys.user not in store.data
    assert token_store.get() is None


@pytest.mark.asyncio
async def test_load_treats_garbage_as_absent(store: InMemoryKeyValueStore, token_store, clock) -> None:
    store.data.update(
        {
            Keys.user: "{not json",
            Keys.current_role: "superuser",
            Keys.event_name: 42,
            Keys.event_code: "MEET42",
        }
    )
    token_store.set("opaque-token")

    snap = await _manager(store, token_store, clock).load()
    assert snap.user is None
    assert snap.is_authenticated is False
    assert snap.current_role is UserRole.attendee
    assert snap.selected_event is None


@pytest.mark.asyncio
async def test_refresh_event_status_follows_the_clock(store, token_store, clock: FrozenClock) -> None:
    session = _manager(store, token_store, clock)
    await session.set_selected_event(_event("2025-08-25T12:30:00Z"))
    assert session.is_event_active is True

    clock.advance(minutes=31)
    assert await session.refresh_event_status() is False
    assert store.data[Keys.event_active] is False
