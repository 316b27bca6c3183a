"""
eventmatch.session.state

Session state manager.

Responsibilities:
- Own the in-memory session (auth flag, role, user, selected event, derived flags).
- Persist the restorable subset to the local key/value store and rebuild it on start.
- Recompute the event activity flag together with every selected-event change.
- Make the "event became active" follow-up explicit instead of a hidden side effect.
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from eventmatch.auth.jwt import is_token_expired
from eventmatch.auth.token_store import ACCESS_TOKEN_KEY, TokenStore
from eventmatch.dates import Clock, is_still_active, utcnow
from eventmatch.db.store import KeyValueStore
from eventmatch.models.events import EventSummary
from eventmatch.models.users import UserData, UserRole
from eventmatch.observability.logging import get_logger

log = get_logger(__name__)

EventActivatedHook = Callable[[EventSummary], Coroutine[Any, Any, None]]


class Screen(enum.StrEnum):
    auth = "auth"
    onboarding = "onboarding"
    update_profile = "update_profile"
    home_attendee = "home_attendee"
    home_creator = "home_creator"


class Keys:
    current_role = "session.current_role"
    user = "session.user"
    event_name = "selected_event.name"
    event_photo_link = "selected_event.photo_link"
    event_participants = "selected_event.current_participants"
    event_code = "selected_event.code"
    event_end = "selected_event.end"
    event_active = "selected_event.is_active"

    event_fields = (event_name, event_photo_link, event_participants, event_code, event_end)
    all_keys = (current_role, user, *event_fields, event_active)


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    is_authenticated: bool
    current_role: UserRole
    user: UserData | None
    selected_event: EventSummary | None
    is_event_active: bool
    screen: Screen


@dataclass(frozen=True, slots=True)
class SelectionOutcome:
    """
    Result of changing the selected event. `refresh` is the scheduled follow-up
    (e.g. fetching recommendations) when the new event is active; callers may await it
    or let it run in the background.
    """

    event: EventSummary | None
    is_active: bool
    refresh: asyncio.Task[None] | None = None


class SessionStateManager:
    def __init__(
        self,
        *,
        store: KeyValueStore,
        token_store: TokenStore,
        clock: Clock = utcnow,
        on_event_activated: EventActivatedHook | None = None,
    ) -> None:
        self._store = store
        self._tokens = token_store
        self._clock = clock
        self._on_event_activated = on_event_activated

        self._is_authenticated = False
        self._current_role = UserRole.attendee
        self._user: UserData | None = None
        self._selected_event: EventSummary | None = None
        self._is_event_active = False
        self._screen = Screen.auth

        # Serializes mutations; reads never suspend, so they see a consistent pair.
        self._lock = asyncio.Lock()
        self._background: set[asyncio.Task[Any]] = set()

    def set_event_activated_hook(self, hook: EventActivatedHook | None) -> None:
        self._on_event_activated = hook

    # -- read side --------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated

    @property
    def current_role(self) -> UserRole:
        return self._current_role

    @property
    def user(self) -> UserData | None:
        return self._user

    @property
    def selected_event(self) -> EventSummary | None:
        return self._selected_event

    @property
    def is_event_active(self) -> bool:
        return self._is_event_active

    @property
    def screen(self) -> Screen:
        return self._screen

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            is_authenticated=self._is_authenticated,
            current_role=self._current_role,
            user=self._user,
            selected_event=self._selected_event,
            is_event_active=self._is_event_active,
            screen=self._screen,
        )

    # -- lifecycle --------------------------------------------------------------

    async def load(self) -> SessionSnapshot:
        """
        Rebuild state from the local store, then re-validate the activity flag against
        the clock (the event may have ended while the app was closed). Anything that
        cannot be parsed is treated as absent.
        """

        async with self._lock:
            self._current_role = _parse_role(await self._store.get(Keys.current_role))

            user = await self._load_user()
            token = self._tokens.get(key=ACCESS_TOKEN_KEY)
            if user is not None and token and not is_token_expired(token, now=self._clock()):
                self._is_authenticated = True
                self._user = user
            elif user is not None:
                log.info("session_not_restored", reason="missing_or_expired_token")
                await self._store.delete(Keys.user)
                self._tokens.clear(key=ACCESS_TOKEN_KEY)

            event = await self._load_event()
            self._apply_event(event)
            await self._store.set(Keys.event_active, self._is_event_active)

            self._resolve_screen()
            log.info(
                "session_loaded",
                authenticated=self._is_authenticated,
                role=self._current_role.value,
                has_event=event is not None,
                event_active=self._is_event_active,
            )
            return self.snapshot()

    async def set_authenticated(self, authenticated: bool, user: UserData | None = None) -> None:
        async with self._lock:
            self._is_authenticated = authenticated
            if user is None:
                return
            self._user = user
            await self._store.set(Keys.user, user.model_dump_json(by_alias=True))
            self._resolve_screen()

    async def set_selected_event(self, event: EventSummary | None) -> SelectionOutcome:
        async with self._lock:
            self._apply_event(event)
            active = self._is_event_active
            await self._persist_event(event, active)

        refresh: asyncio.Task[None] | None = None
        if event is not None and active and self._on_event_activated is not None:
            refresh = self._spawn(self._on_event_activated(event), name="event_activated")
        log.info("selected_event_changed", code=event.code if event else None, active=active)
        return SelectionOutcome(event=event, is_active=active, refresh=refresh)

    async def refresh_event_status(self) -> bool:
        async with self._lock:
            self._apply_event(self._selected_event)
            await self._store.set(Keys.event_active, self._is_event_active)
            return self._is_event_active

    async def logout(self) -> None:
        async with self._lock:
            self._is_authenticated = False
            self._user = None
            self._current_role = UserRole.attendee
            self._apply_event(None)

            await self._store.delete(*Keys.all_keys)
            self._tokens.clear(key=ACCESS_TOKEN_KEY)
            self._resolve_screen()
        log.info("logged_out")

    # -- navigation -------------------------------------------------------------

    async def switch_role(self, role: UserRole) -> None:
        async with self._lock:
            self._current_role = UserRole(role)
            await self._store.set(Keys.current_role, self._current_role.value)
            self._resolve_screen()

    async def complete_onboarding(self) -> None:
        async with self._lock:
            if self._user is not None:
                self._user = self._user.model_copy(update={"is_first": False})
                await self._store.set(Keys.user, self._user.model_dump_json(by_alias=True))
            self._current_role = UserRole.attendee
            await self._store.set(Keys.current_role, self._current_role.value)
            self._resolve_screen()

    def go_to_update_profile(self) -> None:
        if self._user is not None:
            self._screen = Screen.update_profile

    def finish_update_profile(self) -> None:
        self._screen = _home_for(self._current_role)

    # -- internals --------------------------------------------------------------

    def _apply_event(self, event: EventSummary | None) -> None:
        # Both fields change together with no await in between.
        active = event is not None and is_still_active(event.end, now=self._clock())
        self._selected_event = event
        self._is_event_active = active

    def _resolve_screen(self) -> None:
        if not self._is_authenticated:
            self._screen = Screen.auth
        elif self._user is not None and self._user.is_first:
            self._screen = Screen.onboarding
        else:
            self._screen = _home_for(self._current_role)

    async def _persist_event(self, event: EventSummary | None, active: bool) -> None:
        if event is None:
            await self._store.delete(*Keys.event_fields, Keys.event_active)
            return
        await self._store.set(Keys.event_name, event.name)
        await self._store.set(Keys.event_photo_link, event.photo_link)
        await self._store.set(Keys.event_participants, event.current_participants)
        await self._store.set(Keys.event_code, event.code)
        if event.end is None:
            await self._store.delete(Keys.event_end)
        else:
            await self._store.set(Keys.event_end, event.end)
        await self._store.set(Keys.event_active, active)

    async def _load_user(self) -> UserData | None:
        raw = await self._store.get(Keys.user)
        if not isinstance(raw, str):
            return None
        try:
            return UserData.model_validate_json(raw)
        except PydanticValidationError:
            log.warning("persisted_user_unreadable")
            await self._store.delete(Keys.user)
            return None

    async def _load_event(self) -> EventSummary | None:
        name = await self._store.get(Keys.event_name)
        code = await self._store.get(Keys.event_code)
        if not isinstance(name, str) or not isinstance(code, str):
            return None
        photo_link = await self._store.get(Keys.event_photo_link)
        participants = await self._store.get(Keys.event_participants)
        end = await self._store.get(Keys.event_end)
        return EventSummary(
            name=name,
            code=code,
            photo_link=photo_link if isinstance(photo_link, str) else "",
            current_participants=participants if isinstance(participants, int) else 0,
            end=end if isinstance(end, str) else None,
        )

    def _spawn(self, coro: Coroutine[Any, Any, None], *, name: str) -> asyncio.Task[None]:
        task = asyncio.create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.warning("background_task_failed", task=task.get_name(), error=repr(exc))


def _parse_role(raw: Any) -> UserRole:
    try:
        return UserRole(raw)
    except ValueError:
        return UserRole.attendee


def _home_for(role: UserRole) -> Screen:
    return Screen.home_creator if role is UserRole.creator else Screen.home_attendee


# --- Module Notes -----------------------------------------------------------
# The `on_event_activated` hook is wired to the recommendation fetch in
# `eventmatch.context`; the manager itself knows nothing about recommendations.
