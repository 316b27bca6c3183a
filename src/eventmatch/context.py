"""
eventmatch.context

Composition root for the client core.

Responsibilities:
- Build every collaborator (HTTP client, token store, local store, caches, session,
  services) from one `Settings` object.
- Own the lifetimes of shared resources (httpx client, DB engine).
- Replace process-wide singletons with one explicitly passed context object.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine

from eventmatch.api.client import APIClient
from eventmatch.auth.token_store import KeyringTokenStore, TokenStore
from eventmatch.cache.images import ImageCache
from eventmatch.cache.ttl import TTLCache
from eventmatch.dates import Clock, utcnow
from eventmatch.db.init_db import init_db
from eventmatch.db.session import create_engine, create_sessionmaker
from eventmatch.db.store import KeyValueStore, SqlKeyValueStore
from eventmatch.http.transport import HttpxTransport, Transport
from eventmatch.models.attendees import Recommendation
from eventmatch.observability.logging import configure_logging, get_logger
from eventmatch.services.attendee import AttendeeService
from eventmatch.services.auth import AuthService
from eventmatch.services.events import EventService
from eventmatch.services.profile import ProfileService
from eventmatch.session.state import SessionStateManager
from eventmatch.settings import Settings

log = get_logger(__name__)

RECOMMENDATIONS_NAMESPACE = "recommendations"


@dataclass(slots=True)
class AppContext:
    settings: Settings
    http: httpx.AsyncClient
    client: APIClient
    token_store: TokenStore
    store: KeyValueStore
    session: SessionStateManager
    recommendation_cache: TTLCache[list[Recommendation]]
    images: ImageCache
    auth: AuthService
    events: EventService
    profile: ProfileService
    attendee: AttendeeService
    engine: AsyncEngine | None = None

    async def aclose(self) -> None:
        await self.http.aclose()
        if self.engine is not None:
            # Dispose the engine to close pooled SQLite connections.
            await self.engine.dispose()
        log.info("context_closed")

    async def __aenter__(self) -> AppContext:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def build_context(
    *,
    settings: Settings,
    http: httpx.AsyncClient,
    token_store: TokenStore,
    store: KeyValueStore,
    transport: Transport | None = None,
    clock: Clock = utcnow,
    engine: AsyncEngine | None = None,
) -> AppContext:
    """
    Wire collaborators that already exist. Tests call this with in-memory stores and an
    httpx client mounted on a fake backend.
    """

    client = APIClient(
        settings=settings,
        transport=transport or HttpxTransport(http=http),
        token_store=token_store,
    )
    cache: TTLCache[list[Recommendation]] = TTLCache(
        store=store,
        item_type=list[Recommendation],
        namespace=RECOMMENDATIONS_NAMESPACE,
        ttl_seconds=settings.recommendation_cache_ttl_seconds,
        clock=clock,
    )

    # The session needs the attendee service for its hook and the service needs the
    # session for the selected event; bind the hook after both exist.
    session = SessionStateManager(store=store, token_store=token_store, clock=clock)
    attendee = AttendeeService(client=client, session=session, recommendation_cache=cache)
    session.set_event_activated_hook(attendee.refresh_for_event)

    return AppContext(
        settings=settings,
        http=http,
        client=client,
        token_store=token_store,
        store=store,
        session=session,
        recommendation_cache=cache,
        images=ImageCache(http=http, timeout=settings.image_request_timeout_seconds),
        auth=AuthService(client=client, session=session),
        events=EventService(client=client),
        profile=ProfileService(client=client),
        attendee=attendee,
        engine=engine,
    )


async def create_context(settings: Settings) -> AppContext:
    """
    Production wiring: keyring-backed tokens, SQLite-backed local store, one shared
    httpx client. Loads the persisted session before returning.
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    engine = create_engine(settings)
    await init_db(engine)

    http = httpx.AsyncClient(timeout=settings.request_timeout_seconds)
    ctx = build_context(
        settings=settings,
        http=http,
        token_store=KeyringTokenStore(service=settings.keychain_service),
        store=SqlKeyValueStore(create_sessionmaker(engine)),
        engine=engine,
    )
    await ctx.session.load()
    log.info("context_ready", env=settings.env, screen=ctx.session.screen.value)
    return ctx


# --- Module Notes -----------------------------------------------------------
# Nothing in the package reaches for a module-level instance; everything flows from
# the `AppContext` returned here.
