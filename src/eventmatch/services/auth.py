"""
eventmatch.services.auth

Sign-in and sign-out flows.

Responsibilities:
- Exchange an identity-provider token for a backend token via `/auth/callback`.
- Store the backend token and mark the session authenticated.
"""

from __future__ import annotations

from eventmatch.api import endpoints
from eventmatch.api.client import APIClient
from eventmatch.http.errors import APIError
from eventmatch.models.users import LoginResult, UserData
from eventmatch.observability.logging import get_logger
from eventmatch.session.state import SessionStateManager

log = get_logger(__name__)


class AuthService:
    def __init__(self, *, client: APIClient, session: SessionStateManager) -> None:
        self._client = client
        self._session = session

    async def sign_in(self, *, provider_token: str) -> UserData:
        # The callback endpoint authenticates with the provider token as bearer.
        self._client.set_auth_token(provider_token)
        try:
            result: LoginResult = await self._client.request_data(endpoints.login(), LoginResult)
        except APIError as e:
            # The provider token must never outlive a failed exchange as the bearer.
            self._client.clear_auth_token()
            log.info("sign_in_failed", error=type(e).__name__)
            raise

        self._client.set_auth_token(result.token)
        await self._session.set_authenticated(True, user=result.user)
        log.info("signed_in", user_id=result.user.id, first_login=result.user.is_first)
        return result.user

    async def sign_out(self) -> None:
        await self._session.logout()
