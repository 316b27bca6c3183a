"""
eventmatch.auth.token_store

Bearer token persistence.

Responsibilities:
- Store, read and delete tokens under a service namespace in the OS credential store.
- Replace values with delete-then-insert so backends never see duplicate entries.
- Report persistence failures as `False` instead of raising or swallowing them.
"""

from __future__ import annotations

from typing import Protocol

import keyring
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, PasswordDeleteError

from eventmatch.observability.logging import get_logger

ACCESS_TOKEN_KEY = "access_token"

log = get_logger(__name__)


class TokenStore(Protocol):
    def set(self, token: str, *, key: str = ACCESS_TOKEN_KEY) -> bool: ...

    def get(self, *, key: str = ACCESS_TOKEN_KEY) -> str | None: ...

    def clear(self, *, key: str = ACCESS_TOKEN_KEY) -> bool: ...


class KeyringTokenStore:
    """
    Production store backed by `keyring` (Keychain, Secret Service, Windows Credential
    Locker). A backend can be injected; otherwise the platform default is resolved lazily.
    """

    def __init__(self, *, service: str, backend: KeyringBackend | None = None) -> None:
        self._service = service
        self._backend = backend

    @property
    def backend(self) -> KeyringBackend:
        if self._backend is None:
            self._backend = keyring.get_keyring()
        return self._backend

    def set(self, token: str, *, key: str = ACCESS_TOKEN_KEY) -> bool:
        try:
            self._delete(key)
            self.backend.set_password(self._service, key, token)
        except KeyringError as e:
            log.warning("token_store_set_failed", key=key, error=type(e).__name__)
            return False
        return True

    def get(self, *, key: str = ACCESS_TOKEN_KEY) -> str | None:
        try:
            return self.backend.get_password(self._service, key)
        except KeyringError as e:
            log.warning("token_store_get_failed", key=key, error=type(e).__name__)
            return None

    def clear(self, *, key: str = ACCESS_TOKEN_KEY) -> bool:
        try:
            return self._delete(key)
        except KeyringError as e:
            log.warning("token_store_clear_failed", key=key, error=type(e).__name__)
            return False

    def _delete(self, key: str) -> bool:
        try:
            self.backend.delete_password(self._service, key)
        except PasswordDeleteError:
            # Nothing stored under this key.
            return False
        return True


class InMemoryTokenStore:
    """Process-local store for tests and ephemeral sessions."""

    def __init__(self) -> None:
        self._tokens: dict[str, str] = {}

    def set(self, token: str, *, key: str = ACCESS_TOKEN_KEY) -> bool:
        self._tokens.pop(key, None)
        self._tokens[key] = token
        return True

    def get(self, *, key: str = ACCESS_TOKEN_KEY) -> str | None:
        return self._tokens.get(key)

    def clear(self, *, key: str = ACCESS_TOKEN_KEY) -> bool:
        return self._tokens.pop(key, None) is not None


# --- Module Notes -----------------------------------------------------------
# Log lines carry the key name only; token values never leave this module except
# through `get`.
