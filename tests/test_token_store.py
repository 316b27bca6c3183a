"""
tests.test_token_store

Token store behaviour, in-memory and keyring-backed.
"""

from __future__ import annotations

from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError, PasswordSetError

from eventmatch.auth.token_store import InMemoryTokenStore, KeyringTokenStore


class StrictMemoryKeyring(KeyringBackend):
    """
    Mimics an OS keychain that rejects inserting a duplicate item, so callers must
    delete before writing.
    """

    priority = 1  # type: ignore[assignment]

    def __init__(self) -> None:
        super().__init__()
        self.items: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self.items.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        if (service, username) in self.items:
            raise PasswordSetError("duplicate item")
        self.items[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        if (service, username) not in self.items:
            raise PasswordDeleteError("not found")
        del self.items[(service, username)]


class BrokenKeyring(StrictMemoryKeyring):
    def set_password(self, service: str, username: str, password: str) -> None:
        raise PasswordSetError("keychain locked")


def test_in_memory_set_get_clear() -> None:
    store = InMemoryTokenStore()
    assert store.set("abc", key="access_token") is True
    assert store.get(key="access_token") == "abc"
    assert store.clear(key="access_token") is True
    assert store.get(key="access_token") is None
    assert store.clear(key="access_token") is False


def test_keyring_set_get_clear() -> None:
    backend = StrictMemoryKeyring()
    store = KeyringTokenStore(service="eventmatch.tokens", backend=backend)

    assert store.set("abc", key="access_token") is True
    assert store.get(key="access_token") == "abc"
    assert backend.items == {("eventmatch.tokens", "access_token"): "abc"}

    assert store.clear(key="access_token") is True
    assert store.get(key="access_token") is None


def test_keyring_set_replaces_existing_value() -> None:
    backend = StrictMemoryKeyring()
    store = KeyringTokenStore(service="svc", backend=backend)
    store.set("first")
    assert store.set("second") is True
    assert store.get() == "second"
    assert len(backend.items) == 1


def test_keys_are_namespaced_by_service() -> None:
    backend = StrictMemoryKeyring()
    a = KeyringTokenStore(service="app-a", backend=backend)
    b = KeyringTokenStore(service="app-b", backend=backend)
    a.set("token-a")
    assert b.get() is None


def test_keyring_failure_is_reported_not_raised() -> None:
    store = KeyringTokenStore(service="svc", backend=BrokenKeyring())
    assert store.set("abc") is False
    assert store.get() is None


def test_clearing_missing_key_is_false() -> None:
    store = KeyringTokenStore(service="svc", backend=StrictMemoryKeyring())
    assert store.clear() is False
