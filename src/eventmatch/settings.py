"""
eventmatch.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the client core.
- Keep credential-store and backend coordinates out of code.
- Offer a cached settings instance for composition roots.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, one object injected into `AppContext` and from there
    into every collaborator that needs it.
    """

    model_config = SettingsConfigDict(env_prefix="EVENTMATCH_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "eventmatch-client"
    log_level: str = "INFO"

    # Backend
    backend_base_url: str = "http://localhost:3000/api"
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    # "protocol" honours HTTP caching headers; "reload" always asks for a fresh copy.
    cache_policy: Literal["protocol", "reload"] = "protocol"

    # Credential store namespace (service name in the OS keychain).
    keychain_service: str = "eventmatch.tokens"

    # Local key/value persistence
    local_store_url: str = "sqlite+aiosqlite:///./eventmatch.db"

    # Caches
    recommendation_cache_ttl_seconds: int = Field(default=30 * 60, gt=0)
    image_request_timeout_seconds: float = Field(default=30.0, gt=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly instead of going through `get_settings`
# so env vars on the developer machine never leak into assertions.
