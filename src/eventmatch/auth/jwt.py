"""
eventmatch.auth.jwt

Local JWT inspection helpers.

Responsibilities:
- Read the `exp` claim of a stored bearer token without verifying its signature.

Note:
- The client cannot verify backend signatures (it never holds the key); expiry is read
  only to avoid restoring a session whose token has certainly lapsed.
"""

from __future__ import annotations

from datetime import UTC, datetime

import jwt
from jwt import InvalidTokenError


def token_expiry(token: str) -> datetime | None:
    """Return the `exp` claim as an aware datetime, or None for opaque/unparseable tokens."""

    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except InvalidTokenError:
        return None
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=UTC)


def is_token_expired(token: str, *, now: datetime) -> bool:
    # Opaque tokens are treated as live; the backend answers 401 if they are not.
    expiry = token_expiry(token)
    return expiry is not None and expiry <= now


# --- Module Notes -----------------------------------------------------------
# Used by `session.state.SessionStateManager.load` when restoring a persisted session.
