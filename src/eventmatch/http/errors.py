"""
eventmatch.http.errors

Client error taxonomy.

Responsibilities:
- Give every failure of the request/response pipeline a distinct type.
- Carry human-readable descriptions callers can surface as-is.
- Map errors onto the three user-facing reactions (re-auth, field errors, retry).
"""

from __future__ import annotations

from collections.abc import Sequence


class APIError(Exception):
    """Base class for every error raised by the API client pipeline."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class InvalidURL(APIError):
    def __init__(self, url: str | None = None) -> None:
        super().__init__("Invalid URL")
        self.url = url


class EncodingError(APIError):
    def __init__(self, reason: str = "") -> None:
        super().__init__("Failed to encode request")
        self.reason = reason


class DecodingError(APIError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to decode response: {reason}")
        self.reason = reason


class NetworkError(APIError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Network error: {reason}")
        self.reason = reason


class Unauthorized(APIError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Unauthorized: {message}")
        self.message = message


class Forbidden(APIError):
    def __init__(self, status_code: int = 403) -> None:
        super().__init__("Access forbidden")
        self.status_code = status_code


class NotFound(APIError):
    def __init__(self) -> None:
        super().__init__("Resource not found")


class ValidationError(APIError):
    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class ServerError(APIError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"Server error ({status_code})")
        self.status_code = status_code


class UnknownError(APIError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"Unknown error ({status_code})")
        self.status_code = status_code


class NoData(APIError):
    def __init__(self) -> None:
        super().__init__("No data received")


class ApiError(APIError):
    """Backend reported `success=false` with a message on an otherwise valid response."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


GENERIC_RETRY_MESSAGE = "Something went wrong. Please try again."
REAUTH_MESSAGE = "Your session has expired. Please sign in again."


def describe_for_user(error: APIError) -> str:
    """
    Collapse the taxonomy into what a screen shows: a sign-in prompt, field errors,
    or a generic retryable message.
    """

    if isinstance(error, Unauthorized):
        return REAUTH_MESSAGE
    if isinstance(error, ValidationError):
        return "\n".join(error.errors)
    if isinstance(error, ApiError):
        return error.message
    return GENERIC_RETRY_MESSAGE


# --- Module Notes -----------------------------------------------------------
# The 400-403 range (except 401) collapses into `Forbidden`; the raw
# status is kept on the instance for callers that need to tell 400 from 403.
