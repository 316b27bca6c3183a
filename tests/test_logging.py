"""
tests.test_logging

Credential redaction in log events.
"""

from __future__ import annotations

from eventmatch.observability.logging import redact_secrets


def test_token_fields_are_masked() -> None:
    event = redact_secrets(None, "info", {"event": "x", "token": "abc", "Authorization": "Bearer abc", "key": "k"})
    assert event["token"] == "***"
    assert event["Authorization"] == "***"
    assert event["key"] == "k"


def test_header_maps_are_masked() -> None:
    event = redact_secrets(None, "info", {"headers": {"Authorization": "Bearer abc", "Accept": "application/json"}})
    assert event["headers"] == {"Authorization": "***", "Accept": "application/json"}
