"""
eventmatch.models.common

Shapes shared by several features.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class MutationResult(BaseModel):
    """Outcome of a write endpoint whose payload the caller does not need."""

    success: bool
    message: str
    errors: list[str] = Field(default_factory=list)
