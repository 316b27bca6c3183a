"""
eventmatch.models.users

User and authentication payloads.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

from eventmatch.dates import ApiDateTime


class UserRole(enum.StrEnum):
    attendee = "attendee"
    creator = "creator"


class UserData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    auth_provider: str
    email: str
    username: str | None = None
    name: str
    # First sign-in sends the user through onboarding before any home screen.
    is_first: bool = Field(alias="isFirst")
    is_active: bool
    deleted_at: ApiDateTime | None = None
    created_at: ApiDateTime
    updated_at: ApiDateTime


class LoginResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: UserData
    token: str = Field(repr=False)


class Profession(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    category_name: str | None = Field(default=None, alias="categoryName")


class UpdateProfilePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    username: str | None = None
    profession_id: str = Field(alias="professionId")
    linkedin_username: str | None = Field(default=None, alias="linkedinUsername")
    photo_link: str | None = Field(default=None, alias="photoLink")
