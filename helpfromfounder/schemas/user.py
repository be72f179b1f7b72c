"""User API schemas."""

from datetime import datetime

from pydantic import Field

from helpfromfounder.schemas.common import CamelModel


class UserResponse(CamelModel):
    """Public user profile."""

    id: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    twitter_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    created_at: datetime | None = None
    last_seen: datetime | None = None


class UserUpdateRequest(CamelModel):
    """Profile edits for PATCH /users/me. Omitted fields are left unchanged."""

    display_name: str | None = Field(default=None, max_length=100)
    photo_url: str | None = Field(default=None, alias="photoURL")
    twitter_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
