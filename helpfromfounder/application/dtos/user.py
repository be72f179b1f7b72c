"""DTOs for user profiles."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserResult:
    """User read-model (users/{uid} document)."""

    id: str
    email: str | None
    display_name: str | None
    photo_url: str | None = None
    created_at: datetime | None = None
    last_seen: datetime | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
