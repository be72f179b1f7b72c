"""Project API schemas."""

from datetime import datetime

from pydantic import Field

from helpfromfounder.schemas.common import CamelModel


class ProjectResponse(CamelModel):
    id: str
    name: str
    slug: str
    description: str
    owner_id: str
    owner_email: str | None = None
    website: str | None = None
    logo_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    total_issues: int = 0
    closed_issues: int = 0
    solved_percentage: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectCreateRequest(CamelModel):
    """Create/edit payload; name and description are checked again after trimming."""

    name: str = Field(..., max_length=200)
    description: str = Field(..., max_length=5000)
    website: str | None = None
    logo_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None


class ReconciliationResponse(CamelModel):
    project_id: str
    total_issues_before: int
    total_issues_after: int
    closed_issues_before: int
    closed_issues_after: int
    threads_fixed: int
    changed: bool
