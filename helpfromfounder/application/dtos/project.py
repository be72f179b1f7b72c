"""DTOs for project use cases."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ProjectResult:
    """Project read-model. closed_issues falls back to legacy solvedIssues.

    closed_issues_stored is False when the document has no closedIssues
    field yet; the first counter change must then write the full value.
    """

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
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_issues_stored: bool = field(default=True, repr=False)

    @property
    def solved_percentage(self) -> int:
        """Rounded share of closed threads; 0 when there are none."""
        if self.total_issues <= 0:
            return 0
        return round(self.closed_issues / self.total_issues * 100)


@dataclass(frozen=True)
class ProjectCreate:
    """Fields accepted when creating or editing a project."""

    name: str
    description: str
    website: str | None = None
    logo_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
