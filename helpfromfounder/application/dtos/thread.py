"""DTOs for threads and responses."""

from dataclasses import dataclass
from datetime import datetime

from helpfromfounder.domain.enums import ClosingReason, ThreadStatus


@dataclass(frozen=True)
class ThreadResult:
    """Thread read-model (legacy 'resolved' already mapped to closed/solved)."""

    id: str
    project_id: str
    title: str
    content: str
    tag: str
    status: ThreadStatus
    author_name: str
    author_id: str | None = None
    anonymous_id: str | None = None
    closing_reason: ClosingReason | None = None
    closing_note: str | None = None
    closed_by: str | None = None
    response_count: int = 0
    is_public: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None


@dataclass(frozen=True)
class ResponseResult:
    """Response read-model. is_founder is a snapshot taken at write time."""

    id: str
    thread_id: str
    content: str
    author_name: str
    author_id: str | None = None
    anonymous_id: str | None = None
    is_founder: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class Participant:
    """Notification recipient resolved from a thread."""

    email: str
    name: str


@dataclass(frozen=True)
class TransferResult:
    success: bool
    message: str
    transferred: int = 0


@dataclass(frozen=True)
class ReconciliationResult:
    """Counter values before and after a reconciliation pass for one project."""

    project_id: str
    total_issues_before: int
    total_issues_after: int
    closed_issues_before: int
    closed_issues_after: int
    threads_fixed: int

    @property
    def changed(self) -> bool:
        return (
            self.total_issues_before != self.total_issues_after
            or self.closed_issues_before != self.closed_issues_after
            or self.threads_fixed > 0
        )
