"""Thread domain entity: the open/closed state machine."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from helpfromfounder.domain.enums import ClosingReason, ThreadStatus
from helpfromfounder.domain.exceptions import ValidationException


@dataclass
class ThreadEntity:
    """Closure state of a thread.

    close() and reopen() return the document fields to write and the
    change to the project's closedIssues counter; a transition to the
    current status is a no-op (empty fields, zero delta).
    """

    id: str
    status: ThreadStatus
    closing_reason: ClosingReason | None = None
    closing_note: str | None = None
    closed_by: str | None = None
    closed_at: datetime | None = field(default=None)

    @property
    def is_closed(self) -> bool:
        return self.status == ThreadStatus.CLOSED

    def close(
        self,
        reason: ClosingReason | str | None,
        note: str | None,
        closed_by: str,
        now: datetime,
    ) -> tuple[dict[str, Any], int]:
        """Close the thread. Raises ValidationException for an unknown reason."""
        if self.is_closed:
            return {}, 0
        if reason is None:
            raise ValidationException("A closing reason is required", field="reason")
        try:
            reason = ClosingReason(reason)
        except ValueError as e:
            raise ValidationException(
                f"Invalid closing reason: {reason}. Must be one of: "
                + ", ".join(ClosingReason.values()),
                field="reason",
            ) from e
        stripped = (note or "").strip()
        self.status = ThreadStatus.CLOSED
        self.closing_reason = reason
        self.closing_note = stripped or None
        self.closed_by = closed_by
        self.closed_at = now
        return {
            "status": self.status.value,
            "closingReason": reason.value,
            "closingNote": self.closing_note,
            "closedBy": closed_by,
            "closedAt": now,
            "updatedAt": now,
        }, 1

    def reopen(self, now: datetime) -> tuple[dict[str, Any], int]:
        """Reopen the thread and clear closure metadata."""
        if not self.is_closed:
            return {}, 0
        self.status = ThreadStatus.OPEN
        self.closing_reason = None
        self.closing_note = None
        self.closed_by = None
        self.closed_at = None
        return {
            "status": self.status.value,
            "closingReason": None,
            "closingNote": None,
            "closedBy": None,
            "closedAt": None,
            "updatedAt": now,
        }, -1
