"""Domain enumerations for Help From Founder.

Enums represent fixed sets of domain values (thread status, tags, closing
reasons, notification types, presence state).
"""

from enum import Enum


class ThreadStatus(str, Enum):
    """Thread lifecycle status.

    Only the project owner can move a thread between open and closed.
    """

    OPEN = "open"
    CLOSED = "closed"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]

    @classmethod
    def from_stored(cls, raw: str | None) -> "ThreadStatus":
        """Parse a stored status; legacy 'resolved' is read as closed."""
        if raw == "resolved":
            return cls.CLOSED
        try:
            return cls(raw or cls.OPEN.value)
        except ValueError:
            return cls.OPEN


class ThreadTag(str, Enum):
    """Category chosen by the thread author."""

    BUG = "bug"
    FEATURE = "feature"
    QUESTION = "question"
    HELP = "help"
    DOCUMENTATION = "documentation"

    @classmethod
    def values(cls) -> list[str]:
        return [tag.value for tag in cls]


class ClosingReason(str, Enum):
    """Why the founder closed a thread."""

    SOLVED = "solved"
    FEATURE_BACKLOG = "feature backlog"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        return [reason.value for reason in cls]


class NotificationType(str, Enum):
    """Email notification kinds handled by the dispatcher."""

    NEW_ISSUE = "new_issue"
    NEW_RESPONSE = "new_response"

    @classmethod
    def values(cls) -> list[str]:
        return [t.value for t in cls]


class PresenceState(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
