"""DTOs for the notification dispatcher."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmailMessage:
    """One outbound email (a single recipient)."""

    to_email: str
    to_name: str
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class SendFailure:
    recipient: str
    error: str


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one dispatcher request; status_code is the HTTP status to return."""

    success: bool
    message: str
    status_code: int
    errors: list[SendFailure] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        body: dict = {"success": self.success, "message": self.message}
        if self.errors:
            body["errors"] = [
                {"recipient": f.recipient, "error": f.error} for f in self.errors
            ]
        if self.error:
            body["error"] = self.error
        return body
