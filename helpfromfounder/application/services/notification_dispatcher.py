"""Notification dispatcher: validate a payload, render it, send one email per recipient.

Validation messages and result statuses are part of the HTTP contract
used by existing clients; keep them stable.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from helpfromfounder.application.dtos.notification import (
    DispatchResult,
    EmailMessage,
    SendFailure,
)
from helpfromfounder.application.interfaces.services import IEmailSender
from helpfromfounder.domain.enums import NotificationType
from helpfromfounder.schemas.notification import NotificationRequest

logger = logging.getLogger(__name__)

_BASE_REQUIRED_FIELDS = ("projectId", "projectName", "issueId", "issueTitle", "recipients")
_request_adapter: TypeAdapter = TypeAdapter(NotificationRequest)


class NotificationValidationError(ValueError):
    """Payload rejected before any email is sent (HTTP 400)."""


class ITemplateRenderer(Protocol):
    def render(self, notification: dict[str, Any]) -> tuple[str, str, str]: ...


def _apply_legacy_recipient(data: dict[str, Any]) -> dict[str, Any]:
    """Older callers send founderEmail instead of a recipients list."""
    if "recipients" not in data and data.get("founderEmail"):
        data = dict(data)
        data["recipients"] = [{"email": data["founderEmail"], "name": "Project Owner"}]
    return data


def validate_notification_payload(data: Any) -> Any:
    """Check a raw payload in a fixed order; return the parsed request model.

    Raises:
        NotificationValidationError: with the first failing rule's message.
    """
    if not isinstance(data, dict):
        raise NotificationValidationError("Invalid JSON body")
    if not data.get("type"):
        raise NotificationValidationError("Missing required field: type")
    if data["type"] not in NotificationType.values():
        raise NotificationValidationError(f"Invalid notification type: {data['type']}")
    data = _apply_legacy_recipient(data)
    for field in _BASE_REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or value == "":
            raise NotificationValidationError(f"Missing required field: {field}")
    recipients = data["recipients"]
    if not isinstance(recipients, list) or not recipients:
        raise NotificationValidationError("Recipients must be a non-empty array")
    for recipient in recipients:
        if not isinstance(recipient, dict) or not recipient.get("email"):
            raise NotificationValidationError("Each recipient must have an email address")
    if data["type"] == NotificationType.NEW_ISSUE.value:
        if not data.get("issueContent"):
            raise NotificationValidationError("Missing required field: issueContent")
    elif not data.get("responseContent") or not data.get("responseAuthor"):
        raise NotificationValidationError("Missing required fields for response notification")
    try:
        return _request_adapter.validate_python(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"][1:]) or "body"
        raise NotificationValidationError(f"Invalid field: {location}") from e


class NotificationDispatcher:
    """Fans one notification out to its recipients, isolating each send."""

    def __init__(
        self,
        sender: IEmailSender | None,
        renderer: ITemplateRenderer,
        default_recipient_name: str = "User",
    ) -> None:
        self._sender = sender
        self._renderer = renderer
        self._default_recipient_name = default_recipient_name

    async def dispatch(self, data: Any) -> DispatchResult:
        """Validate and send. Never raises; the result carries the HTTP status."""
        if self._sender is None:
            logger.error("Notification rejected: SendGrid API key not configured")
            return DispatchResult(
                success=False,
                message="Failed to send email notification",
                status_code=500,
                error="SendGrid API key not configured",
            )
        try:
            request = validate_notification_payload(data)
        except NotificationValidationError as e:
            return DispatchResult(success=False, message=str(e), status_code=400)

        try:
            payload = request.model_dump(mode="json")
            subject, html, text = self._renderer.render(payload)
            messages = [
                EmailMessage(
                    to_email=r.email,
                    to_name=r.name or self._default_recipient_name,
                    subject=subject,
                    html=html,
                    text=text,
                )
                for r in request.recipients
            ]
            outcomes = await asyncio.gather(
                *(self._sender.send(m) for m in messages), return_exceptions=True
            )
        except Exception as e:
            logger.exception("Error sending email notification")
            return DispatchResult(
                success=False,
                message="Failed to send email notification",
                status_code=500,
                error=str(e),
            )

        errors = [
            SendFailure(recipient=m.to_email, error=str(outcome) or type(outcome).__name__)
            for m, outcome in zip(messages, outcomes)
            if isinstance(outcome, BaseException)
        ]
        for failure in errors:
            logger.warning("Email to %s failed: %s", failure.recipient, failure.error)
        total = len(messages)
        sent = total - len(errors)
        if not errors:
            return DispatchResult(
                success=True,
                message=f"Email notifications sent successfully to {sent} recipients",
                status_code=200,
            )
        return DispatchResult(
            success=sent > 0,
            message=f"Sent {sent} of {total} notifications",
            status_code=500 if sent == 0 else 207,
            errors=errors,
        )
