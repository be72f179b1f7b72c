"""Outbound email: SendGrid client and notification templates."""

from helpfromfounder.infrastructure.external.email.sendgrid_client import (
    EmailSendError,
    SendGridEmailSender,
)
from helpfromfounder.infrastructure.external.email.templates import NotificationTemplateRenderer

__all__ = ["EmailSendError", "NotificationTemplateRenderer", "SendGridEmailSender"]
