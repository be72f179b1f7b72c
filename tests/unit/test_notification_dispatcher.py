"""Tests for notification payload validation and per-recipient dispatch."""

import pytest

from helpfromfounder.application.services import NotificationDispatcher
from helpfromfounder.application.services.notification_dispatcher import (
    NotificationValidationError,
    validate_notification_payload,
)
from helpfromfounder.infrastructure.external.email import NotificationTemplateRenderer
from tests.conftest import RecordingEmailSender


def _issue_payload(**overrides) -> dict:
    payload = {
        "type": "new_issue",
        "projectId": "p1",
        "projectName": "Acme",
        "issueId": "t1",
        "issueTitle": "Login broken",
        "issueContent": "Cannot log in",
        "recipients": [{"email": "owner@example.com", "name": "Owner"}],
    }
    payload.update(overrides)
    return payload


def _response_payload(**overrides) -> dict:
    payload = _issue_payload(type="new_response", responseContent="Fixed", responseAuthor="Fiona")
    del payload["issueContent"]
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    "data,message",
    [
        (None, "Invalid JSON body"),
        ([], "Invalid JSON body"),
        ({}, "Missing required field: type"),
        ({"type": "digest"}, "Invalid notification type: digest"),
        ({"type": "new_issue"}, "Missing required field: projectId"),
    ],
)
def test_validation_rejects_in_fixed_order(data, message) -> None:
    """The first failing rule decides the message."""
    with pytest.raises(NotificationValidationError) as exc_info:
        validate_notification_payload(data)
    assert str(exc_info.value) == message


def test_empty_recipients_rejected() -> None:
    with pytest.raises(NotificationValidationError, match="Recipients must be a non-empty array"):
        validate_notification_payload(_issue_payload(recipients=[]))


def test_recipient_without_email_rejected() -> None:
    with pytest.raises(NotificationValidationError, match="Each recipient must have an email"):
        validate_notification_payload(_issue_payload(recipients=[{"name": "Nobody"}]))


def test_issue_requires_content() -> None:
    payload = _issue_payload()
    del payload["issueContent"]
    with pytest.raises(NotificationValidationError, match="Missing required field: issueContent"):
        validate_notification_payload(payload)


def test_response_requires_content_and_author() -> None:
    with pytest.raises(NotificationValidationError, match="Missing required fields for response"):
        validate_notification_payload(_response_payload(responseAuthor=""))


def test_legacy_founder_email_becomes_recipient() -> None:
    payload = _issue_payload(founderEmail="legacy@example.com")
    del payload["recipients"]
    request = validate_notification_payload(payload)
    assert [(r.email, r.name) for r in request.recipients] == [("legacy@example.com", "Project Owner")]


async def test_dispatch_sends_one_email_per_recipient() -> None:
    sender = RecordingEmailSender()
    dispatcher = NotificationDispatcher(sender, NotificationTemplateRenderer())
    result = await dispatcher.dispatch(_response_payload(recipients=[
        {"email": "a@example.com", "name": "A"},
        {"email": "b@example.com"},
    ]))
    assert result.status_code == 200
    assert result.success is True
    assert result.message == "Email notifications sent successfully to 2 recipients"
    assert [m.to_email for m in sender.messages] == ["a@example.com", "b@example.com"]
    assert sender.messages[1].to_name == "User"
    assert sender.messages[0].subject == "New Response on Issue: Login broken - Acme"


async def test_partial_failure_returns_207_with_errors() -> None:
    sender = RecordingEmailSender()
    sender.fail_for.add("b@example.com")
    dispatcher = NotificationDispatcher(sender, NotificationTemplateRenderer())
    result = await dispatcher.dispatch(_issue_payload(recipients=[
        {"email": "a@example.com"},
        {"email": "b@example.com"},
    ]))
    assert result.status_code == 207
    assert result.success is True
    assert result.message == "Sent 1 of 2 notifications"
    body = result.to_dict()
    assert body["errors"] == [{"recipient": "b@example.com", "error": "rejected b@example.com"}]


async def test_total_failure_returns_500() -> None:
    sender = RecordingEmailSender()
    sender.fail_for.add("owner@example.com")
    dispatcher = NotificationDispatcher(sender, NotificationTemplateRenderer())
    result = await dispatcher.dispatch(_issue_payload())
    assert result.status_code == 500
    assert result.success is False
    assert result.message == "Sent 0 of 1 notifications"


async def test_missing_sender_is_a_configuration_error() -> None:
    dispatcher = NotificationDispatcher(None, NotificationTemplateRenderer())
    result = await dispatcher.dispatch(_issue_payload())
    assert result.status_code == 500
    assert result.to_dict() == {
        "success": False,
        "message": "Failed to send email notification",
        "error": "SendGrid API key not configured",
    }


async def test_invalid_payload_sends_nothing() -> None:
    sender = RecordingEmailSender()
    dispatcher = NotificationDispatcher(sender, NotificationTemplateRenderer())
    result = await dispatcher.dispatch({"type": "new_issue"})
    assert result.status_code == 400
    assert sender.messages == []
