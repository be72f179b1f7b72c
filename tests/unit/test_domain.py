"""Tests for domain exceptions, identity, enums, and the thread state machine."""

from datetime import UTC, datetime

import pytest

from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.entities.thread import ThreadEntity
from helpfromfounder.domain.enums import ClosingReason, ThreadStatus
from helpfromfounder.domain.exceptions import (
    AuthorizationException,
    DocumentStoreError,
    HelpFromFounderException,
    ResourceNotFoundException,
    ValidationException,
)
from helpfromfounder.shared.utils.sanitization import sanitize_input

NOW = datetime(2024, 5, 1, tzinfo=UTC)


def test_base_exception_defaults_error_code_to_class_name() -> None:
    exc = HelpFromFounderException("Something failed")
    assert exc.error_code == "HelpFromFounderException"
    assert exc.to_dict() == {"error": "HelpFromFounderException", "message": "Something failed", "details": {}}


def test_domain_exception_codes() -> None:
    assert ValidationException("bad", field="tag").details == {"field": "tag"}
    assert AuthorizationException(resource="thread", action="delete").error_code == "PERMISSION_DENIED"
    not_found = ResourceNotFoundException("project", "acme")
    assert not_found.message == "project not found: acme"
    assert DocumentStoreError("Failed to load", reason="timeout").details == {"reason": "timeout"}


def test_identity_needs_exactly_one_id() -> None:
    with pytest.raises(ValueError):
        Identity()
    with pytest.raises(ValueError):
        Identity(user_id="u1", anonymous_id="12345678")


def test_identity_authorship() -> None:
    user = Identity.authenticated("u1")
    visitor = Identity.anonymous("12345678", "BraveOtter42")
    assert user.is_author_of("u1", None)
    assert not user.is_author_of(None, "12345678")
    assert visitor.is_author_of(None, "12345678")
    assert not visitor.is_author_of(None, None)


def test_legacy_resolved_status_reads_as_closed() -> None:
    assert ThreadStatus.from_stored("resolved") == ThreadStatus.CLOSED
    assert ThreadStatus.from_stored(None) == ThreadStatus.OPEN
    assert ThreadStatus.from_stored("weird") == ThreadStatus.OPEN


def test_thread_close_and_reopen_deltas() -> None:
    entity = ThreadEntity(id="t1", status=ThreadStatus.OPEN)
    fields, delta = entity.close("feature backlog", "  ", "Fiona", NOW)
    assert delta == 1
    assert fields["closingReason"] == "feature backlog"
    assert fields["closingNote"] is None
    assert entity.closing_reason == ClosingReason.FEATURE_BACKLOG
    assert entity.close("solved", None, "Fiona", NOW) == ({}, 0)

    fields, delta = entity.reopen(NOW)
    assert delta == -1
    assert fields["closedAt"] is None
    assert entity.reopen(NOW) == ({}, 0)


def test_sanitize_input_strips_markup() -> None:
    assert sanitize_input("  <script>x</script>Hello <b>there</b> ") == "Hello there"
    assert sanitize_input(None) == ""
