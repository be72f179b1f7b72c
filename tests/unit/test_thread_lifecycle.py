"""Tests for thread/response lifecycle: counters, closure, deletes, notifications."""

from datetime import UTC, datetime, timedelta

import pytest

from helpfromfounder.application.services import LifecycleOptions, ThreadLifecycleService
from helpfromfounder.application.services.store_errors import MAX_BATCH_WRITES
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.enums import ClosingReason, ThreadStatus
from helpfromfounder.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)

FOUNDER = Identity.authenticated("founder-uid", "Fiona Founder", "founder@example.com")
VISITOR = Identity.anonymous("12345678", "BraveOtter42")
MEMBER = Identity.authenticated("member-uid", "Max Member", "max@example.com")


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


@pytest.fixture
def lifecycle(repos, policy, notifier, task_runner, clock) -> ThreadLifecycleService:
    return ThreadLifecycleService(
        repos["projects"],
        repos["threads"],
        repos["responses"],
        repos["users"],
        policy,
        notifier,
        task_runner,
        LifecycleOptions(public_base_url="https://helpfromfounder.space"),
        clock=clock,
    )


@pytest.fixture
async def project_id(repos) -> str:
    await repos["users"].create("founder-uid", "founder@example.com", "Fiona Founder")
    await repos["users"].create("member-uid", "max@example.com", "Max Member")
    await repos["projects"].create("p1", {
        "name": "Acme",
        "slug": "acme",
        "description": "Widgets",
        "ownerId": "founder-uid",
        "ownerEmail": "founder@example.com",
        "totalIssues": 0,
        "closedIssues": 0,
    })
    return "p1"


async def test_create_thread_increments_total_and_notifies_owner(
    lifecycle, repos, project_id, notifier, task_runner
) -> None:
    thread = await lifecycle.create_thread(project_id, "Login fails", VISITOR, title="Login", tag="bug")
    await task_runner.drain()

    assert thread.status == ThreadStatus.OPEN
    assert thread.anonymous_id == "12345678"
    assert thread.author_name == "BraveOtter42"
    project = await repos["projects"].get_by_id(project_id)
    assert project.total_issues == 1
    assert project.closed_issues == 0

    [payload] = notifier.payloads
    assert payload["type"] == "new_issue"
    assert payload["recipients"] == [{"email": "founder@example.com", "name": "Project Owner"}]
    assert payload["issueUrl"] == f"https://helpfromfounder.space/acme/thread/{thread.id}"


async def test_create_thread_defaults_and_validation(lifecycle, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Help", VISITOR, title="  <i></i> ")
    assert thread.title == "Untitled Issue"
    assert thread.tag == "question"
    with pytest.raises(ValidationException, match="Please describe your issue"):
        await lifecycle.create_thread(project_id, "   ", VISITOR)
    with pytest.raises(ValidationException, match="Invalid tag"):
        await lifecycle.create_thread(project_id, "Help", VISITOR, tag="rant")
    with pytest.raises(ResourceNotFoundException):
        await lifecycle.create_thread("missing", "Help", VISITOR)


async def test_close_and_reopen_adjust_closed_counter(lifecycle, repos, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Bug", VISITOR)

    closed = await lifecycle.update_thread_status(thread.id, "closed", FOUNDER, reason="solved", note=" done ")
    assert closed.status == ThreadStatus.CLOSED
    assert closed.closing_reason == ClosingReason.SOLVED
    assert closed.closing_note == "done"
    assert closed.closed_by == "Fiona Founder"
    assert (await repos["projects"].get_by_id(project_id)).closed_issues == 1

    # Closing again is a no-op
    await lifecycle.update_thread_status(thread.id, "closed", FOUNDER, reason="other")
    assert (await repos["projects"].get_by_id(project_id)).closed_issues == 1

    reopened = await lifecycle.update_thread_status(thread.id, ThreadStatus.OPEN, FOUNDER)
    assert reopened.status == ThreadStatus.OPEN
    assert reopened.closing_reason is None
    assert reopened.closed_at is None
    assert (await repos["projects"].get_by_id(project_id)).closed_issues == 0


async def test_legacy_solved_count_carries_into_closed_counter(lifecycle, repos) -> None:
    await repos["users"].create("founder-uid", "founder@example.com", "Fiona Founder")
    await repos["projects"].create("legacy", {
        "name": "Old Acme",
        "slug": "old-acme",
        "description": "Predates closedIssues",
        "ownerId": "founder-uid",
        "totalIssues": 3,
        "solvedIssues": 3,
    })
    assert (await repos["projects"].get_by_id("legacy")).closed_issues == 3

    thread = await lifecycle.create_thread("legacy", "Still broken", VISITOR)
    await lifecycle.update_thread_status(thread.id, "closed", FOUNDER, reason="solved")
    project = await repos["projects"].get_by_id("legacy")
    assert project.closed_issues == 4
    assert project.closed_issues_stored

    await lifecycle.update_thread_status(thread.id, "open", FOUNDER)
    assert (await repos["projects"].get_by_id("legacy")).closed_issues == 3


async def test_only_owner_changes_status(lifecycle, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Bug", VISITOR)
    with pytest.raises(AuthorizationException):
        await lifecycle.update_thread_status(thread.id, "closed", MEMBER, reason="solved")
    with pytest.raises(AuthorizationException):
        await lifecycle.update_thread_status(thread.id, "closed", VISITOR, reason="solved")


async def test_close_requires_known_reason(lifecycle, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Bug", VISITOR)
    with pytest.raises(ValidationException, match="closing reason is required"):
        await lifecycle.update_thread_status(thread.id, "closed", FOUNDER)
    with pytest.raises(ValidationException, match="Invalid closing reason"):
        await lifecycle.update_thread_status(thread.id, "closed", FOUNDER, reason="bored")
    with pytest.raises(ValidationException, match="Invalid status"):
        await lifecycle.update_thread_status(thread.id, "resolved", FOUNDER)


async def test_responses_update_count_and_founder_flag(lifecycle, repos, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Bug", VISITOR)
    visitor_reply = await lifecycle.create_response(thread.id, "More detail", VISITOR)
    founder_reply = await lifecycle.create_response(thread.id, "On it", FOUNDER)

    assert visitor_reply.is_founder is False
    assert founder_reply.is_founder is True
    assert (await repos["threads"].get_by_id(thread.id)).response_count == 2

    await lifecycle.delete_response(visitor_reply.id, VISITOR)
    assert (await repos["threads"].get_by_id(thread.id)).response_count == 1
    with pytest.raises(AuthorizationException):
        await lifecycle.delete_response(founder_reply.id, MEMBER)


async def test_repeat_response_within_window_is_not_notified(
    lifecycle, project_id, notifier, task_runner, clock
) -> None:
    thread = await lifecycle.create_thread(project_id, "Bug", MEMBER)
    await lifecycle.create_response(thread.id, "First", FOUNDER)
    clock.advance(minutes=5)
    await lifecycle.create_response(thread.id, "Second", FOUNDER)
    clock.advance(hours=2)
    await lifecycle.create_response(thread.id, "Third", FOUNDER)
    await task_runner.drain()

    responses = [p for p in notifier.payloads if p["type"] == "new_response"]
    assert [p["responseContent"] for p in responses] == ["First", "Third"]
    assert responses[0]["recipients"] == [{"email": "max@example.com", "name": "Max Member"}]


async def test_participants_exclude_caller_and_anonymous(lifecycle, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Bug", MEMBER)
    await lifecycle.create_response(thread.id, "Me too", VISITOR)
    participants = await lifecycle.get_thread_participants(thread.id, exclude_user_id="member-uid")
    assert [p.email for p in participants] == ["founder@example.com"]
    everyone = await lifecycle.get_thread_participants(thread.id, exclude_user_id=None)
    assert {p.email for p in everyone} == {"founder@example.com", "max@example.com"}
    assert await lifecycle.get_thread_participants("missing", None) == []


async def test_delete_thread_removes_responses_and_counters(lifecycle, repos, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Bug", VISITOR)
    await lifecycle.create_response(thread.id, "Reply", FOUNDER)
    await lifecycle.update_thread_status(thread.id, "closed", FOUNDER, reason="solved")

    with pytest.raises(AuthorizationException):
        await lifecycle.delete_thread(thread.id, MEMBER)
    await lifecycle.delete_thread(thread.id, VISITOR)

    assert await repos["threads"].get_by_id(thread.id) is None
    assert await repos["responses"].list_ids_by_thread(thread.id) == []
    project = await repos["projects"].get_by_id(project_id)
    assert (project.total_issues, project.closed_issues) == (0, 0)


async def test_delete_thread_with_more_responses_than_one_batch(lifecycle, repos, project_id) -> None:
    thread = await lifecycle.create_thread(project_id, "Busy", VISITOR)
    batch = repos["responses"].new_batch()
    for i in range(MAX_BATCH_WRITES + 10):
        repos["responses"].stage_create(batch, f"r{i}", {"threadId": thread.id, "content": "x"})
    await batch.commit()

    await lifecycle.delete_thread(thread.id, FOUNDER)
    assert await repos["responses"].list_ids_by_thread(thread.id) == []
    assert (await repos["projects"].get_by_id(project_id)).total_issues == 0


async def test_no_notifier_skips_notifications(repos, policy, task_runner, project_id) -> None:
    lifecycle = ThreadLifecycleService(
        repos["projects"], repos["threads"], repos["responses"], repos["users"],
        policy, None, task_runner,
    )
    await lifecycle.create_thread(project_id, "Quiet", VISITOR)
    assert task_runner.pending == 0
