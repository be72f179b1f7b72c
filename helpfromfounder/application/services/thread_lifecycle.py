"""Thread/response lifecycle: creation, closure, deletion, and notifications.

Every mutation that touches more than one document (the thread plus its
project's counters, a response plus its thread's responseCount, a cascade
delete) is committed as one atomic batch with increment transforms.
Notifications run as detached tasks after the commit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from helpfromfounder.application.dtos.project import ProjectResult
from helpfromfounder.application.dtos.thread import Participant, ResponseResult, ThreadResult
from helpfromfounder.application.interfaces.repositories import (
    IProjectRepository,
    IResponseRepository,
    IThreadRepository,
    IUserRepository,
)
from helpfromfounder.application.interfaces.services import INotificationSender
from helpfromfounder.application.services.access_policy import AccessPolicy
from helpfromfounder.application.services.background_tasks import BackgroundTaskRunner
from helpfromfounder.application.services.store_errors import MAX_BATCH_WRITES, store_errors
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.entities.thread import ThreadEntity
from helpfromfounder.domain.enums import NotificationType, ThreadStatus, ThreadTag
from helpfromfounder.domain.exceptions import (
    DocumentStoreError,
    ResourceNotFoundException,
    ValidationException,
)
from helpfromfounder.shared.telemetry.tracing import traced
from helpfromfounder.shared.utils.datetime import utc_now
from helpfromfounder.shared.utils.generators import generate_cuid
from helpfromfounder.shared.utils.sanitization import sanitize_input

logger = logging.getLogger(__name__)

DEFAULT_THREAD_TITLE = "Untitled Issue"
DEFAULT_THREAD_TAG = ThreadTag.QUESTION
MAX_TITLE_LENGTH = 200

_EPOCH = datetime.fromtimestamp(0, tz=UTC)


@dataclass(frozen=True)
class LifecycleOptions:
    public_base_url: str = "http://localhost:3000"
    dedup_window: timedelta = timedelta(hours=1)
    participant_limit: int = 5


def author_name_for(identity: Identity) -> str:
    """Display name stored on new threads and responses."""
    if identity.is_authenticated:
        return identity.display_name or "Anonymous Founder"
    return identity.display_name or "Anonymous"


class ThreadLifecycleService:
    """Creates, closes, reopens, and deletes threads and responses."""

    def __init__(
        self,
        projects: IProjectRepository,
        threads: IThreadRepository,
        responses: IResponseRepository,
        users: IUserRepository,
        policy: AccessPolicy,
        notifier: INotificationSender | None,
        tasks: BackgroundTaskRunner,
        options: LifecycleOptions | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._projects = projects
        self._threads = threads
        self._responses = responses
        self._users = users
        self._policy = policy
        self._notifier = notifier
        self._tasks = tasks
        self._options = options or LifecycleOptions()
        self._clock = clock

    # Reads

    async def get_project(self, project_id: str) -> ProjectResult:
        with store_errors("Failed to load project. Please try again."):
            project = await self._projects.get_by_id(project_id)
        if project is None:
            raise ResourceNotFoundException("project", project_id)
        return project

    async def get_thread(self, thread_id: str) -> ThreadResult:
        with store_errors("Failed to load thread. Please try again."):
            thread = await self._threads.get_by_id(thread_id)
        if thread is None:
            raise ResourceNotFoundException("thread", thread_id)
        return thread

    async def list_threads(
        self,
        project_id: str,
        status: ThreadStatus | None = None,
        tag: str | None = None,
    ) -> list[ThreadResult]:
        """Threads of a project, newest first, optionally filtered."""
        with store_errors("Failed to load threads. Please try again."):
            threads = await self._threads.list_by_project(project_id)
        if status is not None:
            threads = [t for t in threads if t.status == status]
        if tag:
            threads = [t for t in threads if t.tag == tag]
        return threads

    async def list_responses(self, thread_id: str) -> list[ResponseResult]:
        """Responses of a thread, oldest first."""
        with store_errors("Failed to load responses. Please try again."):
            return await self._responses.list_by_thread(thread_id)

    # Threads

    @traced("thread_lifecycle.create_thread")
    async def create_thread(
        self,
        project_id: str,
        content: str,
        identity: Identity,
        title: str | None = None,
        tag: str | None = None,
    ) -> ThreadResult:
        """Write an open thread and increment the project's totalIssues."""
        if not content or not content.strip():
            raise ValidationException("Please describe your issue", field="content")
        tag_value = tag or DEFAULT_THREAD_TAG.value
        if tag_value not in ThreadTag.values():
            raise ValidationException(
                f"Invalid tag: {tag_value}. Must be one of: {', '.join(ThreadTag.values())}",
                field="tag",
            )
        clean_title = sanitize_input(title)[:MAX_TITLE_LENGTH] or DEFAULT_THREAD_TITLE
        project = await self.get_project(project_id)

        now = self._clock()
        thread_id = generate_cuid()
        author_name = author_name_for(identity)
        data: dict[str, Any] = {
            "projectId": project.id,
            "title": clean_title,
            "content": content,
            "status": ThreadStatus.OPEN.value,
            "createdAt": now,
            "updatedAt": now,
            "authorName": author_name,
            "authorId": identity.user_id,
            "anonymousId": identity.anonymous_id,
            "isPublic": True,
            "tag": tag_value,
            "responseCount": 0,
        }
        with store_errors("Failed to create thread. Please try again."):
            batch = self._threads.new_batch()
            self._threads.stage_create(batch, thread_id, data)
            self._projects.stage_counters(batch, project, total_delta=1)
            await batch.commit()
        logger.info("Thread %s created in project %s", thread_id, project.id)

        thread = ThreadResult(
            id=thread_id,
            project_id=project.id,
            title=clean_title,
            content=content,
            tag=tag_value,
            status=ThreadStatus.OPEN,
            author_name=author_name,
            author_id=identity.user_id,
            anonymous_id=identity.anonymous_id,
            response_count=0,
            is_public=True,
            created_at=now,
            updated_at=now,
        )
        self._schedule(self._notify_new_issue(project, thread), f"notify-new-issue-{thread_id}")
        return thread

    @traced("thread_lifecycle.update_thread_status")
    async def update_thread_status(
        self,
        thread_id: str,
        new_status: ThreadStatus | str,
        identity: Identity,
        reason: str | None = None,
        note: str | None = None,
    ) -> ThreadResult:
        """Close (with a reason) or reopen a thread; owner only.

        Adjusts the project's closedIssues in the same commit. Setting the
        current status again changes nothing.
        """
        try:
            target = ThreadStatus(new_status)
        except ValueError as e:
            raise ValidationException(
                f"Invalid status: {new_status}. Must be one of: {', '.join(ThreadStatus.values())}",
                field="status",
            ) from e
        thread = await self.get_thread(thread_id)
        project = await self.get_project(thread.project_id)
        self._policy.require_thread_status_change(identity, project)

        entity = ThreadEntity(
            id=thread.id,
            status=thread.status,
            closing_reason=thread.closing_reason,
            closing_note=thread.closing_note,
            closed_by=thread.closed_by,
            closed_at=thread.closed_at,
        )
        now = self._clock()
        if target == ThreadStatus.CLOSED:
            fields, closed_delta = entity.close(reason, note, identity.display_name or "Founder", now)
        else:
            fields, closed_delta = entity.reopen(now)
        if not fields:
            return thread

        with store_errors("Failed to update thread status. Please try again."):
            batch = self._threads.new_batch()
            self._threads.stage_update(batch, thread.id, fields)
            self._projects.stage_counters(batch, project, closed_delta=closed_delta)
            await batch.commit()
        logger.info("Thread %s is now %s", thread.id, target.value)
        return await self.get_thread(thread.id)

    @traced("thread_lifecycle.delete_thread")
    async def delete_thread(self, thread_id: str, identity: Identity) -> None:
        """Delete a thread and its responses; decrement the project's counters.

        Threads with more responses than fit in one commit delete the
        overflow responses first; the final commit always carries the thread
        delete and the counter changes together.
        """
        thread = await self.get_thread(thread_id)
        with store_errors("Failed to load project. Please try again."):
            project = await self._projects.get_by_id(thread.project_id)
        self._policy.require_thread_delete(identity, thread, project)

        with store_errors("Failed to delete thread. Please try again."):
            response_ids = await self._responses.list_ids_by_thread(thread.id)
            # Room in the final batch for the thread delete and the counter update
            final_capacity = MAX_BATCH_WRITES - 2
            overflow, final = (
                response_ids[:-final_capacity] if len(response_ids) > final_capacity else [],
                response_ids[-final_capacity:],
            )
            for start in range(0, len(overflow), MAX_BATCH_WRITES):
                batch = self._responses.new_batch()
                for response_id in overflow[start:start + MAX_BATCH_WRITES]:
                    self._responses.stage_delete(batch, response_id)
                await batch.commit()

            batch = self._threads.new_batch()
            for response_id in final:
                self._responses.stage_delete(batch, response_id)
            self._threads.stage_delete(batch, thread.id)
            if project is not None:
                self._projects.stage_counters(
                    batch,
                    project,
                    total_delta=-1,
                    closed_delta=-1 if thread.status == ThreadStatus.CLOSED else 0,
                )
            await batch.commit()
        logger.info("Thread %s deleted with %d responses", thread.id, len(response_ids))

    # Responses

    @traced("thread_lifecycle.create_response")
    async def create_response(
        self, thread_id: str, content: str, identity: Identity
    ) -> ResponseResult:
        """Write a response and increment the thread's responseCount.

        Notifies thread participants unless the previous response came from
        the same author within the dedup window.
        """
        if not content or not content.strip():
            raise ValidationException("Please enter a response", field="content")
        thread = await self.get_thread(thread_id)
        project = await self.get_project(thread.project_id)

        with store_errors("Failed to add response. Please try again."):
            previous = await self._responses.get_latest_by_thread(thread.id)

        now = self._clock()
        response_id = generate_cuid()
        is_founder = self._policy.is_project_owner(identity, project)
        author_name = author_name_for(identity)
        data: dict[str, Any] = {
            "threadId": thread.id,
            "content": content,
            "createdAt": now,
            "authorName": author_name,
            "authorId": identity.user_id,
            "anonymousId": identity.anonymous_id,
            "isFounder": is_founder,
        }
        with store_errors("Failed to add response. Please try again."):
            batch = self._responses.new_batch()
            self._responses.stage_create(batch, response_id, data)
            self._threads.stage_response_count(batch, thread.id, 1)
            await batch.commit()
        logger.info("Response %s added to thread %s", response_id, thread.id)

        response = ResponseResult(
            id=response_id,
            thread_id=thread.id,
            content=content,
            author_name=author_name,
            author_id=identity.user_id,
            anonymous_id=identity.anonymous_id,
            is_founder=is_founder,
            created_at=now,
        )
        if self._is_repeat_post(previous, identity, now):
            logger.info(
                "Skipping email notification for thread %s: same author responded within %s",
                thread.id,
                self._options.dedup_window,
            )
        else:
            self._schedule(
                self._notify_new_response(project, thread, response, identity),
                f"notify-new-response-{response_id}",
            )
        return response

    @traced("thread_lifecycle.delete_response")
    async def delete_response(self, response_id: str, identity: Identity) -> None:
        """Delete one response (author or project owner) and decrement responseCount."""
        with store_errors("Failed to load response. Please try again."):
            response = await self._responses.get_by_id(response_id)
        if response is None:
            raise ResourceNotFoundException("response", response_id)
        with store_errors("Failed to load thread. Please try again."):
            thread = await self._threads.get_by_id(response.thread_id)
            project = (
                await self._projects.get_by_id(thread.project_id) if thread else None
            )
        self._policy.require_response_delete(identity, response, project)

        with store_errors("Failed to delete response. Please try again."):
            batch = self._responses.new_batch()
            self._responses.stage_delete(batch, response.id)
            if thread is not None:
                self._threads.stage_response_count(batch, thread.id, -1)
            await batch.commit()

    def _is_repeat_post(
        self, previous: ResponseResult | None, identity: Identity, now: datetime
    ) -> bool:
        if previous is None or previous.created_at is None:
            return False
        if not identity.is_author_of(previous.author_id, previous.anonymous_id):
            return False
        return now - previous.created_at < self._options.dedup_window

    # Participants and notifications

    async def get_thread_participants(
        self, thread_id: str, exclude_user_id: str | None
    ) -> list[Participant]:
        """Recipients for a thread: author, project owner, and recent responders.

        Only signed-in users with an email on their profile are included;
        the caller is excluded. Ordered newest activity first and capped at
        the participant limit. Store failures yield an empty list.
        """
        try:
            return await self._collect_participants(thread_id, exclude_user_id)
        except DocumentStoreError:
            logger.exception("Error getting thread participants for %s", thread_id)
            return []

    async def _collect_participants(
        self, thread_id: str, exclude_user_id: str | None
    ) -> list[Participant]:
        thread = await self._threads.get_by_id(thread_id)
        if thread is None:
            logger.error("Thread %s not found", thread_id)
            return []
        thread_time = thread.created_at or _EPOCH
        limit = self._options.participant_limit
        seen: set[str] = set()
        found: list[tuple[datetime, Participant]] = []

        async def consider(user_id: str | None, default_name: str, when: datetime) -> None:
            if not user_id or user_id == exclude_user_id or user_id in seen:
                return
            seen.add(user_id)
            user = await self._users.get_by_id(user_id)
            if user is not None and user.email:
                found.append((when, Participant(email=user.email, name=user.display_name or default_name)))

        await consider(thread.author_id, "Thread Author", thread_time)
        project = await self._projects.get_by_id(thread.project_id)
        if project is not None:
            await consider(project.owner_id, "Project Owner", thread_time)
        for response in await self._responses.list_recent_by_thread(thread.id, limit):
            await consider(response.author_id, "Thread Participant", response.created_at or _EPOCH)

        found.sort(key=lambda item: item[0], reverse=True)
        return [participant for _, participant in found[:limit]]

    def _thread_url(self, project: ProjectResult, thread_id: str) -> str:
        base = self._options.public_base_url.rstrip("/")
        return f"{base}/{project.slug}/thread/{thread_id}"

    def _schedule(self, coro, name: str) -> None:
        if self._notifier is None:
            coro.close()
            return
        self._tasks.fire_and_forget(coro, name=name)

    async def _owner_email(self, project: ProjectResult) -> str | None:
        if project.owner_email:
            return project.owner_email
        owner = await self._users.get_by_id(project.owner_id) if project.owner_id else None
        return owner.email if owner else None

    async def _notify_new_issue(self, project: ProjectResult, thread: ThreadResult) -> None:
        owner_email = await self._owner_email(project)
        if not owner_email:
            logger.warning("Owner email not available, skipping email notification")
            return
        await self._notifier.send({
            "type": NotificationType.NEW_ISSUE.value,
            "projectId": project.id,
            "projectName": project.name,
            "issueId": thread.id,
            "issueTitle": thread.title,
            "issueContent": thread.content,
            "recipients": [{"email": owner_email, "name": "Project Owner"}],
            "userName": thread.author_name,
            "createdAt": (thread.created_at or self._clock()).isoformat(),
            "issueUrl": self._thread_url(project, thread.id),
        })

    async def _notify_new_response(
        self,
        project: ProjectResult,
        thread: ThreadResult,
        response: ResponseResult,
        identity: Identity,
    ) -> None:
        participants = await self.get_thread_participants(thread.id, identity.user_id)
        if not participants:
            logger.info("No participants to notify for thread %s", thread.id)
            return
        await self._notifier.send({
            "type": NotificationType.NEW_RESPONSE.value,
            "projectId": project.id,
            "projectName": project.name,
            "issueId": thread.id,
            "issueTitle": thread.title,
            "responseContent": response.content,
            "responseAuthor": response.author_name,
            "recipients": [{"email": p.email, "name": p.name} for p in participants],
            "createdAt": (response.created_at or self._clock()).isoformat(),
            "issueUrl": self._thread_url(project, thread.id),
        })
