"""Thread API: list/create per project, read, status changes, delete, participants."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from helpfromfounder.api.v1.dependencies import IdentityDep, get_lifecycle_service
from helpfromfounder.application.services import ThreadLifecycleService
from helpfromfounder.domain.enums import ThreadStatus
from helpfromfounder.schemas.thread import (
    ParticipantResponse,
    ThreadCreateRequest,
    ThreadResponse,
    ThreadStatusRequest,
)

router = APIRouter()

LifecycleDep = Annotated[ThreadLifecycleService, Depends(get_lifecycle_service)]


@router.get("/projects/{project_id}/threads", response_model=list[ThreadResponse])
async def list_threads(
    project_id: str,
    lifecycle: LifecycleDep,
    status: ThreadStatus | None = Query(default=None),
    tag: str | None = Query(default=None),
):
    """Threads of a project, newest first; filter by status and tag."""
    threads = await lifecycle.list_threads(project_id, status=status, tag=tag)
    return [ThreadResponse.model_validate(t) for t in threads]


@router.post("/projects/{project_id}/threads", response_model=ThreadResponse, status_code=201)
async def create_thread(
    project_id: str,
    body: ThreadCreateRequest,
    identity: IdentityDep,
    lifecycle: LifecycleDep,
):
    """Open a thread (anonymous or signed-in) and notify the founder."""
    thread = await lifecycle.create_thread(
        project_id, body.content, identity, title=body.title, tag=body.tag
    )
    return ThreadResponse.model_validate(thread)


@router.get("/threads/{thread_id}", response_model=ThreadResponse)
async def get_thread(thread_id: str, lifecycle: LifecycleDep):
    return ThreadResponse.model_validate(await lifecycle.get_thread(thread_id))


@router.patch("/threads/{thread_id}/status", response_model=ThreadResponse)
async def update_thread_status(
    thread_id: str,
    body: ThreadStatusRequest,
    identity: IdentityDep,
    lifecycle: LifecycleDep,
):
    """Close (with a reason) or reopen a thread. Project owner only."""
    thread = await lifecycle.update_thread_status(
        thread_id,
        body.status,
        identity,
        reason=body.closing_reason,
        note=body.closing_note,
    )
    return ThreadResponse.model_validate(thread)


@router.delete("/threads/{thread_id}", status_code=204)
async def delete_thread(thread_id: str, identity: IdentityDep, lifecycle: LifecycleDep):
    """Delete a thread and its responses (author or project owner)."""
    await lifecycle.delete_thread(thread_id, identity)
    return Response(status_code=204)


@router.get("/threads/{thread_id}/participants", response_model=list[ParticipantResponse])
async def get_participants(thread_id: str, identity: IdentityDep, lifecycle: LifecycleDep):
    """Users who would be notified about new activity, excluding the caller."""
    await lifecycle.get_thread(thread_id)
    participants = await lifecycle.get_thread_participants(thread_id, identity.user_id)
    return [ParticipantResponse.model_validate(p) for p in participants]
