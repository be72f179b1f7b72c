"""Response API: list and post replies on a thread, delete a reply."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from helpfromfounder.api.v1.dependencies import IdentityDep, get_lifecycle_service
from helpfromfounder.application.services import ThreadLifecycleService
from helpfromfounder.schemas.thread import ResponseCreateRequest, ResponseResponse

router = APIRouter()

LifecycleDep = Annotated[ThreadLifecycleService, Depends(get_lifecycle_service)]


@router.get("/threads/{thread_id}/responses", response_model=list[ResponseResponse])
async def list_responses(thread_id: str, lifecycle: LifecycleDep):
    """Replies, oldest first."""
    await lifecycle.get_thread(thread_id)
    return [ResponseResponse.model_validate(r) for r in await lifecycle.list_responses(thread_id)]


@router.post("/threads/{thread_id}/responses", response_model=ResponseResponse, status_code=201)
async def create_response(
    thread_id: str,
    body: ResponseCreateRequest,
    identity: IdentityDep,
    lifecycle: LifecycleDep,
):
    """Reply to a thread and notify its participants."""
    response = await lifecycle.create_response(thread_id, body.content, identity)
    return ResponseResponse.model_validate(response)


@router.delete("/responses/{response_id}", status_code=204)
async def delete_response(response_id: str, identity: IdentityDep, lifecycle: LifecycleDep):
    """Delete a reply (author or project owner)."""
    await lifecycle.delete_response(response_id, identity)
    return Response(status_code=204)
