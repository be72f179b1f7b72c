"""Thread and response API schemas."""

from datetime import datetime

from pydantic import Field

from helpfromfounder.domain.enums import ClosingReason, ThreadStatus
from helpfromfounder.schemas.common import CamelModel


class ThreadResponse(CamelModel):
    id: str
    project_id: str
    title: str
    content: str
    tag: str
    status: ThreadStatus
    author_name: str
    author_id: str | None = None
    anonymous_id: str | None = None
    closing_reason: ClosingReason | None = None
    closing_note: str | None = None
    closed_by: str | None = None
    response_count: int = 0
    is_public: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None


class ThreadCreateRequest(CamelModel):
    content: str
    title: str | None = None
    tag: str | None = None


class ThreadStatusRequest(CamelModel):
    status: ThreadStatus
    closing_reason: str | None = None
    closing_note: str | None = Field(default=None, max_length=2000)


class ResponseResponse(CamelModel):
    id: str
    thread_id: str
    content: str
    author_name: str
    author_id: str | None = None
    anonymous_id: str | None = None
    is_founder: bool = False
    created_at: datetime | None = None


class ResponseCreateRequest(CamelModel):
    content: str


class ParticipantResponse(CamelModel):
    email: str
    name: str
