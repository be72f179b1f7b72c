"""Firestore-backed thread repository (implements IThreadRepository)."""

from __future__ import annotations

from typing import Any

from helpfromfounder.application.dtos.thread import ThreadResult
from helpfromfounder.domain.enums import ClosingReason, ThreadStatus
from helpfromfounder.infrastructure.firebase import Increment
from helpfromfounder.infrastructure.firebase.client import DocumentClient
from helpfromfounder.infrastructure.firebase.collections import COLLECTION_THREADS
from helpfromfounder.shared.utils.datetime import parse_datetime


def _closing_reason(data: dict) -> ClosingReason | None:
    raw = data.get("closingReason")
    if raw:
        try:
            return ClosingReason(raw)
        except ValueError:
            return ClosingReason.OTHER
    if data.get("status") == "resolved":
        return ClosingReason.SOLVED
    return None


class FirestoreThreadRepository:
    """Thread documents (threads/{id})."""

    def __init__(self, client: DocumentClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_THREADS)

    def _to_result(self, doc_id: str, data: dict) -> ThreadResult:
        return ThreadResult(
            id=doc_id,
            project_id=data.get("projectId", ""),
            title=data.get("title") or "Untitled Issue",
            content=data.get("content", ""),
            tag=data.get("tag") or "question",
            status=ThreadStatus.from_stored(data.get("status")),
            author_name=data.get("authorName") or "Anonymous",
            author_id=data.get("authorId") or None,
            anonymous_id=data.get("anonymousId") or None,
            closing_reason=_closing_reason(data),
            closing_note=data.get("closingNote") or None,
            closed_by=data.get("closedBy") or None,
            response_count=int(data.get("responseCount") or 0),
            is_public=data.get("isPublic", True),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
            closed_at=parse_datetime(data.get("closedAt")),
        )

    def new_batch(self):
        return self._client.batch()

    async def get_by_id(self, thread_id: str) -> ThreadResult | None:
        doc = await self._coll.document(thread_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def list_by_project(self, project_id: str) -> list[ThreadResult]:
        """Return all threads of a project, newest first."""
        q = self._coll.where("projectId", "==", project_id)
        threads = [self._to_result(s.id, s.to_dict()) async for s in q.stream()]
        return sorted(
            threads,
            key=lambda t: t.created_at.timestamp() if t.created_at else 0.0,
            reverse=True,
        )

    async def list_ids_by_anonymous_id(self, anonymous_id: str) -> list[str]:
        q = self._coll.where("anonymousId", "==", anonymous_id)
        return [s.id async for s in q.stream()]

    def stage_create(self, batch, thread_id: str, data: dict[str, Any]) -> None:
        batch.create(self._coll.document(thread_id), data)

    def stage_update(self, batch, thread_id: str, fields: dict[str, Any]) -> None:
        batch.update(self._coll.document(thread_id), fields)

    def stage_delete(self, batch, thread_id: str) -> None:
        batch.delete(self._coll.document(thread_id))

    def stage_response_count(self, batch, thread_id: str, delta: int) -> None:
        batch.update(self._coll.document(thread_id), {"responseCount": Increment(delta)})

    def stage_set_response_count(self, batch, thread_id: str, count: int) -> None:
        batch.update(self._coll.document(thread_id), {"responseCount": count})
