"""Firestore-backed response repository (implements IResponseRepository)."""

from __future__ import annotations

from typing import Any

from helpfromfounder.application.dtos.thread import ResponseResult
from helpfromfounder.infrastructure.firebase.client import DocumentClient
from helpfromfounder.infrastructure.firebase.collections import COLLECTION_RESPONSES
from helpfromfounder.shared.utils.datetime import parse_datetime


def _created_key(response: ResponseResult) -> float:
    return response.created_at.timestamp() if response.created_at else 0.0


class FirestoreResponseRepository:
    """Response documents (responses/{id}), linked to a thread by threadId."""

    def __init__(self, client: DocumentClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_RESPONSES)

    def _to_result(self, doc_id: str, data: dict) -> ResponseResult:
        return ResponseResult(
            id=doc_id,
            thread_id=data.get("threadId", ""),
            content=data.get("content", ""),
            author_name=data.get("authorName") or "Anonymous",
            author_id=data.get("authorId") or None,
            anonymous_id=data.get("anonymousId") or None,
            is_founder=bool(data.get("isFounder", False)),
            created_at=parse_datetime(data.get("createdAt")),
        )

    def new_batch(self):
        return self._client.batch()

    async def get_by_id(self, response_id: str) -> ResponseResult | None:
        doc = await self._coll.document(response_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def list_by_thread(self, thread_id: str) -> list[ResponseResult]:
        """Return responses of a thread, oldest first."""
        q = self._coll.where("threadId", "==", thread_id)
        responses = [self._to_result(s.id, s.to_dict()) async for s in q.stream()]
        return sorted(responses, key=_created_key)

    async def list_recent_by_thread(self, thread_id: str, limit: int) -> list[ResponseResult]:
        """Return the newest responses of a thread, newest first."""
        responses = await self.list_by_thread(thread_id)
        return list(reversed(responses))[:limit]

    async def get_latest_by_thread(self, thread_id: str) -> ResponseResult | None:
        recent = await self.list_recent_by_thread(thread_id, 1)
        return recent[0] if recent else None

    async def list_ids_by_thread(self, thread_id: str) -> list[str]:
        q = self._coll.where("threadId", "==", thread_id)
        return [s.id async for s in q.stream()]

    async def list_ids_by_anonymous_id(self, anonymous_id: str) -> list[str]:
        q = self._coll.where("anonymousId", "==", anonymous_id)
        return [s.id async for s in q.stream()]

    def stage_create(self, batch, response_id: str, data: dict[str, Any]) -> None:
        batch.create(self._coll.document(response_id), data)

    def stage_update(self, batch, response_id: str, fields: dict[str, Any]) -> None:
        batch.update(self._coll.document(response_id), fields)

    def stage_delete(self, batch, response_id: str) -> None:
        batch.delete(self._coll.document(response_id))
