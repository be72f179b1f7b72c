"""In-process document client with the same surface as FirestoreRESTClient.

Selected with DATABASE_BACKEND=memory for local development and tests.
Batches validate every precondition before applying any write, so a
failed commit leaves the store untouched.
"""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from typing import Any

from helpfromfounder.infrastructure.firebase._common import (
    DocumentExistsError,
    DocumentNotFoundError,
    split_transforms,
)
from helpfromfounder.infrastructure.firebase._rest_client import DocumentSnapshot

_Store = dict[str, dict[str, dict[str, Any]]]


def _matches(data: dict[str, Any], field: str, op: str, value: Any) -> bool:
    if op == "==":
        return data.get(field) == value
    if op == "!=":
        return field in data and data[field] != value
    if op == "in":
        return data.get(field) in value
    if op == "not-in":
        return field in data and data[field] not in value
    if op in ("array-contains", "array_contains"):
        return value in (data.get(field) or [])
    current = data.get(field)
    if current is None:
        return False
    if op == "<":
        return current < value
    if op == "<=":
        return current <= value
    if op == ">":
        return current > value
    if op == ">=":
        return current >= value
    raise ValueError(f"Unsupported operator: {op!r}")


class InMemoryDocumentReference:
    def __init__(self, client: InMemoryFirestoreClient, collection_id: str, document_id: str):
        self._client = client
        self._collection_id = collection_id
        self.id = document_id

    @property
    def path(self) -> str:
        return f"{self._collection_id}/{self.id}"

    async def set(self, data: dict[str, Any]) -> None:
        self._client._collection(self._collection_id)[self.id] = copy.deepcopy(data)

    async def update(self, data: dict[str, Any]) -> None:
        batch = self._client.batch()
        batch.update(self, data)
        await batch.commit()

    async def get(self) -> DocumentSnapshot | None:
        data = self._client._collection(self._collection_id).get(self.id)
        if data is None:
            return None
        return DocumentSnapshot(self.id, copy.deepcopy(data))

    async def delete(self) -> None:
        self._client._collection(self._collection_id).pop(self.id, None)


class _InMemoryQuery:
    def __init__(self, client: InMemoryFirestoreClient, collection_id: str):
        self._client = client
        self._collection_id = collection_id
        self._filters: list[tuple[str, str, Any]] = []
        self._order_by_field: str | None = None
        self._descending = False
        self._offset = 0
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> _InMemoryQuery:
        self._filters.append((field, op, value))
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> _InMemoryQuery:
        self._order_by_field = field
        self._descending = direction == "DESCENDING"
        return self

    def offset(self, n: int) -> _InMemoryQuery:
        self._offset = n
        return self

    def limit(self, n: int) -> _InMemoryQuery:
        self._limit = n
        return self

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        docs = [
            (doc_id, data)
            for doc_id, data in self._client._collection(self._collection_id).items()
            if all(_matches(data, f, op, v) for f, op, v in self._filters)
        ]
        if self._order_by_field is not None:
            field = self._order_by_field
            # Firestore omits documents that lack the ordering field
            docs = [d for d in docs if d[1].get(field) is not None]
            docs.sort(key=lambda d: (d[1][field], d[0]), reverse=self._descending)
        else:
            docs.sort(key=lambda d: d[0])
        docs = docs[self._offset:]
        if self._limit:
            docs = docs[: self._limit]
        for doc_id, data in docs:
            yield DocumentSnapshot(doc_id, copy.deepcopy(data))


class InMemoryCollectionReference:
    def __init__(self, client: InMemoryFirestoreClient, collection_id: str):
        self._client = client
        self._collection_id = collection_id

    def document(self, document_id: str) -> InMemoryDocumentReference:
        return InMemoryDocumentReference(self._client, self._collection_id, document_id)

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        batch = self._client.batch()
        batch.create(self.document(document_id), data)
        await batch.commit()

    def where(self, field: str, op: str, value: Any) -> _InMemoryQuery:
        return _InMemoryQuery(self._client, self._collection_id).where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> _InMemoryQuery:
        return _InMemoryQuery(self._client, self._collection_id).order_by(field, direction)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        async for snapshot in _InMemoryQuery(self._client, self._collection_id).stream():
            yield snapshot


class InMemoryWriteBatch:
    def __init__(self, client: InMemoryFirestoreClient) -> None:
        self._client = client
        self._writes: list[tuple[str, InMemoryDocumentReference, dict[str, Any] | None]] = []

    def __len__(self) -> int:
        return len(self._writes)

    def set(self, ref: InMemoryDocumentReference, data: dict[str, Any]) -> InMemoryWriteBatch:
        self._writes.append(("set", ref, copy.deepcopy(data)))
        return self

    def create(self, ref: InMemoryDocumentReference, data: dict[str, Any]) -> InMemoryWriteBatch:
        self._writes.append(("create", ref, copy.deepcopy(data)))
        return self

    def update(self, ref: InMemoryDocumentReference, data: dict[str, Any]) -> InMemoryWriteBatch:
        self._writes.append(("update", ref, dict(data)))
        return self

    def delete(self, ref: InMemoryDocumentReference) -> InMemoryWriteBatch:
        self._writes.append(("delete", ref, None))
        return self

    def _check_preconditions(self) -> None:
        exists: dict[str, bool] = {}
        for kind, ref, _ in self._writes:
            present = exists.get(
                ref.path, ref.id in self._client._collection(ref._collection_id)
            )
            if kind == "create" and present:
                raise DocumentExistsError(f"Document already exists: {ref.path}")
            if kind == "update" and not present:
                raise DocumentNotFoundError(f"No document to update: {ref.path}")
            exists[ref.path] = kind != "delete"

    async def commit(self) -> None:
        self._check_preconditions()
        for kind, ref, data in self._writes:
            coll = self._client._collection(ref._collection_id)
            if kind in ("set", "create"):
                coll[ref.id] = data
            elif kind == "update":
                plain, increments = split_transforms(data)
                doc = coll[ref.id]
                doc.update(copy.deepcopy(plain))
                for field, amount in increments.items():
                    doc[field] = (doc.get(field) or 0) + amount
            else:
                coll.pop(ref.id, None)
        self._writes = []


class InMemoryFirestoreClient:
    """Dict-backed document store; one instance per process (or per test)."""

    def __init__(self) -> None:
        self._data: _Store = {}

    def _collection(self, collection_id: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(collection_id, {})

    def collection(self, collection_id: str) -> InMemoryCollectionReference:
        return InMemoryCollectionReference(self, collection_id)

    def batch(self) -> InMemoryWriteBatch:
        return InMemoryWriteBatch(self)

    async def aclose(self) -> None:
        self._data.clear()
