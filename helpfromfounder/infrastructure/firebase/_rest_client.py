"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Keeps the deployment small (avoids grpcio / firebase-admin).
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Multi-document writes go through WriteBatch, which is a single atomic
documents:commit call.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx

from helpfromfounder.infrastructure.firebase._common import (
    DocumentExistsError,
    DocumentNotFoundError,
    FirestoreRequestError,
    split_transforms,
)
from helpfromfounder.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_fields,
    encode_document,
    encode_fields,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    *,
    not_found_ok: bool = True,
) -> Any:
    """Perform async HTTP request to Firestore REST API.

    404 returns None unless not_found_ok is False (then DocumentNotFoundError).
    409 raises DocumentExistsError; other failures raise FirestoreRequestError.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        resp = await client.request(method, url, headers=headers, json=body)
    except httpx.HTTPError as e:
        raise FirestoreRequestError(f"Firestore request failed: {e}") from e
    if resp.status_code == 404:
        if not_found_ok:
            return None
        raise DocumentNotFoundError(resp.text)
    if resp.status_code == 409:
        raise DocumentExistsError("Document already exists")
    if resp.status_code not in (200, 204):
        raise FirestoreRequestError(
            f"Firestore returned {resp.status_code}: {resp.text[:500]}"
        )
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


def _snapshot_from_document(doc: dict) -> DocumentSnapshot:
    name = doc.get("name", "")
    doc_id = name.split("/")[-1] if name else ""
    return DocumentSnapshot(doc_id, decode_fields(doc.get("fields")))


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    @property
    def path(self) -> str:
        return self._path

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH with full replace)."""
        url = f"{_BASE}/{self._path}"
        await _request_async(
            self._client._http,
            url,
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    async def update(self, data: dict[str, Any]) -> None:
        """Update only the given fields; Increment values are applied atomically.

        Raises DocumentNotFoundError if the document does not exist.
        """
        batch = self._client.batch()
        batch.update(self, data)
        await batch.commit()

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        url = f"{_BASE}/{self._path}"
        out = await _request_async(
            self._client._http, url, access_token=await self._client.get_token()
        )
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_fields(out.get("fields")))

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        url = f"{_BASE}/{self._path}"
        await _request_async(
            self._client._http,
            url,
            method="DELETE",
            access_token=await self._client.get_token(),
        )


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains": "ARRAY_CONTAINS",
}


class _Query:
    """Fluent query builder for a collection; runs via runQuery (filters ANDed on server)."""

    def __init__(
        self,
        client: FirestoreRESTClient,
        parent: str,
        collection_id: str,
    ):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[tuple[str, str, Any]] = []
        self._order_by_field: str | None = None
        self._order_direction: str = "ASCENDING"
        self._offset: int = 0
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> _Query:
        self._filters.append((field, _OP_MAP.get(op, op), value))
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        self._order_by_field = field
        self._order_direction = direction
        return self

    def offset(self, n: int) -> _Query:
        self._offset = n
        return self

    def limit(self, n: int) -> _Query:
        self._limit = n
        return self

    def _where_clause(self) -> dict | None:
        field_filters = [
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": op,
                    "value": _encode_value(value),
                }
            }
            for field, op, value in self._filters
        ]
        if not field_filters:
            return None
        if len(field_filters) == 1:
            return field_filters[0]
        return {"compositeFilter": {"op": "AND", "filters": field_filters}}

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        where = self._where_clause()
        if where is not None:
            structured["where"] = where
        if self._order_by_field is not None:
            structured["orderBy"] = [
                {
                    "field": {"fieldPath": self._order_by_field},
                    "direction": self._order_direction,
                }
            ]
        if self._offset:
            structured["offset"] = self._offset
        if self._limit:
            structured["limit"] = self._limit

        url = f"{_BASE}/{self._parent}:runQuery"
        resp = await _request_async(
            self._client._http,
            url,
            method="POST",
            body={"structuredQuery": structured},
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            yield _snapshot_from_document(item["document"])


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (fail with DocumentExistsError if it exists)."""
        url = f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}"
        await _request_async(
            self._client._http,
            url,
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    def _query(self) -> _Query:
        parent = self._path.rsplit("/", 1)[0]
        collection_id = self._path.split("/")[-1]
        return _Query(self._client, parent, collection_id)

    def where(self, field: str, op: str, value: Any) -> _Query:
        """Start a query with a filter. Chain .where(), .order_by(), .limit(), then .stream()."""
        return self._query().where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        return self._query().order_by(field, direction)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List all documents in the collection, following page tokens."""
        page_token: str | None = None
        while True:
            url = f"{_BASE}/{self._path}?pageSize=300"
            if page_token:
                url += f"&pageToken={quote(page_token, safe='')}"
            out = await _request_async(
                self._client._http, url, access_token=await self._client.get_token()
            )
            if not out:
                return
            for doc in out.get("documents", []):
                yield _snapshot_from_document(doc)
            page_token = out.get("nextPageToken")
            if not page_token:
                return


class WriteBatch:
    """Atomic group of writes committed with one documents:commit call."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._writes: list[dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._writes)

    def set(self, ref: DocumentReference, data: dict[str, Any]) -> WriteBatch:
        self._writes.append(
            {"update": {"name": ref.path, "fields": encode_fields(data)}}
        )
        return self

    def create(self, ref: DocumentReference, data: dict[str, Any]) -> WriteBatch:
        self._writes.append(
            {
                "update": {"name": ref.path, "fields": encode_fields(data)},
                "currentDocument": {"exists": False},
            }
        )
        return self

    def update(self, ref: DocumentReference, data: dict[str, Any]) -> WriteBatch:
        plain, increments = split_transforms(data)
        write: dict[str, Any] = {
            "update": {"name": ref.path, "fields": encode_fields(plain)},
            "updateMask": {"fieldPaths": list(plain)},
            "currentDocument": {"exists": True},
        }
        if increments:
            write["updateTransforms"] = [
                {"fieldPath": field, "increment": _encode_value(amount)}
                for field, amount in increments.items()
            ]
        self._writes.append(write)
        return self

    def delete(self, ref: DocumentReference) -> WriteBatch:
        self._writes.append({"delete": ref.path})
        return self

    async def commit(self) -> None:
        """Apply all writes atomically. No-op for an empty batch."""
        if not self._writes:
            return
        url = f"{_BASE}/{self._client.database_path}/documents:commit"
        await _request_async(
            self._client._http,
            url,
            method="POST",
            body={"writes": self._writes},
            access_token=await self._client.get_token(),
            not_found_ok=False,
        )
        self._writes = []


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self.database_path = f"projects/{project_id}/databases/(default)"
        self._prefix = f"{self.database_path}/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")

    def batch(self) -> WriteBatch:
        return WriteBatch(self)
