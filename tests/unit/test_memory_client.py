"""Tests for the in-memory document client (queries, increments, atomic batches)."""

import pytest

from helpfromfounder.infrastructure.firebase import (
    DocumentExistsError,
    DocumentNotFoundError,
    Increment,
)
from helpfromfounder.infrastructure.firebase._memory_client import InMemoryFirestoreClient


async def test_increment_treats_missing_field_as_zero(store: InMemoryFirestoreClient) -> None:
    ref = store.collection("projects").document("p1")
    await ref.set({"name": "Acme"})
    batch = store.batch()
    batch.update(ref, {"totalIssues": Increment(2), "closedIssues": Increment(-1)})
    await batch.commit()
    data = (await ref.get()).to_dict()
    assert data == {"name": "Acme", "totalIssues": 2, "closedIssues": -1}


async def test_failed_batch_applies_nothing(store: InMemoryFirestoreClient) -> None:
    coll = store.collection("threads")
    await coll.create("t1", {"responseCount": 0})
    batch = store.batch()
    batch.update(coll.document("t1"), {"responseCount": Increment(1)})
    batch.create(coll.document("t2"), {"responseCount": 0})
    batch.update(coll.document("missing"), {"x": 1})
    with pytest.raises(DocumentNotFoundError):
        await batch.commit()
    assert (await coll.document("t1").get()).to_dict()["responseCount"] == 0
    assert await coll.document("t2").get() is None


async def test_create_on_existing_id_fails(store: InMemoryFirestoreClient) -> None:
    coll = store.collection("responses")
    await coll.create("r1", {"content": "a"})
    with pytest.raises(DocumentExistsError):
        await coll.create("r1", {"content": "b"})


async def test_query_filters_orders_and_limits(store: InMemoryFirestoreClient) -> None:
    coll = store.collection("threads")
    for i, status in enumerate(["open", "closed", "open", "open"]):
        await coll.document(f"t{i}").set({"status": status, "createdAt": i})
    query = coll.where("status", "==", "open").order_by("createdAt", "DESCENDING").limit(2)
    assert [s.id async for s in query.stream()] == ["t3", "t2"]


async def test_snapshots_are_copies(store: InMemoryFirestoreClient) -> None:
    ref = store.collection("users").document("u1")
    await ref.set({"tags": ["a"]})
    snapshot = await ref.get()
    snapshot.to_dict()["tags"].append("b")
    assert (await ref.get()).to_dict() == {"tags": ["a"]}
