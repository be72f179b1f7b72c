"""Tests for moving anonymous threads and responses to a new account."""

from helpfromfounder.application.services import AnonymousDataTransferService
from helpfromfounder.application.services.store_errors import MAX_BATCH_WRITES
from helpfromfounder.domain.exceptions import DocumentStoreError


async def _seed(repos, anonymous_id: str, threads: int, responses: int) -> None:
    batch = repos["threads"].new_batch()
    for i in range(threads):
        repos["threads"].stage_create(batch, f"t{i}", {"projectId": "p1", "anonymousId": anonymous_id})
    for i in range(responses):
        repos["responses"].stage_create(batch, f"r{i}", {"threadId": "t0", "anonymousId": anonymous_id})
    await batch.commit()


async def test_transfer_rewrites_authorship(repos) -> None:
    await _seed(repos, "12345678", threads=2, responses=3)
    batch = repos["threads"].new_batch()
    repos["threads"].stage_create(batch, "other", {"projectId": "p1", "anonymousId": "87654321"})
    await batch.commit()
    service = AnonymousDataTransferService(repos["threads"], repos["responses"])

    result = await service.transfer_anonymous_user_data("uid-1", "12345678")

    assert result.success is True
    assert result.transferred == 5
    assert result.message == "Successfully transferred 5 items to your account"
    thread = await repos["threads"].get_by_id("t1")
    assert (thread.author_id, thread.anonymous_id) == ("uid-1", None)
    response = await repos["responses"].get_by_id("r2")
    assert (response.author_id, response.anonymous_id) == ("uid-1", None)
    untouched = await repos["threads"].get_by_id("other")
    assert untouched.anonymous_id == "87654321"


async def test_transfer_without_anonymous_id_or_data(repos) -> None:
    service = AnonymousDataTransferService(repos["threads"], repos["responses"])
    none = await service.transfer_anonymous_user_data("uid-1", None)
    assert (none.success, none.message) == (True, "No anonymous data to transfer")
    empty = await service.transfer_anonymous_user_data("uid-1", "12345678")
    assert (empty.success, empty.transferred) == (True, 0)
    assert empty.message == "No anonymous data found to transfer"


async def test_transfer_spans_multiple_batches(repos) -> None:
    await _seed(repos, "12345678", threads=MAX_BATCH_WRITES, responses=7)
    service = AnonymousDataTransferService(repos["threads"], repos["responses"])
    result = await service.transfer_anonymous_user_data("uid-1", "12345678")
    assert result.transferred == MAX_BATCH_WRITES + 7
    assert await repos["threads"].list_ids_by_anonymous_id("12345678") == []
    assert await repos["responses"].list_ids_by_anonymous_id("12345678") == []


class _FailingThreads:
    async def list_ids_by_anonymous_id(self, anonymous_id: str) -> list[str]:
        raise DocumentStoreError("store unavailable")


async def test_store_failure_is_reported_not_raised(repos) -> None:
    service = AnonymousDataTransferService(_FailingThreads(), repos["responses"])
    result = await service.transfer_anonymous_user_data("uid-1", "12345678")
    assert result.success is False
    assert result.message == "store unavailable"
