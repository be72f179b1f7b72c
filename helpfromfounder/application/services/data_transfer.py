"""Move an anonymous visitor's threads and responses to their new account."""

from __future__ import annotations

import logging

from helpfromfounder.application.dtos.thread import TransferResult
from helpfromfounder.application.interfaces.repositories import (
    IResponseRepository,
    IThreadRepository,
)
from helpfromfounder.application.services.store_errors import MAX_BATCH_WRITES
from helpfromfounder.domain.exceptions import DocumentStoreError
from helpfromfounder.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class AnonymousDataTransferService:
    def __init__(self, threads: IThreadRepository, responses: IResponseRepository) -> None:
        self._threads = threads
        self._responses = responses

    @traced("data_transfer.transfer_anonymous_user_data")
    async def transfer_anonymous_user_data(
        self, new_user_id: str, anonymous_id: str | None
    ) -> TransferResult:
        """Set authorId=new_user_id and clear anonymousId on every matching document.

        Up to 500 documents are rewritten in one atomic commit; larger sets
        are committed in consecutive batches. Store failures are reported in
        the result, not raised (sign-in must not fail because of them).
        """
        if not anonymous_id:
            return TransferResult(success=True, message="No anonymous data to transfer")
        try:
            thread_ids = await self._threads.list_ids_by_anonymous_id(anonymous_id)
            response_ids = await self._responses.list_ids_by_anonymous_id(anonymous_id)
            writes = [("thread", doc_id) for doc_id in thread_ids]
            writes += [("response", doc_id) for doc_id in response_ids]
            if not writes:
                return TransferResult(success=True, message="No anonymous data found to transfer")

            fields = {"authorId": new_user_id, "anonymousId": None}
            for start in range(0, len(writes), MAX_BATCH_WRITES):
                batch = self._threads.new_batch()
                for kind, doc_id in writes[start:start + MAX_BATCH_WRITES]:
                    if kind == "thread":
                        self._threads.stage_update(batch, doc_id, fields)
                    else:
                        self._responses.stage_update(batch, doc_id, fields)
                await batch.commit()
        except DocumentStoreError as e:
            logger.exception("Error transferring anonymous user data")
            return TransferResult(success=False, message=str(e) or "Unknown error during data transfer")

        count = len(writes)
        logger.info("Transferred %d anonymous items to user %s", count, new_user_id)
        return TransferResult(
            success=True,
            message=f"Successfully transferred {count} items to your account",
            transferred=count,
        )
