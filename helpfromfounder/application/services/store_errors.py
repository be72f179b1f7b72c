"""Translate document store failures into user-facing errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from helpfromfounder.domain.exceptions import DocumentStoreError

logger = logging.getLogger(__name__)

# Firestore accepts at most 500 writes per commit
MAX_BATCH_WRITES = 500


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Re-raise DocumentStoreError with `message`, keeping the cause in details."""
    try:
        yield
    except DocumentStoreError as e:
        logger.error("%s (%s)", message, e)
        raise DocumentStoreError(message, reason=str(e)) from e
