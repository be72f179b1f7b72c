"""Errors and write sentinels shared by the REST and in-memory document clients."""

from __future__ import annotations

from typing import Any

from helpfromfounder.domain.exceptions import DocumentStoreError


class FirestoreError(DocumentStoreError):
    """Base class for document client failures."""


class DocumentExistsError(FirestoreError):
    """Raised when a create targets an ID that already exists."""


class DocumentNotFoundError(FirestoreError):
    """Raised when an update targets a missing document."""


class FirestoreRequestError(FirestoreError):
    """Raised when the document store rejects a request or is unreachable."""


class Increment:
    """Atomic numeric increment, usable as a value in update() and batch writes.

    Missing fields are treated as 0 before the increment is applied.
    """

    def __init__(self, value: int) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Increment({self.value})"


def split_transforms(data: dict[str, Any]) -> tuple[dict[str, Any], dict[str, int]]:
    """Separate plain field values from Increment transforms."""
    plain: dict[str, Any] = {}
    increments: dict[str, int] = {}
    for key, value in data.items():
        if isinstance(value, Increment):
            increments[key] = value.value
        else:
            plain[key] = value
    return plain, increments
