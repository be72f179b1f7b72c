"""Firestore integration: REST client, in-memory client, and repositories."""

from helpfromfounder.infrastructure.firebase._common import (
    DocumentExistsError,
    DocumentNotFoundError,
    FirestoreError,
    Increment,
)
from helpfromfounder.infrastructure.firebase.client import (
    DocumentClient,
    close_firebase,
    get_firestore_client,
    init_firebase,
)

__all__ = [
    "DocumentClient",
    "DocumentExistsError",
    "DocumentNotFoundError",
    "FirestoreError",
    "Increment",
    "close_firebase",
    "get_firestore_client",
    "init_firebase",
]
