"""Document store client (Firestore REST, or in-memory for development).

Initialized at app startup. The firestore backend uses either
FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH
(file path); the memory backend needs no configuration.
"""

import json
import logging
from pathlib import Path

from helpfromfounder.core.config import get_settings
from helpfromfounder.infrastructure.firebase._memory_client import InMemoryFirestoreClient
from helpfromfounder.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)

DocumentClient = FirestoreRESTClient | InMemoryFirestoreClient

_firestore_client: DocumentClient | None = None


def load_service_account() -> dict | None:
    """Return service account dict from env key or file path."""
    settings = get_settings()
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def init_firebase() -> bool:
    """Initialize the document client for the configured backend.

    Idempotent if already initialized. On invalid/malformed credentials
    logs the exception and returns False; routes that need the store then
    answer 503.

    Returns:
        True if a client is available, False otherwise.
    """
    global _firestore_client
    if _firestore_client is not None:
        return True
    settings = get_settings()
    if settings.database_backend == "memory":
        _firestore_client = InMemoryFirestoreClient()
        logger.warning("Using in-memory document store; data is lost on restart")
        return True
    try:
        key_dict = load_service_account()
        if not key_dict:
            return False

        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return False

        cred = _get_credentials(key_dict)
        _firestore_client = FirestoreRESTClient(project_id, cred)
        return True
    except Exception:
        logger.exception("Firebase initialization failed")
        return False


def get_firestore_client() -> DocumentClient | None:
    """Return the document client, or None if not configured.

    Both backends support (all async):
    - await db.collection(name).document(id).set(data) / .update(data) / .get() / .delete()
    - db.collection(name).where(...).where(...).order_by(...).limit(n).stream()
    - batch = db.batch(); batch.update(ref, {"count": Increment(1)}); await batch.commit()
    """
    return _firestore_client


async def close_firebase() -> None:
    """Close the client's HTTP connection pool. Call from app shutdown."""
    global _firestore_client
    if _firestore_client is not None:
        await _firestore_client.aclose()
        _firestore_client = None
        logger.info("Document store client closed")
