"""Firestore-backed user repository (implements IUserRepository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from helpfromfounder.application.dtos.user import UserResult
from helpfromfounder.infrastructure.firebase.client import DocumentClient
from helpfromfounder.infrastructure.firebase.collections import COLLECTION_USERS
from helpfromfounder.shared.utils.datetime import parse_datetime, utc_now

# Profile fields a user may change on their own document
_PROFILE_FIELDS = {
    "display_name": "displayName",
    "photo_url": "photoURL",
    "twitter_url": "twitterUrl",
    "linkedin_url": "linkedinUrl",
    "github_url": "githubUrl",
}


class FirestoreUserRepository:
    """User documents keyed by the identity provider uid."""

    def __init__(self, client: DocumentClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_USERS)

    def _to_result(self, doc_id: str, data: dict) -> UserResult:
        return UserResult(
            id=doc_id,
            email=data.get("email") or None,
            display_name=data.get("displayName") or None,
            photo_url=data.get("photoURL") or None,
            created_at=parse_datetime(data.get("createdAt")),
            last_seen=parse_datetime(data.get("lastSeen")),
            twitter_url=data.get("twitterUrl") or None,
            linkedin_url=data.get("linkedinUrl") or None,
            github_url=data.get("githubUrl") or None,
        )

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""
        doc = await self._coll.document(user_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def create(
        self,
        user_id: str,
        email: str | None,
        display_name: str | None,
        photo_url: str | None = None,
    ) -> UserResult:
        """Write the users/{uid} document (overwrites an existing one)."""
        now = utc_now()
        data = {
            "email": email,
            "displayName": display_name,
            "photoURL": photo_url,
            "createdAt": now,
        }
        await self._coll.document(user_id).set(data)
        return self._to_result(user_id, data)

    async def get_or_create(
        self,
        user_id: str,
        email: str | None,
        display_name: str | None,
        photo_url: str | None = None,
    ) -> tuple[UserResult, bool]:
        """Return (user, created); the document is written only on first sign-in."""
        existing = await self.get_by_id(user_id)
        if existing is not None:
            return existing, False
        return await self.create(user_id, email, display_name, photo_url), True

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> UserResult | None:
        """Apply profile changes (snake_case keys); unknown keys are ignored."""
        fields = {
            _PROFILE_FIELDS[key]: value
            for key, value in changes.items()
            if key in _PROFILE_FIELDS
        }
        if fields:
            await self._coll.document(user_id).update(fields)
        return await self.get_by_id(user_id)

    async def update_last_seen(self, user_id: str, when: datetime) -> None:
        await self._coll.document(user_id).update({"lastSeen": when})
