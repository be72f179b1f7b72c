"""User profiles: public reads and owner-only edits."""

from __future__ import annotations

import logging
from typing import Any

from helpfromfounder.application.dtos.user import UserResult
from helpfromfounder.application.interfaces.repositories import IUserRepository
from helpfromfounder.application.services.access_policy import AccessPolicy
from helpfromfounder.application.services.store_errors import store_errors
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.exceptions import ResourceNotFoundException, ValidationException
from helpfromfounder.shared.utils.sanitization import sanitize_input

logger = logging.getLogger(__name__)

EDITABLE_PROFILE_FIELDS = frozenset(
    {"display_name", "photo_url", "twitter_url", "linkedin_url", "github_url"}
)


class UserService:
    def __init__(self, users: IUserRepository, policy: AccessPolicy) -> None:
        self._users = users
        self._policy = policy

    async def get_user(self, user_id: str) -> UserResult:
        with store_errors("Failed to load user. Please try again."):
            user = await self._users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def update_profile(
        self, identity: Identity, user_id: str, changes: dict[str, Any]
    ) -> UserResult:
        """Apply profile edits to the caller's own user document."""
        self._policy.require_authenticated(identity, "You must be logged in to edit your profile")
        self._policy.require_user_update(identity, user_id)
        unknown = set(changes) - EDITABLE_PROFILE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown profile field: {sorted(unknown)[0]}", field=sorted(unknown)[0])
        clean = dict(changes)
        if "display_name" in clean:
            name = sanitize_input(clean["display_name"] or "")
            if not name:
                raise ValidationException("Display name is required", field="displayName")
            clean["display_name"] = name
        for key in ("photo_url", "twitter_url", "linkedin_url", "github_url"):
            if key in clean:
                clean[key] = (clean[key] or "").strip() or None

        await self.get_user(user_id)
        with store_errors("Failed to update profile. Please try again."):
            updated = await self._users.update_profile(user_id, clean)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        logger.info("Updated profile for %s (%s)", user_id, ", ".join(sorted(clean)))
        return updated
