"""Sign-up, sign-in, and sign-out on top of the identity provider.

A successful sign-up (or the first sign-in of an account) writes the
users/{uid} document and moves the visitor's anonymous threads and
responses to the new account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from helpfromfounder.application.dtos.thread import TransferResult
from helpfromfounder.application.dtos.user import UserResult
from helpfromfounder.application.interfaces.repositories import IUserRepository
from helpfromfounder.application.interfaces.services import IIdentityProvider
from helpfromfounder.application.services.access_policy import AccessPolicy
from helpfromfounder.application.services.data_transfer import AnonymousDataTransferService
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.exceptions import DocumentStoreError, ValidationException
from helpfromfounder.shared.telemetry.tracing import traced
from helpfromfounder.shared.utils.sanitization import sanitize_input

if TYPE_CHECKING:
    from helpfromfounder.infrastructure.external.identity.firebase_auth import AuthSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    session: AuthSession
    user: UserResult | None
    transfer: TransferResult | None = None


class AuthService:
    def __init__(
        self,
        provider: IIdentityProvider,
        users: IUserRepository,
        transfer: AnonymousDataTransferService,
        policy: AccessPolicy,
    ) -> None:
        self._provider = provider
        self._users = users
        self._transfer = transfer
        self._policy = policy

    async def _transfer_anonymous(self, user_id: str, anonymous_id: str | None) -> TransferResult:
        result = await self._transfer.transfer_anonymous_user_data(user_id, anonymous_id)
        logger.info("Data transfer result for %s: %s", user_id, result.message)
        return result

    @traced("auth.sign_up")
    async def sign_up(
        self, email: str, password: str, display_name: str, anonymous_id: str | None = None
    ) -> AuthResult:
        display_name = sanitize_input(display_name or "")
        if not display_name:
            raise ValidationException("Display name is required", field="displayName")
        session = await self._provider.sign_up(email, password, display_name)
        user = None
        try:
            user = await self._users.create(session.user.uid, session.user.email or email, display_name)
        except DocumentStoreError:
            # The account exists at the provider; the profile is rewritten on next sign-in
            logger.exception("Error creating user document for %s", session.user.uid)
            return AuthResult(session=session, user=None)
        transfer = await self._transfer_anonymous(session.user.uid, anonymous_id)
        return AuthResult(session=session, user=user, transfer=transfer)

    @traced("auth.sign_in")
    async def sign_in(
        self, email: str, password: str, anonymous_id: str | None = None
    ) -> AuthResult:
        session = await self._provider.sign_in(email, password)
        try:
            user, created = await self._users.get_or_create(
                session.user.uid, session.user.email, session.user.display_name
            )
        except DocumentStoreError:
            # Authentication succeeded even though the profile could not be written
            logger.exception("Error loading user document for %s", session.user.uid)
            return AuthResult(session=session, user=None)
        if not created:
            return AuthResult(session=session, user=user)
        transfer = await self._transfer_anonymous(session.user.uid, anonymous_id)
        return AuthResult(session=session, user=user, transfer=transfer)

    async def sign_out(self, identity: Identity) -> None:
        user_id = self._policy.require_authenticated(identity, "You are not signed in")
        await self._provider.sign_out(user_id)

    async def send_password_reset(self, email: str) -> None:
        await self._provider.send_password_reset(email)

    async def resolve_token(self, token: str) -> Identity:
        """Verify a bearer ID token and return the authenticated Identity."""
        verified = await self._provider.verify_id_token(token)
        return Identity.authenticated(verified.uid, verified.display_name, verified.email)
