"""Service interfaces (ports) for the application layer.

Protocols define contracts for external collaborators: email provider,
notification transport, identity provider, presence store, and the
key-value store that holds the anonymous identity.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from helpfromfounder.application.dtos.notification import EmailMessage
    from helpfromfounder.infrastructure.external.identity.firebase_auth import (
        AuthenticatedUser,
        AuthSession,
    )


class IEmailSender(Protocol):
    """Outbound email provider (one message per call)."""

    async def send(self, message: EmailMessage) -> None:
        """Send one email. Raises on any provider failure."""


class INotificationSender(Protocol):
    """Caller-side notification transport (in-process dispatcher or HTTP)."""

    async def send(self, payload: dict[str, Any]) -> None:
        """Deliver a dispatcher payload. Raises on failure; callers log and ignore."""


class IIdentityProvider(Protocol):
    """Email/password identity provider."""

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthSession: ...

    async def sign_in(self, email: str, password: str) -> AuthSession: ...

    async def sign_out(self, user_id: str) -> None: ...

    async def send_password_reset(self, email: str) -> None: ...

    async def verify_id_token(self, token: str) -> AuthenticatedUser: ...


class IPresenceStore(Protocol):
    """status/{uid} records: {"state": "online"|"offline", "lastActive": datetime}."""

    async def set_status(self, user_id: str, state: str, last_active: datetime) -> None: ...

    async def get_status(self, user_id: str) -> dict[str, Any] | None: ...


class KeyValueStore(Protocol):
    """String key-value storage scoped to one visitor (browser storage, cookies)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
