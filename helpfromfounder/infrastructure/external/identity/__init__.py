"""Identity provider adapters."""

from helpfromfounder.infrastructure.external.identity.firebase_auth import (
    AuthenticatedUser,
    AuthSession,
    FirebaseIdentityProvider,
)

__all__ = ["AuthenticatedUser", "AuthSession", "FirebaseIdentityProvider"]
