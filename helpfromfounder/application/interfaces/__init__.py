"""Application interfaces (ports): repository and service protocols."""

from helpfromfounder.application.interfaces.repositories import (
    IProjectRepository,
    IResponseRepository,
    IThreadRepository,
    IUserRepository,
    IWriteBatch,
)
from helpfromfounder.application.interfaces.services import (
    IEmailSender,
    IIdentityProvider,
    INotificationSender,
    IPresenceStore,
    KeyValueStore,
)

__all__ = [
    "IEmailSender",
    "IIdentityProvider",
    "INotificationSender",
    "IPresenceStore",
    "IProjectRepository",
    "IResponseRepository",
    "IThreadRepository",
    "IUserRepository",
    "IWriteBatch",
    "KeyValueStore",
]
