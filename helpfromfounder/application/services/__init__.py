"""Application services: thread lifecycle, projects, notifications, identity, presence, images."""

from helpfromfounder.application.services.access_policy import AccessPolicy
from helpfromfounder.application.services.anonymous_identity import (
    AnonymousIdentityGenerator,
    InMemoryKeyValueStore,
)
from helpfromfounder.application.services.auth_service import AuthResult, AuthService
from helpfromfounder.application.services.background_tasks import BackgroundTaskRunner
from helpfromfounder.application.services.counter_reconciliation import (
    CounterReconciliationService,
)
from helpfromfounder.application.services.data_transfer import AnonymousDataTransferService
from helpfromfounder.application.services.image_relay import ImageRelayService
from helpfromfounder.application.services.notification_dispatcher import (
    NotificationDispatcher,
    NotificationValidationError,
)
from helpfromfounder.application.services.presence_service import (
    PresenceService,
    format_last_seen,
)
from helpfromfounder.application.services.project_service import ProjectService
from helpfromfounder.application.services.slug import generate_slug, get_unique_slug
from helpfromfounder.application.services.thread_lifecycle import (
    LifecycleOptions,
    ThreadLifecycleService,
)
from helpfromfounder.application.services.user_service import UserService

__all__ = [
    "AccessPolicy",
    "AnonymousDataTransferService",
    "AnonymousIdentityGenerator",
    "AuthResult",
    "AuthService",
    "BackgroundTaskRunner",
    "CounterReconciliationService",
    "ImageRelayService",
    "InMemoryKeyValueStore",
    "LifecycleOptions",
    "NotificationDispatcher",
    "NotificationValidationError",
    "PresenceService",
    "ProjectService",
    "ThreadLifecycleService",
    "UserService",
    "format_last_seen",
    "generate_slug",
    "get_unique_slug",
]
