"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories and application services.
All services are built from infrastructure held on app.state (set in
lifespan); routes depend only on these dependencies, not on infra directly.
Tests swap collaborators through app.dependency_overrides.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from helpfromfounder.api.cookies import CookieKeyValueStore
from helpfromfounder.application.interfaces.services import (
    IEmailSender,
    IIdentityProvider,
    INotificationSender,
)
from helpfromfounder.application.services import (
    AccessPolicy,
    AnonymousDataTransferService,
    AnonymousIdentityGenerator,
    AuthService,
    BackgroundTaskRunner,
    CounterReconciliationService,
    ImageRelayService,
    LifecycleOptions,
    NotificationDispatcher,
    PresenceService,
    ProjectService,
    ThreadLifecycleService,
    UserService,
)
from helpfromfounder.core.config import Settings, get_settings
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.infrastructure.external.notifications import (
    HttpNotificationSender,
    InProcessNotificationSender,
)
from helpfromfounder.infrastructure.firebase.client import DocumentClient, get_firestore_client
from helpfromfounder.infrastructure.firebase.repositories import (
    FirestoreProjectRepository,
    FirestoreResponseRepository,
    FirestoreThreadRepository,
    FirestoreUserRepository,
)

_bearer = HTTPBearer(auto_error=False)


def get_document_client() -> DocumentClient:
    """Return the document client or raise HTTPException 503 with standard message."""
    client = get_firestore_client()
    if not client:
        raise HTTPException(
            status_code=503,
            detail="Firestore not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or PATH)",
        )
    return client


DocumentClientDep = Annotated[DocumentClient, Depends(get_document_client)]


# ---- Repositories ----


def get_user_repo(client: DocumentClientDep) -> FirestoreUserRepository:
    return FirestoreUserRepository(client)


def get_project_repo(client: DocumentClientDep) -> FirestoreProjectRepository:
    return FirestoreProjectRepository(client)


def get_thread_repo(client: DocumentClientDep) -> FirestoreThreadRepository:
    return FirestoreThreadRepository(client)


def get_response_repo(client: DocumentClientDep) -> FirestoreResponseRepository:
    return FirestoreResponseRepository(client)


UserRepoDep = Annotated[FirestoreUserRepository, Depends(get_user_repo)]
ProjectRepoDep = Annotated[FirestoreProjectRepository, Depends(get_project_repo)]
ThreadRepoDep = Annotated[FirestoreThreadRepository, Depends(get_thread_repo)]
ResponseRepoDep = Annotated[FirestoreResponseRepository, Depends(get_response_repo)]


# ---- Infrastructure from app.state ----


def get_access_policy() -> AccessPolicy:
    return AccessPolicy()


def get_task_runner(request: Request) -> BackgroundTaskRunner:
    return request.app.state.task_runner


def get_email_sender(request: Request) -> IEmailSender | None:
    """SendGrid sender, or None when SENDGRID_API_KEY is not configured."""
    return request.app.state.email_sender


def get_identity_provider(request: Request) -> IIdentityProvider:
    return request.app.state.identity_provider


def get_notification_dispatcher(
    request: Request,
    sender: Annotated[IEmailSender | None, Depends(get_email_sender)],
) -> NotificationDispatcher:
    return NotificationDispatcher(sender, request.app.state.template_renderer)


def get_notification_sender(
    request: Request,
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> INotificationSender:
    """POST to NOTIFICATION_DISPATCHER_URL when set, else dispatch in-process."""
    settings = get_settings()
    if settings.notification_dispatcher_url:
        return HttpNotificationSender(
            settings.notification_dispatcher_url, request.app.state.http_client
        )
    return InProcessNotificationSender(dispatcher)


# ---- Application services ----


def get_lifecycle_service(
    projects: ProjectRepoDep,
    threads: ThreadRepoDep,
    responses: ResponseRepoDep,
    users: UserRepoDep,
    policy: Annotated[AccessPolicy, Depends(get_access_policy)],
    notifier: Annotated[INotificationSender, Depends(get_notification_sender)],
    tasks: Annotated[BackgroundTaskRunner, Depends(get_task_runner)],
) -> ThreadLifecycleService:
    settings = get_settings()
    options = LifecycleOptions(
        public_base_url=settings.public_base_url.rstrip("/"),
        dedup_window=timedelta(seconds=settings.notification_dedup_window_seconds),
        participant_limit=settings.thread_participant_limit,
    )
    return ThreadLifecycleService(
        projects, threads, responses, users, policy, notifier, tasks, options
    )


def get_project_service(
    projects: ProjectRepoDep,
    threads: ThreadRepoDep,
    responses: ResponseRepoDep,
    users: UserRepoDep,
    policy: Annotated[AccessPolicy, Depends(get_access_policy)],
) -> ProjectService:
    return ProjectService(projects, threads, responses, users, policy)


def get_user_service(
    users: UserRepoDep,
    policy: Annotated[AccessPolicy, Depends(get_access_policy)],
) -> UserService:
    return UserService(users, policy)


def get_reconciliation_service(
    projects: ProjectRepoDep,
    threads: ThreadRepoDep,
    responses: ResponseRepoDep,
) -> CounterReconciliationService:
    return CounterReconciliationService(projects, threads, responses)


def get_auth_service(
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    users: UserRepoDep,
    threads: ThreadRepoDep,
    responses: ResponseRepoDep,
    policy: Annotated[AccessPolicy, Depends(get_access_policy)],
) -> AuthService:
    return AuthService(provider, users, AnonymousDataTransferService(threads, responses), policy)


def get_presence_service(request: Request, users: UserRepoDep) -> PresenceService:
    return PresenceService(request.app.state.presence_store, users)


def get_image_relay_service(request: Request) -> ImageRelayService:
    settings = get_settings()
    return ImageRelayService(
        request.app.state.image_storage,
        upload_url_expiry=settings.image_upload_url_expiry_seconds,
    )


# ---- Caller identity ----


def get_anonymous_identity_generator(
    request: Request, response: Response
) -> AnonymousIdentityGenerator:
    """Anonymous id/name stored in long-lived cookies on the caller's browser."""
    settings: Settings = get_settings()
    store = CookieKeyValueStore(
        request,
        response,
        max_age=settings.anonymous_cookie_max_age,
        secure=settings.anonymous_cookie_secure,
    )
    return AnonymousIdentityGenerator(store)


AnonymousGeneratorDep = Annotated[
    AnonymousIdentityGenerator, Depends(get_anonymous_identity_generator)
]


async def get_authenticated_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
    users: UserRepoDep,
) -> Identity | None:
    """Identity from a Bearer ID token, or None when no token was sent.

    An invalid token raises AuthenticationException (401) rather than
    falling back to anonymous.
    """
    if credentials is None or not credentials.credentials:
        return None
    identity = await auth.resolve_token(credentials.credentials)
    if identity.display_name and identity.email:
        return identity
    user = await users.get_by_id(identity.user_id)
    if user is None:
        return identity
    return Identity.authenticated(
        identity.user_id,
        identity.display_name or user.display_name,
        identity.email or user.email,
    )


async def get_identity(
    authenticated: Annotated[Identity | None, Depends(get_authenticated_identity)],
    anonymous: AnonymousGeneratorDep,
) -> Identity:
    """Signed-in identity, else the anonymous visitor (minting cookies on first use)."""
    if authenticated is not None:
        return authenticated
    return anonymous.identity()


IdentityDep = Annotated[Identity, Depends(get_identity)]
