"""Pytest configuration and fixtures for helpfromfounder.

The app runs against the in-memory document store and local image storage;
the identity provider and email sender are swapped for fakes through
dependency_overrides. Environment is set before any helpfromfounder import
because helpfromfounder.main builds an app at import time.
"""

import os
import tempfile

_STORAGE_ROOT = tempfile.mkdtemp(prefix="hff-images-")
os.environ["DATABASE_BACKEND"] = "memory"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = _STORAGE_ROOT
os.environ["REDIS_ENABLED"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"
os.environ["NOTIFICATION_DISPATCHER_URL"] = ""
os.environ["SEND_EMAIL_PATH"] = "/legacy/send-email"
os.environ["MAX_UPLOAD_SIZE"] = str(64 * 1024)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from helpfromfounder.application.services import AccessPolicy, BackgroundTaskRunner  # noqa: E402
from helpfromfounder.core.config import get_settings  # noqa: E402
from helpfromfounder.domain.exceptions import (  # noqa: E402
    AuthenticationException,
    IdentityProviderError,
)
from helpfromfounder.infrastructure.external.identity import (  # noqa: E402
    AuthenticatedUser,
    AuthSession,
)
from helpfromfounder.infrastructure.firebase._memory_client import (  # noqa: E402
    InMemoryFirestoreClient,
)
from helpfromfounder.infrastructure.firebase.repositories import (  # noqa: E402
    FirestoreProjectRepository,
    FirestoreResponseRepository,
    FirestoreThreadRepository,
    FirestoreUserRepository,
)

get_settings.cache_clear()


class FakeIdentityProvider:
    """Email/password accounts kept in a dict; tokens are 'token-<uid>'."""

    def __init__(self) -> None:
        self.accounts: dict[str, dict] = {}
        self.signed_out: list[str] = []
        self.reset_emails: list[str] = []

    def _session(self, account: dict) -> AuthSession:
        user = AuthenticatedUser(account["uid"], account["email"], account["display_name"])
        return AuthSession(user, f"token-{account['uid']}", "refresh-token", 3600)

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthSession:
        if email in self.accounts:
            raise IdentityProviderError(
                "An account with this email already exists", provider_code="EMAIL_EXISTS"
            )
        account = {
            "uid": f"uid-{len(self.accounts) + 1}",
            "email": email,
            "password": password,
            "display_name": display_name,
        }
        self.accounts[email] = account
        return self._session(account)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise AuthenticationException("Invalid email or password")
        return self._session(account)

    async def sign_out(self, user_id: str) -> None:
        self.signed_out.append(user_id)

    async def send_password_reset(self, email: str) -> None:
        self.reset_emails.append(email)

    async def verify_id_token(self, token: str) -> AuthenticatedUser:
        for account in self.accounts.values():
            if token == f"token-{account['uid']}":
                return AuthenticatedUser(account["uid"], account["email"], account["display_name"])
        raise AuthenticationException("Invalid or expired token")


class RecordingEmailSender:
    """Collects sent messages; addresses in fail_for raise instead."""

    def __init__(self) -> None:
        self.messages = []
        self.fail_for: set[str] = set()

    async def send(self, message) -> None:
        if message.to_email in self.fail_for:
            raise RuntimeError(f"rejected {message.to_email}")
        self.messages.append(message)


class RecordingNotifier:
    """INotificationSender that keeps every payload."""

    def __init__(self) -> None:
        self.payloads: list[dict] = []

    async def send(self, payload: dict) -> None:
        self.payloads.append(payload)


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
async def app(identity_provider: FakeIdentityProvider, email_sender: RecordingEmailSender):
    """Fresh application with its lifespan running (new in-memory store per test)."""
    from helpfromfounder.api.v1.dependencies import get_email_sender, get_identity_provider
    from helpfromfounder.main import create_app

    application = create_app()
    application.dependency_overrides[get_identity_provider] = lambda: identity_provider
    application.dependency_overrides[get_email_sender] = lambda: email_sender
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI); keeps cookies between calls."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def sign_up(client: AsyncClient, email: str, name: str, password: str = "secret123") -> dict:
    """Create an account through the API; return its uid and bearer headers."""
    response = await client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": password, "displayName": name},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "uid": body["userId"],
        "headers": {"Authorization": f"Bearer {body['idToken']}"},
        "body": body,
    }


@pytest.fixture
async def founder(client: AsyncClient) -> dict:
    return await sign_up(client, "founder@example.com", "Fiona Founder")


@pytest.fixture
async def project(client: AsyncClient, founder: dict) -> dict:
    response = await client.post(
        "/api/v1/projects",
        json={"name": "Acme Widgets", "description": "Widgets for everyone"},
        headers=founder["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


# ---- Service-level fixtures (no HTTP) ----


@pytest.fixture
def store() -> InMemoryFirestoreClient:
    return InMemoryFirestoreClient()


@pytest.fixture
def repos(store: InMemoryFirestoreClient) -> dict:
    return {
        "users": FirestoreUserRepository(store),
        "projects": FirestoreProjectRepository(store),
        "threads": FirestoreThreadRepository(store),
        "responses": FirestoreResponseRepository(store),
    }


@pytest.fixture
def policy() -> AccessPolicy:
    return AccessPolicy()


@pytest.fixture
def task_runner() -> BackgroundTaskRunner:
    return BackgroundTaskRunner()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
