"""Firebase Authentication over the Identity Toolkit REST API.

Email/password sign-up and sign-in use the project's web API key; refresh
token revocation uses service-account credentials. ID tokens are verified
locally with google-auth against Google's public certificates.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from helpfromfounder.domain.exceptions import AuthenticationException, IdentityProviderError

logger = logging.getLogger(__name__)

_IDENTITY_TOOLKIT_BASE = "https://identitytoolkit.googleapis.com/v1"
_IDENTITY_TOOLKIT_SCOPE = "https://www.googleapis.com/auth/identitytoolkit"

# Identity Toolkit error codes -> caller-facing messages
_ERROR_MESSAGES: dict[str, str] = {
    "EMAIL_EXISTS": "An account with this email already exists",
    "INVALID_EMAIL": "Invalid email address",
    "WEAK_PASSWORD": "Password should be at least 6 characters",
    "MISSING_PASSWORD": "Password is required",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
    "USER_DISABLED": "This account has been disabled",
    "OPERATION_NOT_ALLOWED": "Email/password sign-in is not enabled",
}
_CREDENTIAL_ERRORS = {"EMAIL_NOT_FOUND", "INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS"}


@dataclass(frozen=True)
class AuthenticatedUser:
    uid: str
    email: str | None = None
    display_name: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Tokens returned by sign-up / sign-in."""

    user: AuthenticatedUser
    id_token: str
    refresh_token: str
    expires_in: int


def _raise_for_error(response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    try:
        code = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        code = f"HTTP_{response.status_code}"
    # Codes may carry a detail suffix: "WEAK_PASSWORD : Password should be ..."
    base_code = code.split(" ", 1)[0]
    if base_code in _CREDENTIAL_ERRORS:
        raise AuthenticationException("Invalid email or password")
    message = _ERROR_MESSAGES.get(base_code, "Authentication request failed")
    raise IdentityProviderError(message, provider_code=base_code)


def _session_from(data: dict[str, Any], display_name: str | None = None) -> AuthSession:
    return AuthSession(
        user=AuthenticatedUser(
            uid=data["localId"],
            email=data.get("email"),
            display_name=display_name or data.get("displayName") or None,
        ),
        id_token=data["idToken"],
        refresh_token=data.get("refreshToken", ""),
        expires_in=int(data.get("expiresIn", 3600)),
    )


class FirebaseIdentityProvider:
    """IIdentityProvider backed by Firebase Authentication."""

    def __init__(
        self,
        project_id: str,
        api_key: str | None,
        service_account_info: dict | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = _IDENTITY_TOOLKIT_BASE,
    ) -> None:
        self._project_id = project_id
        self._api_key = api_key
        self._service_account_info = service_account_info
        self._credentials = None
        self._http = http_client or httpx.AsyncClient(timeout=30.0)
        self._owns_client = http_client is None
        self._base_url = base_url.rstrip("/")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise IdentityProviderError("Identity provider is not configured")
        try:
            response = await self._http.post(
                f"{self._base_url}/{path}", params={"key": self._api_key}, json=body
            )
        except httpx.HTTPError as e:
            logger.error("Identity Toolkit request %s failed: %s", path, e)
            raise IdentityProviderError("Authentication service unavailable") from e
        _raise_for_error(response)
        return response.json()

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthSession:
        data = await self._post(
            "accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if display_name:
            await self._post(
                "accounts:update",
                {"idToken": data["idToken"], "displayName": display_name, "returnSecureToken": False},
            )
        logger.info("Created account %s", data["localId"])
        return _session_from(data, display_name)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        data = await self._post(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return _session_from(data)

    async def send_password_reset(self, email: str) -> None:
        await self._post("accounts:sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    def _access_token(self) -> str:
        from google.auth.transport.requests import Request
        from google.oauth2 import service_account

        if self._credentials is None:
            self._credentials = service_account.Credentials.from_service_account_info(
                self._service_account_info, scopes=[_IDENTITY_TOOLKIT_SCOPE]
            )
        if not self._credentials.valid:
            self._credentials.refresh(Request())
        return self._credentials.token

    async def sign_out(self, user_id: str) -> None:
        """Revoke the user's refresh tokens; issued ID tokens stay valid until expiry."""
        if not self._service_account_info:
            logger.warning("No service account configured; skipping token revocation for %s", user_id)
            return
        token = await asyncio.to_thread(self._access_token)
        try:
            response = await self._http.post(
                f"{self._base_url}/projects/{self._project_id}/accounts:update",
                headers={"Authorization": f"Bearer {token}"},
                json={"localId": user_id, "validSince": str(int(time.time()))},
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError("Authentication service unavailable") from e
        _raise_for_error(response)

    def _verify_sync(self, token: str) -> dict[str, Any]:
        from google.auth.transport.requests import Request
        from google.oauth2 import id_token

        return id_token.verify_firebase_token(token, Request(), audience=self._project_id)

    async def verify_id_token(self, token: str) -> AuthenticatedUser:
        from google.auth.exceptions import GoogleAuthError

        try:
            claims = await asyncio.to_thread(self._verify_sync, token)
        except (ValueError, GoogleAuthError) as e:
            logger.debug("ID token rejected: %s", e)
            raise AuthenticationException("Invalid or expired token") from e
        if not claims or not claims.get("sub"):
            raise AuthenticationException("Invalid or expired token")
        return AuthenticatedUser(
            uid=claims["sub"],
            email=claims.get("email"),
            display_name=claims.get("name"),
        )
