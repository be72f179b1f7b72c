"""Auth API: sign-up, login, logout, password reset, and current identity.

Sign-up and first login move the visitor's anonymous threads and responses
to the account, then drop the anonymous cookies.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from helpfromfounder.api.v1.dependencies import (
    AnonymousGeneratorDep,
    IdentityDep,
    get_auth_service,
    get_authenticated_identity,
)
from helpfromfounder.application.services import AnonymousIdentityGenerator, AuthResult, AuthService
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.exceptions import AuthenticationException
from helpfromfounder.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    MessageResponse,
    PasswordResetRequest,
    SignupRequest,
    TransferSummary,
)
from helpfromfounder.schemas.user import UserResponse

router = APIRouter()

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def _to_response(result: AuthResult, anonymous: AnonymousIdentityGenerator) -> AuthResponse:
    transfer = result.transfer
    if transfer is not None and transfer.success and transfer.transferred:
        anonymous.clear()
    user = result.session.user
    return AuthResponse(
        id_token=result.session.id_token,
        refresh_token=result.session.refresh_token,
        expires_in=result.session.expires_in,
        user_id=user.uid,
        email=user.email,
        display_name=result.user.display_name if result.user else user.display_name,
        user=UserResponse.model_validate(result.user) if result.user else None,
        data_transfer=TransferSummary.model_validate(transfer) if transfer else None,
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(body: SignupRequest, auth: AuthServiceDep, anonymous: AnonymousGeneratorDep):
    """Create an account, its user document, and claim anonymous posts."""
    result = await auth.sign_up(
        body.email,
        body.password,
        body.display_name,
        anonymous_id=anonymous.peek_anonymous_user_id(),
    )
    return _to_response(result, anonymous)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, auth: AuthServiceDep, anonymous: AnonymousGeneratorDep):
    """Sign in with email and password."""
    result = await auth.sign_in(
        body.email, body.password, anonymous_id=anonymous.peek_anonymous_user_id()
    )
    return _to_response(result, anonymous)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    auth: AuthServiceDep,
    identity: Annotated[Identity | None, Depends(get_authenticated_identity)],
):
    """Revoke the caller's refresh tokens."""
    if identity is None:
        raise AuthenticationException("You are not signed in")
    await auth.sign_out(identity)
    return MessageResponse(message="Signed out")


@router.post("/password-reset", response_model=MessageResponse)
async def password_reset(body: PasswordResetRequest, auth: AuthServiceDep):
    """Send a password reset email."""
    await auth.send_password_reset(body.email)
    return MessageResponse(message="Password reset email sent")


@router.get("/me", response_model=MeResponse)
async def me(identity: IdentityDep):
    """Return who the caller is: signed-in user or anonymous visitor."""
    return MeResponse(
        authenticated=identity.is_authenticated,
        user_id=identity.user_id,
        anonymous_id=identity.anonymous_id,
        display_name=identity.display_name,
        email=identity.email,
    )
