"""Auth API schemas."""

from pydantic import EmailStr, Field

from helpfromfounder.schemas.common import CamelModel
from helpfromfounder.schemas.user import UserResponse


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordResetRequest(CamelModel):
    email: EmailStr


class TransferSummary(CamelModel):
    success: bool
    message: str
    transferred: int = 0


class AuthResponse(CamelModel):
    """Tokens plus the user profile after sign-up or sign-in."""

    id_token: str
    refresh_token: str
    expires_in: int
    user_id: str
    email: str | None = None
    display_name: str | None = None
    user: UserResponse | None = None
    data_transfer: TransferSummary | None = None


class MeResponse(CamelModel):
    """Caller identity: a signed-in user or the anonymous visitor."""

    authenticated: bool
    user_id: str | None = None
    anonymous_id: str | None = None
    display_name: str | None = None
    email: str | None = None


class MessageResponse(CamelModel):
    message: str
