"""Pydantic request/response schemas for the API."""

from helpfromfounder.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    MessageResponse,
    PasswordResetRequest,
    SignupRequest,
)
from helpfromfounder.schemas.health import HealthResponse, WorkerHealthResponse
from helpfromfounder.schemas.image import (
    ImageErrorResponse,
    ImageUploadResponse,
    ImageUploadUrlRequest,
    ImageUploadUrlResponse,
)
from helpfromfounder.schemas.notification import NotificationRequest
from helpfromfounder.schemas.presence import PresenceResponse
from helpfromfounder.schemas.project import (
    ProjectCreateRequest,
    ProjectResponse,
    ReconciliationResponse,
)
from helpfromfounder.schemas.thread import (
    ParticipantResponse,
    ResponseCreateRequest,
    ResponseResponse,
    ThreadCreateRequest,
    ThreadResponse,
    ThreadStatusRequest,
)
from helpfromfounder.schemas.user import UserResponse, UserUpdateRequest

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "ImageErrorResponse",
    "ImageUploadResponse",
    "ImageUploadUrlRequest",
    "ImageUploadUrlResponse",
    "LoginRequest",
    "MeResponse",
    "MessageResponse",
    "NotificationRequest",
    "ParticipantResponse",
    "PasswordResetRequest",
    "PresenceResponse",
    "ProjectCreateRequest",
    "ProjectResponse",
    "ReconciliationResponse",
    "ResponseCreateRequest",
    "ResponseResponse",
    "SignupRequest",
    "ThreadCreateRequest",
    "ThreadResponse",
    "ThreadStatusRequest",
    "UserResponse",
    "UserUpdateRequest",
    "WorkerHealthResponse",
]
