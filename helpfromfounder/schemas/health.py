"""Health check schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"


class WorkerHealthResponse(BaseModel):
    """Root health check of the notification dispatcher."""

    status: str = "ok"
    message: str = "Email notification worker is running"
