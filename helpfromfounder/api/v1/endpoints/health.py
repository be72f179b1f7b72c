"""Health check endpoint. No dependencies; used for liveness checks."""

from fastapi import APIRouter

from helpfromfounder.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()
