"""Notification dispatcher HTTP API.

POST /api/send-email fans one notification out as individual emails. The
same handler is mounted on SEND_EMAIL_PATH when configured. Bodies use the
{success, message, errors?, error?} envelope, not the API error format.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from helpfromfounder.api.v1.dependencies import get_notification_dispatcher
from helpfromfounder.application.services import NotificationDispatcher
from helpfromfounder.schemas.health import WorkerHealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=WorkerHealthResponse)
def dispatcher_health() -> WorkerHealthResponse:
    """Liveness of the notification dispatcher."""
    return WorkerHealthResponse()


async def send_email(
    request: Request,
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> JSONResponse:
    """Validate the notification and send one email per recipient (200, 207, 400 or 500)."""
    try:
        data = await request.json()
    except ValueError:
        data = None
    result = await dispatcher.dispatch(data)
    if result.status_code >= 400:
        logger.info("Notification request rejected (%d): %s", result.status_code, result.message)
    return JSONResponse(status_code=result.status_code, content=result.to_dict())


router.add_api_route("/api/send-email", send_email, methods=["POST"])


def mount_legacy_route(target: APIRouter, path: str) -> None:
    """Serve the dispatcher on an additional, configurable path."""
    target.add_api_route(path, send_email, methods=["POST"], include_in_schema=False)
