"""Presence API: status lookups and the realtime presence WebSocket.

A signed-in client keeps /presence/ws?token=<id token> open while the app
is in the foreground. Opening the first connection marks the user online;
closing the last marks them offline and stamps lastActive.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from helpfromfounder.api.v1.dependencies import get_presence_service
from helpfromfounder.application.services import PresenceService
from helpfromfounder.domain.exceptions import AuthenticationException
from helpfromfounder.infrastructure.firebase.client import get_firestore_client
from helpfromfounder.infrastructure.firebase.repositories import FirestoreUserRepository
from helpfromfounder.schemas.presence import PresenceResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


@router.websocket("/ws")
async def presence_websocket(websocket: WebSocket):
    """Track the caller as online for the lifetime of the connection.

    Token must be provided as query param (?token=<id token>). Incoming
    "ping" messages are answered with "pong"; other messages are ignored.
    """
    token = websocket.query_params.get("token")
    if not token:
        await _reject_websocket(websocket, "Missing token")
        return
    provider = websocket.app.state.identity_provider
    try:
        user = await provider.verify_id_token(token)
    except AuthenticationException:
        await _reject_websocket(websocket, "Invalid token")
        return
    client = get_firestore_client()
    if client is None:
        await _reject_websocket(websocket, "Service unavailable", code=1011)
        return

    presence = PresenceService(websocket.app.state.presence_store, FirestoreUserRepository(client))
    manager = websocket.app.state.ws_manager
    await manager.connect(websocket, user.uid, presence)
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(websocket, presence)


@router.get("/{user_id}", response_model=PresenceResponse)
async def get_presence(
    user_id: str,
    presence: Annotated[PresenceService, Depends(get_presence_service)],
):
    """Online state, last activity, persisted lastSeen, and a display label."""
    return PresenceResponse.model_validate(await presence.describe(user_id))
