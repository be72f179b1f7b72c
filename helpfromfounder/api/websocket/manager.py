"""WebSocket connection manager for presence.

Holds active connections per user. The first connection of a user marks
them online; closing the last one marks them offline. Presence changes are
broadcast to every connected client. Use via app.state.ws_manager (set in
lifespan).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

from helpfromfounder.application.services.presence_service import PresenceService
from helpfromfounder.domain.enums import PresenceState

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks presence connections; a user may hold several (tabs, devices)."""

    def __init__(self) -> None:
        self._connections_by_user: dict[str, set[WebSocket]] = {}
        self._websocket_to_user: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: str, presence: PresenceService) -> None:
        """Accept and register; mark the user online on their first connection."""
        await websocket.accept()
        async with self._lock:
            first = user_id not in self._connections_by_user
            self._connections_by_user.setdefault(user_id, set()).add(websocket)
            self._websocket_to_user[websocket] = user_id
        if first:
            await presence.mark_online(user_id)
            await self.broadcast(
                {"type": "presence", "userId": user_id, "state": PresenceState.ONLINE.value}
            )

    async def disconnect(self, websocket: WebSocket, presence: PresenceService) -> None:
        """Unregister; mark the user offline when their last connection closes."""
        async with self._lock:
            user_id = self._websocket_to_user.pop(websocket, None)
            last = False
            if user_id and user_id in self._connections_by_user:
                conns = self._connections_by_user[user_id]
                conns.discard(websocket)
                if not conns:
                    del self._connections_by_user[user_id]
                    last = True
        if last and user_id:
            await presence.mark_offline(user_id)
            await self.broadcast(
                {"type": "presence", "userId": user_id, "state": PresenceState.OFFLINE.value}
            )

    def is_connected(self, user_id: str) -> bool:
        return user_id in self._connections_by_user

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send a JSON message to all connected clients."""
        async with self._lock:
            snapshot = [ws for conns in self._connections_by_user.values() for ws in conns]
        dead: list[WebSocket] = []
        for ws in snapshot:
            try:
                await ws.send_json(message)
            except Exception:
                dead.append(ws)
        if dead:
            logger.debug("Dropping %d dead presence connections", len(dead))
            async with self._lock:
                for ws in dead:
                    uid = self._websocket_to_user.pop(ws, None)
                    if uid and uid in self._connections_by_user:
                        self._connections_by_user[uid].discard(ws)
                        if not self._connections_by_user[uid]:
                            del self._connections_by_user[uid]

    async def get_connection_count(self) -> int:
        async with self._lock:
            return sum(len(c) for c in self._connections_by_user.values())
