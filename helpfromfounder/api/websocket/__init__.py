"""WebSocket connection manager for presence."""

from helpfromfounder.api.websocket.manager import ConnectionManager

__all__ = ["ConnectionManager"]
