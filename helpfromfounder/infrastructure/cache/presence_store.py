"""Presence status store: status/{uid} -> {"state", "lastActive"}.

RedisPresenceStore keeps records in Redis so every worker process sees the
same state; when Redis is disabled or unreachable it falls back to the
process-local InMemoryPresenceStore.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

import redis.asyncio as redis

from helpfromfounder.core.config import Settings, get_settings
from helpfromfounder.shared.utils.datetime import ensure_utc, parse_datetime

logger = logging.getLogger(__name__)

# Records outlive a single connection so "last active" survives restarts
PRESENCE_TTL_SECONDS = 30 * 24 * 3600


def presence_key(user_id: str) -> str:
    return f"status:{user_id}"


class InMemoryPresenceStore:
    """Process-local presence records (development, tests, Redis fallback)."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    async def set_status(self, user_id: str, state: str, last_active: datetime) -> None:
        self._records[user_id] = {"state": state, "lastActive": ensure_utc(last_active)}

    async def get_status(self, user_id: str) -> dict[str, Any] | None:
        record = self._records.get(user_id)
        return dict(record) if record else None


class RedisPresenceStore:
    """Async Redis presence store.

    Call connect() at startup and disconnect() at shutdown. Reads and writes
    go to the in-memory fallback while Redis is unavailable.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None
        self._fallback = InMemoryPresenceStore()

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password.get_secret_value()
                if self.settings.redis_password
                else None,
                max_connections=self.settings.redis_max_connections,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis presence store connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Using in-memory presence.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis presence store disconnected")

    def is_available(self) -> bool:
        return self._connected and self.redis is not None

    async def set_status(self, user_id: str, state: str, last_active: datetime) -> None:
        await self._fallback.set_status(user_id, state, last_active)
        if not self.is_available() or self.redis is None:
            return
        payload = json.dumps({"state": state, "lastActive": ensure_utc(last_active).isoformat()})
        try:
            await self.redis.setex(presence_key(user_id), PRESENCE_TTL_SECONDS, payload)
        except redis.RedisError:
            logger.exception("Presence write failed for %s", user_id)

    async def get_status(self, user_id: str) -> dict[str, Any] | None:
        if not self.is_available() or self.redis is None:
            return await self._fallback.get_status(user_id)
        try:
            raw = await self.redis.get(presence_key(user_id))
        except redis.RedisError:
            logger.exception("Presence read failed for %s", user_id)
            return await self._fallback.get_status(user_id)
        if raw is None:
            return None
        try:
            record = json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed presence record for %s", user_id)
            return None
        return {"state": record.get("state"), "lastActive": parse_datetime(record.get("lastActive"))}
