"""Cache: presence status store (Redis with in-memory fallback)."""

from helpfromfounder.infrastructure.cache.presence_store import (
    InMemoryPresenceStore,
    RedisPresenceStore,
)

__all__ = ["InMemoryPresenceStore", "RedisPresenceStore"]
