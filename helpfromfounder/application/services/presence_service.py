"""Online/offline presence and last-seen tracking."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from helpfromfounder.application.interfaces.repositories import IUserRepository
from helpfromfounder.application.interfaces.services import IPresenceStore
from helpfromfounder.domain.enums import PresenceState
from helpfromfounder.domain.exceptions import DocumentStoreError
from helpfromfounder.shared.utils.datetime import ensure_utc, parse_datetime, utc_now

logger = logging.getLogger(__name__)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_last_seen(timestamp: datetime | None, now: datetime | None = None) -> str:
    """Relative label for a last-seen time ("Just now", "3 hours ago", ...)."""
    if timestamp is None:
        return "Never"
    now = ensure_utc(now or utc_now())
    seconds = int((now - ensure_utc(timestamp)).total_seconds())
    if seconds < 60:
        return "Just now"
    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    days = hours // 24
    if days < 30:
        return _plural(days, "day")
    months = days // 30
    if months < 12:
        return _plural(months, "month")
    return _plural(months // 12, "year")


class PresenceService:
    """Marks users online/offline and reads their status.

    The presence store holds the live state; users/{uid}.lastSeen keeps the
    last connection time after the store forgets it.
    """

    def __init__(
        self,
        store: IPresenceStore,
        users: IUserRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._users = users
        self._clock = clock

    async def mark_online(self, user_id: str) -> None:
        now = self._clock()
        await self._store.set_status(user_id, PresenceState.ONLINE.value, now)
        await self.update_last_seen(user_id, now)

    async def mark_offline(self, user_id: str) -> None:
        await self._store.set_status(user_id, PresenceState.OFFLINE.value, self._clock())

    async def update_last_seen(self, user_id: str, when: datetime | None = None) -> None:
        try:
            await self._users.update_last_seen(user_id, when or self._clock())
        except DocumentStoreError:
            logger.exception("Error updating last seen timestamp for %s", user_id)

    async def get_status(self, user_id: str) -> dict[str, Any]:
        """Return {"state", "lastActive"}; unknown users are offline with no lastActive."""
        record = await self._store.get_status(user_id)
        if not record:
            return {"state": PresenceState.OFFLINE.value, "lastActive": None}
        state = record.get("state") or PresenceState.OFFLINE.value
        return {"state": state, "lastActive": parse_datetime(record.get("lastActive"))}

    async def describe(self, user_id: str) -> dict[str, Any]:
        """Status plus the persisted lastSeen and a display label.

        Falls back to lastSeen from the user document when the presence
        store has no record of the user.
        """
        status = await self.get_status(user_id)
        last_seen = None
        try:
            user = await self._users.get_by_id(user_id)
            last_seen = user.last_seen if user else None
        except DocumentStoreError:
            logger.exception("Error fetching lastSeen for %s", user_id)
        last_active = status["lastActive"] or last_seen
        if status["state"] == PresenceState.ONLINE.value:
            label = "Online"
        else:
            label = format_last_seen(last_active, self._clock())
        return {
            "user_id": user_id,
            "state": status["state"],
            "last_active": last_active,
            "last_seen": last_seen,
            "label": label,
        }
