"""Presence API schemas."""

from datetime import datetime

from helpfromfounder.domain.enums import PresenceState
from helpfromfounder.schemas.common import CamelModel


class PresenceResponse(CamelModel):
    user_id: str
    state: PresenceState
    last_active: datetime | None = None
    last_seen: datetime | None = None
    label: str
