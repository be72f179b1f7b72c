"""Domain entities."""

from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.entities.thread import ThreadEntity

__all__ = ["Identity", "ThreadEntity"]
