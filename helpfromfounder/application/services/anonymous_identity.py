"""Anonymous visitor identity: a stable 8-digit id and a memorable name.

Both values live in a per-visitor KeyValueStore (cookies over HTTP, a dict
in tests) and are minted on first use.
"""

from __future__ import annotations

import random

from helpfromfounder.application.interfaces.services import KeyValueStore
from helpfromfounder.application.services.words import ADJECTIVES, NOUNS
from helpfromfounder.domain.entities.identity import Identity

ANONYMOUS_USER_ID_KEY = "anonymous_user_id"
ANONYMOUS_USER_NAME_KEY = "anonymous_user_name"


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore (tests, scripts)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class AnonymousIdentityGenerator:
    """Reads or mints the anonymous id and display name for one visitor."""

    def __init__(self, store: KeyValueStore, rng: random.Random | None = None) -> None:
        self._store = store
        self._rng = rng or random.Random()

    def _generate_id(self) -> str:
        return str(self._rng.randint(10_000_000, 99_999_999))

    def _generate_name(self) -> str:
        adjective = self._rng.choice(ADJECTIVES).capitalize()
        noun = self._rng.choice(NOUNS).capitalize()
        return f"{adjective}{noun}{self._rng.randint(10, 999)}"

    def get_anonymous_user_id(self) -> str:
        """Return the stored id, minting and persisting one if absent."""
        user_id = self._store.get(ANONYMOUS_USER_ID_KEY)
        if not user_id:
            user_id = self._generate_id()
            self._store.set(ANONYMOUS_USER_ID_KEY, user_id)
        return user_id

    def get_anonymous_user_name(self) -> str:
        """Return the stored name, minting and persisting one if absent."""
        name = self._store.get(ANONYMOUS_USER_NAME_KEY)
        if not name:
            name = self._generate_name()
            self._store.set(ANONYMOUS_USER_NAME_KEY, name)
        return name

    def peek_anonymous_user_id(self) -> str | None:
        """Return the stored id without minting one."""
        return self._store.get(ANONYMOUS_USER_ID_KEY) or None

    def identity(self) -> Identity:
        return Identity.anonymous(self.get_anonymous_user_id(), self.get_anonymous_user_name())

    def clear(self) -> None:
        self._store.delete(ANONYMOUS_USER_ID_KEY)
        self._store.delete(ANONYMOUS_USER_NAME_KEY)
