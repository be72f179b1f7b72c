"""Caller identity: a signed-in user or an anonymous visitor."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Who is performing an operation.

    Exactly one of user_id / anonymous_id is set. Services receive this
    explicitly; there is no ambient "current user".
    """

    user_id: str | None = None
    anonymous_id: str | None = None
    display_name: str | None = None
    email: str | None = None

    def __post_init__(self) -> None:
        if bool(self.user_id) == bool(self.anonymous_id):
            raise ValueError("Identity needs exactly one of user_id or anonymous_id")

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def authenticated(
        cls, user_id: str, display_name: str | None = None, email: str | None = None
    ) -> "Identity":
        return cls(user_id=user_id, display_name=display_name, email=email)

    @classmethod
    def anonymous(cls, anonymous_id: str, display_name: str) -> "Identity":
        return cls(anonymous_id=anonymous_id, display_name=display_name)

    def is_author_of(self, author_id: str | None, anonymous_id: str | None) -> bool:
        """True when this identity wrote a document with the given author fields."""
        if self.user_id is not None:
            return author_id == self.user_id
        return anonymous_id is not None and anonymous_id == self.anonymous_id
