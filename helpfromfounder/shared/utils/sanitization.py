"""Input sanitization for short user-supplied display text."""

from typing import ClassVar

import nh3


class InputSanitizer:
    """Strip HTML from names and titles before they are stored.

    Thread and response bodies are stored verbatim (clients render them as
    text); names and titles also end up in email subjects and slugs.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()

    @classmethod
    def sanitize_text(cls, value: str | None) -> str:
        """Remove all HTML tags and surrounding whitespace."""
        if not value:
            return ""
        return nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={}).strip()


def sanitize_input(value: str | None) -> str:
    """Shorthand for InputSanitizer.sanitize_text."""
    return InputSanitizer.sanitize_text(value)
