"""Shared utilities: datetime, generators, sanitization."""

from helpfromfounder.shared.utils.datetime import ensure_utc, parse_datetime, utc_now
from helpfromfounder.shared.utils.generators import generate_cuid, generate_image_key
from helpfromfounder.shared.utils.sanitization import InputSanitizer, sanitize_input

__all__ = [
    "generate_cuid",
    "generate_image_key",
    "utc_now",
    "ensure_utc",
    "parse_datetime",
    "InputSanitizer",
    "sanitize_input",
]
