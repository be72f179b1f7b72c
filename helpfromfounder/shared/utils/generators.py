"""ID generators (CUID for documents, UUID for image keys)."""

import uuid

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2) for new documents.

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_image_key(content_type: str) -> str:
    """Return '<uuid4>.<subtype>' for an image content type (subtype defaults to png)."""
    _, _, subtype = content_type.partition("/")
    extension = subtype.split(";")[0].strip() or "png"
    return f"{uuid.uuid4()}.{extension}"
