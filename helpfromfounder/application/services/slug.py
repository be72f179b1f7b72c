"""Project slugs: URL-safe, lowercase, unique across projects."""

import re

from helpfromfounder.application.interfaces.repositories import IProjectRepository

MAX_SLUG_LENGTH = 60
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str) -> str:
    """Lowercase, collapse runs of other characters into '-', trim dashes, cut to 60."""
    slug = _NON_ALNUM.sub("-", name.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH]


async def get_unique_slug(
    projects: IProjectRepository,
    base_slug: str,
    exclude_project_id: str | None = None,
) -> str:
    """Return base_slug, or base_slug-1, base_slug-2, ... whichever is unused first."""
    slug = base_slug
    counter = 1
    while await projects.slug_exists(slug, exclude_id=exclude_project_id):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug
