"""Tests for project slug generation and uniqueness."""

from helpfromfounder.application.services import generate_slug, get_unique_slug


def test_generate_slug_normalizes() -> None:
    assert generate_slug("  My Cool App!! ") == "my-cool-app"
    assert generate_slug("Ünïcode & more") == "n-code-more"
    assert generate_slug("!!!") == ""
    assert len(generate_slug("x" * 100)) == 60


class _Projects:
    def __init__(self, taken: dict[str, str]) -> None:
        self.taken = taken

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        owner = self.taken.get(slug)
        return owner is not None and owner != exclude_id


async def test_unique_slug_appends_counter() -> None:
    projects = _Projects({"acme": "p1", "acme-1": "p2"})
    assert await get_unique_slug(projects, "acme") == "acme-2"
    assert await get_unique_slug(projects, "other") == "other"


async def test_unique_slug_ignores_own_project() -> None:
    projects = _Projects({"acme": "p1"})
    assert await get_unique_slug(projects, "acme", exclude_project_id="p1") == "acme"
