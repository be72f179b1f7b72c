"""Tests for project creation, editing, listing, and cascading delete."""

import pytest

from helpfromfounder.application.dtos.project import ProjectCreate
from helpfromfounder.application.services import ProjectService
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)

OWNER = Identity.authenticated("owner-uid", "Olive Owner")
OTHER = Identity.authenticated("other-uid", "Otto Other", "otto@example.com")
VISITOR = Identity.anonymous("12345678", "BraveOtter42")


@pytest.fixture
def projects(repos, policy) -> ProjectService:
    return ProjectService(
        repos["projects"], repos["threads"], repos["responses"], repos["users"], policy
    )


async def test_create_project_sets_slug_owner_and_counters(projects, repos) -> None:
    await repos["users"].create("owner-uid", "olive@example.com", "Olive Owner")
    project = await projects.create_project(OWNER, ProjectCreate(name="My <b>Cool</b> App", description="Does things"))
    assert project.name == "My Cool App"
    assert project.slug == "my-cool-app"
    assert project.owner_id == "owner-uid"
    assert project.owner_email == "olive@example.com"
    assert (project.total_issues, project.closed_issues, project.solved_percentage) == (0, 0, 0)


async def test_duplicate_names_get_numbered_slugs(projects) -> None:
    first = await projects.create_project(OWNER, ProjectCreate(name="Acme", description="a"))
    second = await projects.create_project(OTHER, ProjectCreate(name="Acme", description="b"))
    third = await projects.create_project(OTHER, ProjectCreate(name="???", description="c"))
    assert (first.slug, second.slug, third.slug) == ("acme", "acme-1", "project")


async def test_create_requires_login_and_fields(projects) -> None:
    with pytest.raises(AuthenticationException):
        await projects.create_project(VISITOR, ProjectCreate(name="Acme", description="a"))
    with pytest.raises(ValidationException, match="Project name is required"):
        await projects.create_project(OWNER, ProjectCreate(name="  ", description="a"))
    with pytest.raises(ValidationException, match="Project description is required"):
        await projects.create_project(OWNER, ProjectCreate(name="Acme", description=" "))


async def test_update_keeps_slug_unless_name_changes(projects) -> None:
    project = await projects.create_project(OWNER, ProjectCreate(name="Acme", description="a"))
    same = await projects.update_project(project.id, OWNER, ProjectCreate(name="ACME", description="new", website="https://acme.dev"))
    assert same.slug == "acme"
    assert same.description == "new"
    assert same.website == "https://acme.dev"
    renamed = await projects.update_project(project.id, OWNER, ProjectCreate(name="Acme Two", description="new"))
    assert renamed.slug == "acme-two"
    assert (await projects.get_by_slug("acme-two")).id == project.id
    with pytest.raises(ResourceNotFoundException):
        await projects.get_by_slug("acme")


async def test_only_owner_may_edit_or_delete(projects) -> None:
    project = await projects.create_project(OWNER, ProjectCreate(name="Acme", description="a"))
    with pytest.raises(AuthorizationException):
        await projects.update_project(project.id, OTHER, ProjectCreate(name="Mine", description="x"))
    with pytest.raises(AuthorizationException):
        await projects.delete_project(project.id, OTHER)


async def test_list_for_owner(projects) -> None:
    await projects.create_project(OWNER, ProjectCreate(name="One", description="a"))
    await projects.create_project(OTHER, ProjectCreate(name="Two", description="b"))
    mine = await projects.list_for_owner(OWNER)
    assert [p.name for p in mine] == ["One"]
    assert len(await projects.list_projects()) == 2


async def test_delete_project_cascades(projects, repos) -> None:
    project = await projects.create_project(OWNER, ProjectCreate(name="Acme", description="a"))
    batch = repos["threads"].new_batch()
    repos["threads"].stage_create(batch, "t1", {"projectId": project.id, "content": "x"})
    repos["responses"].stage_create(batch, "r1", {"threadId": "t1", "content": "y"})
    await batch.commit()

    await projects.delete_project(project.id, OWNER)
    assert await repos["projects"].get_by_id(project.id) is None
    assert await repos["threads"].get_by_id("t1") is None
    assert await repos["responses"].get_by_id("r1") is None
