"""Tests for profile reads and owner-only edits."""

import pytest

from helpfromfounder.application.services import UserService
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)

ME = Identity.authenticated("u1", "User One")


@pytest.fixture
async def users(repos, policy) -> UserService:
    await repos["users"].create("u1", "u1@example.com", "User One")
    return UserService(repos["users"], policy)


async def test_update_own_profile(users) -> None:
    updated = await users.update_profile(ME, "u1", {
        "display_name": " <b>New</b> Name ",
        "github_url": "  https://github.com/u1 ",
        "twitter_url": "",
    })
    assert updated.display_name == "New Name"
    assert updated.github_url == "https://github.com/u1"
    assert updated.twitter_url is None


async def test_profile_edit_rules(users) -> None:
    with pytest.raises(AuthenticationException):
        await users.update_profile(Identity.anonymous("12345678", "Otter"), "u1", {"display_name": "x"})
    with pytest.raises(AuthorizationException):
        await users.update_profile(Identity.authenticated("u2"), "u1", {"display_name": "x"})
    with pytest.raises(ValidationException, match="Display name is required"):
        await users.update_profile(ME, "u1", {"display_name": "<i></i>"})
    with pytest.raises(ValidationException, match="Unknown profile field: email"):
        await users.update_profile(ME, "u1", {"email": "x@example.com"})


async def test_get_missing_user(users) -> None:
    with pytest.raises(ResourceNotFoundException):
        await users.get_user("ghost")
