"""User API: public profiles and owner-only profile edits."""

from typing import Annotated

from fastapi import APIRouter, Depends

from helpfromfounder.api.v1.dependencies import IdentityDep, get_user_service
from helpfromfounder.application.services import UserService
from helpfromfounder.schemas.user import UserResponse, UserUpdateRequest

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.patch("/me", response_model=UserResponse)
async def update_me(body: UserUpdateRequest, identity: IdentityDep, users: UserServiceDep):
    """Edit the caller's profile (displayName, photoURL, social links)."""
    changes = body.model_dump(exclude_unset=True)
    updated = await users.update_profile(identity, identity.user_id or "", changes)
    return UserResponse.model_validate(updated)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, users: UserServiceDep):
    """Public profile by id."""
    return UserResponse.model_validate(await users.get_user(user_id))
