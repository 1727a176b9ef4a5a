"""Endpoints for the authenticated user's own account."""

from __future__ import annotations

from fastapi import APIRouter

from notekeeper.api.v1.dependencies import AccountServiceDep, CurrentUserDep
from notekeeper.schemas.common import MessageResponse
from notekeeper.schemas.user import UpdatePasswordRequest, UpdateProfileRequest, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_my_profile(current_user: CurrentUserDep) -> UserResponse:
    """Return the profile of the authenticated user."""
    return UserResponse.model_validate(current_user)


@router.patch("/update-password", response_model=MessageResponse)
async def update_password(
    payload: UpdatePasswordRequest,
    current_user: CurrentUserDep,
    accounts: AccountServiceDep,
) -> MessageResponse:
    """Change the password after checking the current one."""
    message = await accounts.update_password(
        current_user.id,
        payload.current_password,
        payload.new_password,
        payload.confirm_password,
    )
    return MessageResponse(message=message)


@router.patch("/update-profile", response_model=UserResponse)
async def update_profile(
    payload: UpdateProfileRequest,
    current_user: CurrentUserDep,
    accounts: AccountServiceDep,
) -> UserResponse:
    """Change username and/or e-mail address."""
    user = await accounts.update_profile(current_user.id, payload.username, payload.email)
    return UserResponse.model_validate(user)
