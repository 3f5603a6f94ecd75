# src/snippetbin/api/v1/endpoints/users.py
"""User listing and profile endpoints."""

from dataclasses import asdict

from fastapi import APIRouter

from snippetbin.api.v1.dependencies import AuthServiceDep
from snippetbin.schemas.user import (
    ProfileOut,
    ProfileUpdateRequest,
    UserListResponse,
    UserSummary,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse)
def list_users(auth: AuthServiceDep) -> UserListResponse:
    """List accounts without password hashes or second-factor secrets."""
    return UserListResponse(
        users=[UserSummary.model_validate(user) for user in auth.list_users()]
    )


@router.get("/{user_id}/profile", response_model=ProfileOut)
def get_profile(user_id: str, auth: AuthServiceDep) -> ProfileOut:
    """Return a user's profile; users without one get the defaults."""
    return ProfileOut(**asdict(auth.get_profile(user_id)))


@router.put("/{user_id}/profile", response_model=ProfileOut)
def update_profile(
    user_id: str,
    payload: ProfileUpdateRequest,
    auth: AuthServiceDep,
) -> ProfileOut:
    """Update the fields present in the request body."""
    profile = auth.update_profile(
        user_id,
        bio=payload.bio,
        avatar_url=payload.avatar_url,
        theme=payload.theme,
    )
    return ProfileOut(**asdict(profile))
