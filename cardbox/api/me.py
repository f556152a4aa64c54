"""Endpoint for the authenticated user's own account."""

from fastapi import APIRouter

from cardbox.api.deps import CurrentUser
from cardbox.api.schemas import UserResponse

router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=UserResponse)
async def get_me(user: CurrentUser) -> UserResponse:
    """Get the account the bearer token was issued to."""
    return UserResponse.model_validate(user)
