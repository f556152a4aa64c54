"""
User API endpoints.

Admin-only management of user accounts. Responses never include the
password hash.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from cardbox.api.deps import SessionDep, load_record, require_admin
from cardbox.api.schemas import UserResponse
from cardbox.models.db import UserDB
from cardbox.services.users import user_store

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


async def _load_user(user_id: str, session: SessionDep) -> UserDB:
    return await load_record(user_store, session, user_id)


UserDep = Annotated[UserDB, Depends(_load_user)]


@router.get("", response_model=list[UserResponse])
async def list_users(
    session: SessionDep,
    skip: int | None = None,
    limit: int | None = None,
) -> list[UserResponse]:
    users = await user_store.list(session, skip, limit)
    return [UserResponse.model_validate(user) for user in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: Annotated[dict[str, Any], Body()],
    session: SessionDep,
) -> UserResponse:
    """
    Create a user.

    `email` and `password` are required. A `level` in the body is ignored;
    admins are promoted out of band.
    """
    user = await user_store.create(session, payload)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user: UserDep) -> UserResponse:
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user: UserDep,
    payload: Annotated[dict[str, Any], Body()],
    session: SessionDep,
) -> UserResponse:
    """
    Update a user.

    Email, password and access level never change through this endpoint.
    """
    updated = await user_store.update(session, user.id, payload)
    return UserResponse.model_validate(updated)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(user: UserDep, session: SessionDep) -> UserResponse:
    await user_store.delete(session, user.id)
    return UserResponse.model_validate(user)
