"""
Login endpoint.

Exchanges email and password for an access token. Every credential problem
(missing field, unknown email, wrong password) is the same 401.
"""

from fastapi import APIRouter

from cardbox.api.deps import SessionDep
from cardbox.api.schemas import LoginRequest, LoginResponse
from cardbox.models.failure import UnauthenticatedError
from cardbox.services.auth import generate_access_token
from cardbox.services.users import user_store

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, session: SessionDep) -> LoginResponse:
    if not request.email or not request.password:
        raise UnauthenticatedError("Unauthorized", detail="Email and password are required")

    user = await user_store.authenticate(session, request.email, request.password)
    if user is None:
        raise UnauthenticatedError("Unauthorized", detail="Invalid credentials")

    return LoginResponse(auth=True, uid=user.id, token=generate_access_token(user.id))
