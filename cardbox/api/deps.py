"""
Request dependencies: authentication gates and record loaders.

Two gates protect the route groups. `require_user` accepts any valid token
whose identity exists; `require_admin` additionally needs the admin access
level. Every failure answers 401. A non-admin is not told apart from an
unknown identity.
"""

import logging
from typing import Annotated, Any, TypeVar

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbox.db.crud import ResourceStore
from cardbox.db.database import get_session
from cardbox.models.db import Base, UserDB
from cardbox.models.failure import (
    IdentityLookupError,
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from cardbox.services.auth import decode_access_token
from cardbox.services.users import is_admin, user_store

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


async def _resolve_identity(
    session: AsyncSession,
    credentials: HTTPAuthorizationCredentials | None,
) -> UserDB:
    if credentials is None:
        raise UnauthenticatedError("Unauthorized", detail="Missing bearer token")

    uid = decode_access_token(credentials.credentials)

    try:
        user = await user_store.find_by_id(session, uid)
    except InvalidArgumentError as e:
        raise UnauthenticatedError("Unauthorized", detail="Invalid token") from e
    except SQLAlchemyError as e:
        logger.warning("Identity lookup failed for uid %s", uid, exc_info=True)
        raise IdentityLookupError("Unauthorized", detail="Identity lookup failed") from e

    if user is None:
        raise UnauthenticatedError("Unauthorized")
    return user


async def require_user(session: SessionDep, credentials: CredentialsDep) -> UserDB:
    """Authenticate any user holding a valid token."""
    return await _resolve_identity(session, credentials)


async def require_admin(session: SessionDep, credentials: CredentialsDep) -> UserDB:
    """Authenticate a user with the admin access level."""
    user = await _resolve_identity(session, credentials)
    if not is_admin(user):
        raise UnauthenticatedError("Unauthorized")
    return user


CurrentUser = Annotated[UserDB, Depends(require_user)]


async def load_record(
    store: ResourceStore[ModelT],
    session: AsyncSession,
    record_id: Any,
) -> ModelT:
    """
    Load a record named by a path parameter.

    A malformed id cannot name any record, so it is reported as not found.
    """
    try:
        record = await store.find_by_id(session, record_id)
    except InvalidArgumentError:
        record = None

    if record is None:
        raise NotFoundError(f"{store.name} not found", detail=f"id={record_id}")
    return record
