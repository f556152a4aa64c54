"""
Identity and credential store.

Users go through the generic store like every other resource, with email,
password and access level protected from the generic update path. The
password is hashed explicitly before insert; the stored record never holds
the plain text.
"""

import logging
from typing import Any, Literal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbox.db.crud import ResourceStore
from cardbox.models.db import UserDB
from cardbox.models.fields import UserFields
from cardbox.services.auth import hash_password, verify_password

logger = logging.getLogger(__name__)

AccessLevel = Literal["regular", "admin"]

ADMIN_LEVEL: AccessLevel = "admin"


class UserStore(ResourceStore[UserDB]):
    def __init__(self) -> None:
        super().__init__(UserDB, UserFields, non_updatable=("email", "password", "level"))

    async def create(self, session: AsyncSession, fields: Any) -> UserDB:
        """
        Create a user with a hashed password.

        Any `level` in the payload is ignored; see make_admin().
        """
        values = self.validate(fields)
        values["password"] = hash_password(values["password"])
        return await self.insert(session, values)

    async def find_by_email(self, session: AsyncSession, email: str) -> UserDB | None:
        result = await session.execute(select(UserDB).where(UserDB.email == email))
        return result.scalar_one_or_none()

    async def authenticate(self, session: AsyncSession, email: str, password: str) -> UserDB | None:
        """
        Get the user with these credentials.

        Returns None for an unknown email and for a wrong password alike.
        """
        user = await self.find_by_email(session, email)
        if user is None or not verify_password(password, user.password):
            return None
        return user

    async def make_admin(self, session: AsyncSession, user_id: Any) -> UserDB:
        """
        Promote a user to the admin access level.

        This is the only way `level` is ever written.
        """
        user = await self.get_or_fail(session, user_id)
        user.level = ADMIN_LEVEL
        await self.flush(session)
        logger.info("Promoted user %s to admin", user.id)
        return user


def is_admin(user: UserDB) -> bool:
    return user.level == ADMIN_LEVEL


user_store = UserStore()
