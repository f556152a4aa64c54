"""
Promote a user to admin.

The HTTP API never lets a caller set the access level, so the first admin
(and any later one) is created with this job:

    cardbox-promote-admin someone@example.com
"""

import argparse
import asyncio
import logging

from cardbox.db.database import async_session_factory, init_db
from cardbox.models.failure import NotFoundError
from cardbox.services.users import user_store

logger = logging.getLogger(__name__)


async def promote(email: str) -> bool:
    """
    Promote the user with the given email.

    Returns:
        True if the user was promoted, False if no such user exists
    """
    await init_db()

    async with async_session_factory() as session:
        user = await user_store.find_by_email(session, email)
        if user is None:
            logger.error("No user with email %s", email)
            return False

        try:
            await user_store.make_admin(session, user.id)
        except NotFoundError:
            logger.error("User %s disappeared before promotion", email)
            return False
        await session.commit()

    return True


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Promote a user to admin")
    parser.add_argument("email", help="Email of the user to promote")
    args = parser.parse_args(argv)

    return 0 if asyncio.run(promote(args.email)) else 1


if __name__ == "__main__":
    raise SystemExit(main())
