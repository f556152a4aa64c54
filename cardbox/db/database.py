"""
Engine and per-request sessions.

One async engine per process. Each HTTP request gets its own session, and
the request is the unit of work: stores only flush, and the request either
commits as a whole or leaves nothing behind.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardbox.config import settings
from cardbox.models.db import Base

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield the session for one request.

    Everything the handler flushed is committed once it returns without
    error. A database error anywhere in the request, including the final
    commit, rolls the whole request back before propagating. Stores that
    already rolled back to report a conflict leave nothing to commit.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Create any missing tables. Existing tables are left as they are.

    Run by the application lifespan and by the promotion job.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
