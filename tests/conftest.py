import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardbox.config import settings
from cardbox.db.database import get_session
from cardbox.main import app
from cardbox.models.db import Base, UserDB
from cardbox.services.auth import generate_access_token
from cardbox.services.users import user_store

ADMIN = {"name": "A", "email": "a@a.com", "password": "aaa"}
REGULAR = {"name": "B", "email": "b@b.com", "password": "bbb"}


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the cheapest bcrypt cost so hashing does not dominate test time."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Provide an async test client with overridden database session."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_user(session_factory) -> UserDB:
    async with session_factory() as session:
        user = await user_store.create(session, ADMIN)
        user = await user_store.make_admin(session, user.id)
        await session.commit()
    return user


@pytest.fixture
async def regular_user(session_factory) -> UserDB:
    async with session_factory() as session:
        user = await user_store.create(session, REGULAR)
        await session.commit()
    return user


@pytest.fixture
def admin_headers(admin_user: UserDB) -> dict[str, str]:
    return {"Authorization": f"Bearer {generate_access_token(admin_user.id)}"}


@pytest.fixture
def regular_headers(regular_user: UserDB) -> dict[str, str]:
    return {"Authorization": f"Bearer {generate_access_token(regular_user.id)}"}
