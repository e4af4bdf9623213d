"""Shared fixtures: an in-memory SQLite database and seeded profiles."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import fielddesk.models  # noqa: F401
from fielddesk.database import Base
from fielddesk.models.profile import Role, UserProfile
from fielddesk.services.access_filter import SessionContext


def make_profile(user_id: str, role: Role = Role.FIELD_AGENT, full_name: str = "Field Agent") -> UserProfile:
    return UserProfile(
        user_id=user_id,
        email=f"{user_id}@example.com",
        hashed_password="not-a-real-hash",
        full_name=full_name,
        role=role,
        status="active",
    )


@pytest.fixture
def admin_ctx():
    return SessionContext.from_profile(make_profile("admin-1", Role.ADMIN, "Asha Rao"))


@pytest.fixture
def agent_ctx():
    return SessionContext.from_profile(make_profile("agent-1", full_name="Vikram Singh"))


@pytest.fixture
def other_agent_ctx():
    return SessionContext.from_profile(make_profile("agent-2", full_name="Meera Nair"))


@pytest.fixture
def anonymous_ctx():
    return SessionContext.from_profile(None)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def profiles(db):
    """Persisted admin + two field agents, keyed by role label."""
    seeded = {
        "admin": make_profile("admin-1", Role.ADMIN, "Asha Rao"),
        "agent": make_profile("agent-1", full_name="Vikram Singh"),
        "other": make_profile("agent-2", full_name="Meera Nair"),
    }
    db.add_all(seeded.values())
    await db.commit()
    return seeded
