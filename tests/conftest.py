"""
Shared fixtures.

Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool,
so every session shares one connection), seeded with the default pages
and role permissions.  The app's `get_db` is overridden to use it.

Test code and the app share that connection: helpers commit what they
create, and tests `refresh` objects before asserting on stored state.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SEED_ON_STARTUP"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backoffice.core.database import get_db  # noqa: E402
from backoffice.main import app  # noqa: E402
from backoffice.models import Base  # noqa: E402
from backoffice.rbac.permission_seed import seed  # noqa: E402


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """A seeded session for arranging data and inspecting results."""
    async with session_factory() as session:
        await seed(session)
        yield session


@pytest.fixture
async def client(session_factory, db):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
