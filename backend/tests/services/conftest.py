"""Service test fixtures — async DB, page cache, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and get_page_cache overridden for route tests
    - `client` is signed in (require_user overridden); `anon_client` is not
    - db_manager patched so readiness probes see the test engine

Design Decisions:
    - SQLite in-memory with StaticPool: all sessions share one connection, so rows written
      through one session are visible to assertions made through another
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from dashboard.api.dependencies import require_user
from dashboard.core.domain_types import UserId
from dashboard.db.base import Base
from dashboard.infrastructure.auth import hash_password
from dashboard.infrastructure.database import get_db, DatabaseSessionManager
from dashboard.infrastructure.page_cache import get_page_cache
from dashboard.models.customer import Customer
from dashboard.models.user import User
import dashboard.models  # noqa: F401
import dashboard.infrastructure.database as db_module
from dashboard.main import app
from tests.services.fakes import RecordingCache

SIGNED_IN_USER = UserId(uuid.UUID("410544b2-4001-4271-9855-fec4b6a6442a"))


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def cache():
    return RecordingCache()


@pytest.fixture
async def seed_customer(test_db):
    customer = Customer(
        name="Evil Rabbit", email="evil@rabbit.com",
        image_url="/customers/evil-rabbit.png",
    )
    test_db.add(customer)
    await test_db.commit()
    await test_db.refresh(customer)
    return customer


@pytest.fixture
async def seed_user(test_db):
    user = User(
        name="User", email="user@nextmail.com",
        password=await hash_password("123456", rounds=4),
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
async def anon_client(test_engine, test_session_factory, cache):
    """FastAPI test client with DB and cache overridden, no signed-in user."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_page_cache] = lambda: cache

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def client(anon_client):
    """Same as anon_client, but dashboard routes see a signed-in user."""
    app.dependency_overrides[require_user] = lambda: SIGNED_IN_USER
    yield anon_client
