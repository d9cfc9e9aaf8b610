"""Service test fixtures — async DB, seeded admin and FastAPI test clients.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - db_manager patched so the readiness check sees the test engine
    - Outgoing mail is captured by a LoggingMailSender, never sent

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection, so rows
      committed by a route are visible to the test session
    - `client` authenticates as a Super Admin principal without a token;
      `anon_client` keeps the real bearer-token dependency for auth tests
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import tradedesk.infrastructure.database as db_module
from tradedesk.api.auth import get_current_user, principal_for
from tradedesk.db.base import Base
from tradedesk.infrastructure.database import DatabaseSessionManager, get_db
from tradedesk.infrastructure.mail import LoggingMailSender, get_mail_sender
from tradedesk.infrastructure.security import hash_password
from tradedesk.main import app
from tradedesk.models.user import Role, User

ADMIN_PASSWORD = "admin-password"


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
async def admin_user(test_db):
    role = Role(name="Super Admin", permissions=[])
    user = User(
        email="admin@tradedesk.io",
        password_hash=hash_password(ADMIN_PASSWORD),
        first_name="Ada",
        status="ACTIVE",
        role=role,
    )
    test_db.add_all([role, user])
    await test_db.commit()
    return user


@pytest.fixture
def admin_principal(admin_user):
    return principal_for(admin_user)


@pytest.fixture
async def make_user(test_db):
    """Factory for plain users: await make_user("bob@x.io")."""

    async def _make(email: str, **fields) -> User:
        fields.setdefault("status", "ACTIVE")
        fields.setdefault("role", None)
        user = User(email=email, **fields)
        test_db.add(user)
        await test_db.commit()
        return user

    return _make


@pytest.fixture
def mail_sender():
    return LoggingMailSender()


@pytest.fixture
async def anon_client(test_engine, test_session_factory, mail_sender):
    """FastAPI test client with DB and mail dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_sender] = lambda: mail_sender

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
async def client(anon_client, admin_principal):
    """Test client acting as the seeded Super Admin."""
    app.dependency_overrides[get_current_user] = lambda: admin_principal
    return anon_client
