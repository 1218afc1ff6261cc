"""
Pytest fixtures for test database, client, and authentication.

Each test gets its own SQLite file under tmp_path, so tests are isolated
without a running database server. Every request gets a fresh session,
the same way production requests do.
"""

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings
from app.core.security import CredentialStore, TokenService
from app.db.base import Base
from app.db.session import get_db
from app.main import create_app
from app.models.attendee import Attendee
from app.models.event import Event
from app.models.user import User

TEST_SECRET_KEY = "test-secret-key-with-at-least-32-bytes-of-entropy"
TEST_PASSWORD = "testpassword123"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY=TEST_SECRET_KEY,
        PASSWORD_HASH_ROUNDS=1000,
        DB_OPERATION_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
def session_factory(app: FastAPI) -> async_sessionmaker[AsyncSession]:
    return app.state.sessionmaker


@pytest.fixture
def token_service(app: FastAPI) -> TokenService:
    return app.state.token_service


@pytest.fixture
def credential_store(app: FastAPI) -> CredentialStore:
    return app.state.credential_store


@pytest_asyncio.fixture(scope="function")
async def db_session(
    app: FastAPI,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session for fixtures, then dispose the engine."""
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        yield session

    await app.state.engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(
    app: FastAPI,
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a fresh session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _add_user(
    session: AsyncSession,
    credential_store: CredentialStore,
    email: str,
    name: str,
) -> User:
    user = User(email=email, name=name, password=credential_store.hash(TEST_PASSWORD))
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession, credential_store: CredentialStore) -> User:
    """Create a test user in the database."""
    return await _add_user(db_session, credential_store, "test@example.com", "Test User")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession, credential_store: CredentialStore) -> User:
    """A second user who owns nothing of test_user's."""
    return await _add_user(db_session, credential_store, "other@example.com", "Other User")


@pytest_asyncio.fixture
async def third_user(db_session: AsyncSession, credential_store: CredentialStore) -> User:
    return await _add_user(db_session, credential_store, "third@example.com", "Third User")


@pytest.fixture
def auth_headers(test_user: User, token_service: TokenService) -> dict:
    """Authorization headers with Bearer token for test_user."""
    return {"Authorization": f"Bearer {token_service.issue(test_user.id)}"}


@pytest.fixture
def other_auth_headers(other_user: User, token_service: TokenService) -> dict:
    return {"Authorization": f"Bearer {token_service.issue(other_user.id)}"}


async def _add_event(session: AsyncSession, owner: User, name: str) -> Event:
    event = Event(
        owner_id=owner.id,
        name=name,
        description="An event used by the test suite",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        location="Test Venue",
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_user: User) -> Event:
    """An event owned by test_user."""
    return await _add_event(db_session, test_user, "Test Concert")


@pytest_asyncio.fixture
async def other_event(db_session: AsyncSession, other_user: User) -> Event:
    """An event owned by other_user."""
    return await _add_event(db_session, other_user, "Other Meetup")


@pytest.fixture
def count_rows(session_factory: async_sessionmaker[AsyncSession]):
    """Count rows of a model in a fresh session, optionally filtered by column values."""

    async def _count(model, **filters) -> int:
        statement = select(func.count()).select_from(model)
        for column, value in filters.items():
            statement = statement.where(getattr(model, column) == value)
        async with session_factory() as session:
            return (await session.execute(statement)).scalar_one()

    return _count


@pytest.fixture
def add_attendee_row(session_factory: async_sessionmaker[AsyncSession]):
    async def _add(event_id: int, user_id: int) -> None:
        async with session_factory() as session:
            session.add(Attendee(event_id=event_id, user_id=user_id))
            await session.commit()

    return _add
