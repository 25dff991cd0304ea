"""
Pytest fixtures for test database, client, mail and authentication.

Each test gets a fresh in-memory SQLite database, so tests never share rows.
"""

import os

# Must be set before eventhub reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("BASE_URL", "http://test")

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from eventhub.main import app
from eventhub.db.base import Base
from eventhub.db.session import build_engine, get_db
from eventhub.core.config import get_settings
from eventhub.core.exceptions import NotificationError
from eventhub.core.security import hash_password
from eventhub.models.user import User
from eventhub.models.event import Event
from eventhub.schemas.user import CurrentUser
from eventhub.services.notification_service import get_mailer
from eventhub.services.session_service import create_session

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "testpassword123"


class RecordingMailer:
    """Stands in for the SMTP mailer; optionally fails every send."""

    def __init__(self, fail: bool = False, error: Optional[Exception] = None):
        self.fail = fail
        self.error = error
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        if self.fail:
            raise NotificationError("SMTP delivery failed: connection refused")
        self.sent.append((to, subject, body))


@pytest_asyncio.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """One in-memory database per test, shared across connections via StaticPool."""
    test_engine = build_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, mailer: RecordingMailer) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB session and mailer dependencies."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db: AsyncSession, name: str, email: str, password: str = TEST_PASSWORD) -> User:
    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_event(db: AsyncSession, host: User, **overrides) -> Event:
    fields = {
        "title": "Test Meetup",
        "description": "A test event",
        "location": "Test Venue",
        "starts_at": "2030-06-01T18:00",
        "capacity": 100,
    }
    fields.update(overrides)
    event = Event(host_user_id=host.id, **fields)
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


async def log_in_as(client: AsyncClient, db: AsyncSession, user: User) -> None:
    """Give the client a session cookie for `user`, dropping any previous one."""
    token = await create_session(db, user.id)
    client.cookies.clear()
    client.cookies.set(get_settings().SESSION_COOKIE_NAME, token)


def as_current(user: User) -> CurrentUser:
    return CurrentUser.model_validate(user)


@pytest_asyncio.fixture
async def alice(db_session: AsyncSession) -> User:
    return await make_user(db_session, "Alice", "alice@x.com")


@pytest_asyncio.fixture
async def bob(db_session: AsyncSession) -> User:
    return await make_user(db_session, "Bob", "bob@x.com")


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, alice: User) -> Event:
    """An event hosted by Alice with 100 places."""
    return await make_event(db_session, alice)


@pytest_asyncio.fixture
async def alice_client(client: AsyncClient, db_session: AsyncSession, alice: User) -> AsyncClient:
    await log_in_as(client, db_session, alice)
    return client
