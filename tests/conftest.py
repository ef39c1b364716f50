import os
from collections.abc import AsyncGenerator
from unittest.mock import MagicMock

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-not-for-production")
os.environ.setdefault("EMAIL_FROM", "noreply@handsofhope.test")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from hands_of_hope.core.exceptions import EmailDeliveryException  # noqa: E402
from hands_of_hope.core.redis_client import get_redis_client  # noqa: E402
from hands_of_hope.core.security import pwd_context  # noqa: E402
from hands_of_hope.database import get_db  # noqa: E402
from hands_of_hope.main import app  # noqa: E402
from hands_of_hope.models import metadata  # noqa: E402
from hands_of_hope.services.admin_service import AdminService  # noqa: E402
from hands_of_hope.services.auth_service import AuthService  # noqa: E402
from hands_of_hope.services.email_service import EmailService, get_email_service  # noqa: E402

# Cheap hashes keep the suite fast
pwd_context.update(bcrypt__rounds=4)

SUPER_ADMIN_PASSWORD = "RootPass1"
ADMIN_PASSWORD = "AlicePass1"


class RecordingEmailService(EmailService):
    """Email sender that records messages instead of talking SMTP."""

    def __init__(self):
        super().__init__(
            hostname="localhost",
            port=25,
            sender="noreply@handsofhope.test",
            inbox="team@handsofhope.test",
        )
        self.sent: list[dict] = []
        self.fail = False

    async def send_email(self, to, subject, html, bcc=None) -> None:
        if self.fail:
            raise EmailDeliveryException()
        self.sent.append({"to": to, "subject": subject, "html": html, "bcc": list(bcc or [])})


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory database shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def email_service() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def redis_mock() -> MagicMock:
    """Redis stand-in: every cache lookup misses, rate limits never trip."""
    mock_redis = MagicMock()
    mock_redis.get.return_value = None
    return mock_redis


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    email_service: RecordingEmailService,
    redis_mock: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_redis_client] = lambda: redis_mock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def super_admin(db_session: AsyncSession) -> dict:
    """The super-admin account 'root'."""
    return await AdminService.create_super_admin(
        db_session, "root", "root@handsofhope.test", SUPER_ADMIN_PASSWORD
    )


@pytest_asyncio.fixture
async def regular_admin(db_session: AsyncSession, super_admin: dict) -> dict:
    """A regular admin 'alice' created by the super-admin."""
    return await AdminService.add_admin(
        db_session, "root", "alice", "alice@handsofhope.test", ADMIN_PASSWORD
    )


def _bearer(admin: dict) -> dict:
    token = AuthService().create_token(admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def super_admin_headers(super_admin: dict) -> dict:
    return _bearer(super_admin)


@pytest.fixture
def admin_headers(regular_admin: dict) -> dict:
    return _bearer(regular_admin)
