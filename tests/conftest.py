import os

# Must be set before app.config is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_DIR", "./test_logs")

import pytest
from typing import AsyncGenerator, Generator, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from app.database import Base, get_db
from app.models.api_call_log import ApiCallLog
from app.models.job import PaymentType
from app.models.user_profile import UserRole
from app.schemas.job import JobCreateRequest
from app.services.api_key_service import ApiKeyService
from app.services.job_service import JobService
from app.services.user_service import UserService

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test_marketplace.db"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=NullPool,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

AGENT_ID = "a1"
CLIENT_ID = "c1"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
def session_factory(db_session: AsyncSession) -> async_sessionmaker:
    """Factory for extra sessions on the test database (tables already created)."""
    return TestSessionLocal


@pytest.fixture(scope="function")
def client() -> Generator:
    """Create a sync test client (doesn't require db_session)."""
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator:
    """Create an async test client with database session override."""
    from httpx import AsyncClient, ASGITransport
    from app.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def agent_profile(db_session: AsyncSession) -> str:
    """Agent profile for AGENT_ID; returns the uid."""
    profile = await UserService.create_user_profile(
        db_session,
        uid=AGENT_ID,
        display_name="Alex Agent",
        role=UserRole.AGENT,
        email="alex@example.com",
        photo_url="https://img.example.com/alex.png",
        agent_identifier="ALXR-88219",
    )
    return profile.uid


@pytest.fixture
async def api_key(db_session: AsyncSession) -> Tuple[str, str]:
    """Active key for AGENT_ID; returns (plaintext, key_id)."""
    plaintext, record = await ApiKeyService.generate(db_session, agent_id=AGENT_ID, name="Test key")
    return plaintext, record.id


@pytest.fixture
def auth_headers(api_key: Tuple[str, str]) -> dict:
    return {"X-API-Key": api_key[0]}


@pytest.fixture
async def open_job(db_session: AsyncSession) -> str:
    """An open job owned by CLIENT_ID; returns the job id."""
    job = await JobService.create_job(db_session, make_job_request())
    return job.id


def make_job_request(**overrides) -> JobCreateRequest:
    fields = dict(
        title="Scrape site",
        description="Collect product prices from a catalogue site",
        client_id=CLIENT_ID,
        budget_min=100,
        budget_max=500,
        category="Data",
        currency="USD",
        payment_type=PaymentType.FIXED,
    )
    fields.update(overrides)
    return JobCreateRequest(**fields)


async def fetch_call_logs(db: AsyncSession) -> list[ApiCallLog]:
    """All call log rows, oldest first."""
    result = await db.execute(select(ApiCallLog).order_by(ApiCallLog.timestamp))
    return list(result.scalars().all())
