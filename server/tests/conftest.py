"""Test configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tour_management.core.config import settings
from tour_management.core.database import Base, get_db
from tour_management.models import *  # noqa: F403 - Import all models
from tour_management.models import Manager
from tour_management.services.tour_repository import TourManagementRepository
from tour_management.services.tour_service import TourService

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def fallback_manager(test_session):
    """Persist the fallback manager the way application startup does."""
    manager = Manager(id=settings.fallback_manager_id, name=settings.fallback_manager_name)
    test_session.add(manager)
    await test_session.commit()
    return manager


@pytest_asyncio.fixture(scope="function")
async def tour_service(test_session, fallback_manager):
    """Tour service backed by the test session."""
    return TourService(TourManagementRepository(test_session))


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session, fallback_manager):
    """Create a test FastAPI application."""
    from fastapi import FastAPI

    from tour_management.core.exceptions import register_exception_handlers
    from tour_management.routers import metrics, tours

    # A simplified test app without lifespan, tracing or middleware
    app = FastAPI(
        title="Tour Management API (Test)",
        version="1.0.0-test",
    )

    register_exception_handlers(app)

    app.include_router(tours.router)
    app.include_router(metrics.router)

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def vendor():
    """Build vendor media types, e.g. vendor("tourwithshows")."""
    return settings.vendor_media_type


@pytest.fixture
def sample_tour_data():
    """Sample tour creation payload."""
    return {
        "name": "Northern Lights Tour",
        "description": "Arena shows across Scandinavia",
        "start_date": "2027-01-10",
        "end_date": "2027-02-20",
        "estimated_profits": 1250000.5,
    }


@pytest.fixture
def sample_shows_data():
    """Sample shows, in date order."""
    return [
        {"date": "2027-01-10", "venue": "Spektrum", "city": "Oslo", "country": "Norway"},
        {"date": "2027-01-14", "venue": "Avicii Arena", "city": "Stockholm", "country": "Sweden"},
    ]
