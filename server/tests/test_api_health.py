"""API health tests against the fully configured application."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from tour_management.core.config import settings
from tour_management.core.database import get_db
from tour_management.main import create_app


@pytest_asyncio.fixture
async def app_client(test_session):
    """Client for create_app() with the database swapped for the test session."""
    app = create_app()

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_api_health_endpoints(app_client):
    """Test the health, readiness and info endpoints."""
    response = await app_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "tour-management-api"

    response = await app_client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"] == {"database": "ok"}

    response = await app_client.get("/info")
    assert response.status_code == 200
    data = response.json()
    assert data["fallback_manager_id"] == str(settings.fallback_manager_id)
    assert settings.vendor_media_type("tourwithshows") in data["media_types"]["read"]
    assert "application/json" in data["media_types"]["create"]


@pytest.mark.asyncio
async def test_request_id_header(app_client):
    """Responses echo the caller's request ID."""
    response = await app_client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["x-request-id"] == "abc-123"


@pytest.mark.asyncio
async def test_metrics_endpoint(app_client):
    """Test the metrics endpoint."""
    await app_client.get("/health")

    response = await app_client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "http_requests_total" in response.text


@pytest.mark.asyncio
async def test_openapi_docs(app_client):
    """OpenAPI docs are served in development."""
    response = await app_client.get("/docs")
    assert response.status_code == (200 if settings.debug else 404)


class UnreachableDatabaseSession:
    """Session stand-in whose queries fail as if the database were down."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.mark.asyncio
async def test_ready_unavailable_when_database_down():
    """Readiness answers 503 when the database does not respond."""
    app = create_app()

    async def override_get_db():
        yield UnreachableDatabaseSession()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "degraded"
    assert data["checks"] == {"database": "failed"}
