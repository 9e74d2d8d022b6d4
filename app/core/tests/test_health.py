"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.core.health import HealthResponse
from app.main import app


@pytest.fixture
def mock_session():
    """Override the database dependency with a mock session."""
    session = AsyncMock()

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    yield session
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_home_reports_running(client):
    """Home endpoint should confirm the service is up."""
    response = await client.get("/home")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "is running" in response.text


@pytest.mark.asyncio
async def test_health_check_returns_ok(client):
    """Health endpoint should return status ok."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"


@pytest.mark.asyncio
async def test_health_check_includes_request_id_header(client):
    """Health endpoint should include X-Request-ID in response."""
    response = await client.get("/health")

    assert "X-Request-ID" in response.headers
    assert len(response.headers["X-Request-ID"]) > 0


@pytest.mark.asyncio
async def test_readiness_reports_connected_database(client, mock_session):
    """Readiness should report a reachable database."""
    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected"}
    mock_session.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_readiness_reports_disconnected_database(client, mock_session):
    """Readiness should degrade instead of failing when the database is down."""
    mock_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "unhealthy", "database": "disconnected"}


def test_health_status_is_ok_or_unhealthy():
    """Only the two statuses the probes report are valid."""
    assert HealthResponse(status="ok").status == "ok"
    with pytest.raises(ValidationError):
        HealthResponse(status="degraded")
