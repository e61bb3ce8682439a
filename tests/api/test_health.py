"""Tests for the health check endpoint."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock

from httpx import AsyncClient

from db.bookmark_store import BookmarkStore
from db.errors import StorageUnavailableError
from services.bookmark_service import BookmarkService


async def test_health_endpoint_returns_200(client: AsyncClient) -> None:
    """Test that the health endpoint returns 200 OK."""
    response = await client.get("/health")
    assert response.status_code == 200


async def test_health_endpoint_returns_healthy_status(client: AsyncClient) -> None:
    """Test that the health endpoint reports a healthy database and the record count."""
    response = await client.get("/health")
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert data["profile"] == "lenient"
    assert data["bookmarks"] == 0


async def test_health_endpoint_reports_server_time(client: AsyncClient) -> None:
    """Test that the response carries the current UTC time."""
    before = datetime.now(UTC)
    response = await client.get("/health")
    after = datetime.now(UTC)

    checked_at = datetime.fromisoformat(response.json()["timestamp"])
    assert checked_at.utcoffset() is not None
    assert before <= checked_at <= after


async def test_health_endpoint_counts_bookmarks(client: AsyncClient) -> None:
    """Test that the count covers every owner."""
    await client.post("/bookmarks/", json={"url": "https://instagram.com/p/A/", "owner": "a"})
    await client.post("/bookmarks/", json={"url": "https://instagram.com/p/B/", "owner": "b"})

    response = await client.get("/health")
    assert response.json()["bookmarks"] == 2


async def test_health_endpoint_degraded_when_database_down(client: AsyncClient) -> None:
    """Test that an unreachable database degrades health instead of failing it."""
    from api.dependencies import get_bookmark_service
    from api.main import app

    store = AsyncMock(spec=BookmarkStore)
    store.ping.side_effect = StorageUnavailableError("unable to open database file")
    app.dependency_overrides[get_bookmark_service] = lambda: BookmarkService(store)

    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["database"] == "unhealthy"
    assert data["bookmarks"] is None
