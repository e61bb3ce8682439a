"""Pytest fixtures for testing."""
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from db.bookmark_store import BookmarkStore
from services.bookmark_service import LENIENT_PROFILE, BookmarkService


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """A fresh file-backed SQLite database per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'bookmarks.db'}"


@pytest.fixture
async def store(database_url: str) -> AsyncGenerator[BookmarkStore]:
    """Create an opened store; closed after the test."""
    bookmark_store = BookmarkStore(database_url)
    await bookmark_store.open()
    yield bookmark_store
    await bookmark_store.close()


@pytest.fixture
def service(store: BookmarkStore) -> BookmarkService:
    """Create a service in the default (lenient) profile."""
    return BookmarkService(store, profile=LENIENT_PROFILE)


@pytest.fixture
async def client(service: BookmarkService) -> AsyncGenerator[AsyncClient]:
    """Create a test client wired to the test service."""
    from api.dependencies import get_bookmark_service
    from api.main import app

    app.dependency_overrides[get_bookmark_service] = lambda: service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
