"""FastAPI dependencies for injection."""
from fastapi import Request

from core.config import get_settings
from db.bookmark_store import BookmarkStore
from services.bookmark_service import BookmarkService


def get_bookmark_store(request: Request) -> BookmarkStore:
    """Return the store opened by the application lifespan."""
    return request.app.state.bookmark_store


def get_bookmark_service(request: Request) -> BookmarkService:
    """Return the service built by the application lifespan."""
    return request.app.state.bookmark_service


__all__ = [
    "get_bookmark_service",
    "get_bookmark_store",
    "get_settings",
]
