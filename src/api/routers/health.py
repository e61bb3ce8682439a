"""Health check endpoints."""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_bookmark_service
from db.errors import StorageUnavailableError
from models.bookmark import utc_now
from services.bookmark_service import BookmarkService


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    profile: str
    bookmarks: int | None = None  # Total across all owners; None when the database is down
    timestamp: datetime  # Server time (UTC) when the check ran


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: BookmarkService = Depends(get_bookmark_service),
) -> HealthResponse:
    """Check application and database health."""
    db_status = "healthy"
    count = None
    try:
        await service.store.ping()
        count = await service.store.count()
    except StorageUnavailableError:
        logger.exception("Database health check failed")
        db_status = "unhealthy"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        database=db_status,
        profile=service.profile.name,
        bookmarks=count,
        timestamp=utc_now(),
    )
