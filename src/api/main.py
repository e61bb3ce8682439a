"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import bookmarks, health
from core.config import get_settings
from db.bookmark_store import BookmarkStore
from db.errors import StorageUnavailableError
from services.bookmark_service import BookmarkService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - open the store at startup, close it at shutdown."""
    app_settings = get_settings()

    store = BookmarkStore.from_settings(app_settings)
    await store.open()
    service = BookmarkService.from_settings(store, app_settings)
    app.state.bookmark_store = store
    app.state.bookmark_service = service
    logger.info("Bookmark service started with '%s' profile", service.profile.name)

    try:
        yield
    finally:
        await store.close()


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Reduce validation errors to their JSON-safe location, message and type."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


app_settings = get_settings()

app = FastAPI(
    title="Post Bookmarks API",
    description="Capture social-media posts as bookmarks, de-duplicated per owner.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed requests as 400 invalid input."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid input", "errors": jsonable_errors(exc)},
    )


@app.exception_handler(StorageUnavailableError)
async def storage_exception_handler(
    _request: Request, exc: StorageUnavailableError,
) -> JSONResponse:
    """Storage failures fail the current request; the caller may retry."""
    logger.error("Request failed, storage unavailable: %s", exc)
    return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(bookmarks.router)
# Path used by the browser extension
app.include_router(bookmarks.router, prefix="/api/v1", include_in_schema=False)
