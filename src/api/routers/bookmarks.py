"""Bookmark capture and retrieval endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_bookmark_service
from schemas.bookmark import (
    BookmarkCandidate,
    BookmarkDeleteResponse,
    BookmarkListResponse,
    BookmarkResponse,
    DuplicateBookmarkDetail,
)
from services.bookmark_service import BookmarkService
from services.exceptions import ConflictError, InvalidInputError, NotFoundError

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


# The extension posts to the collection path without a trailing slash
@router.post("", response_model=BookmarkResponse, status_code=201)
@router.post("/", response_model=BookmarkResponse, status_code=201, include_in_schema=False)
async def create_bookmark(
    data: BookmarkCandidate,
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkResponse:
    """
    Capture a bookmark from an extractor candidate.

    - **400** if `url` is missing (or `platform`, in the strict profile)
    - **409** if the URL is already bookmarked for the owner; the body includes the
      existing bookmark under `detail.existing`
    """
    try:
        bookmark = await service.create(data)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        existing = (
            BookmarkResponse.model_validate(e.existing) if e.existing is not None else None
        )
        detail = DuplicateBookmarkDetail(message=str(e), existing=existing)
        raise HTTPException(status_code=409, detail=detail.model_dump(mode="json"))
    return BookmarkResponse.model_validate(bookmark)


@router.get("", response_model=BookmarkListResponse)
@router.get("/", response_model=BookmarkListResponse, include_in_schema=False)
async def list_bookmarks(
    owner: str | None = Query(default=None, description="Owner whose bookmarks to list"),
    user_id: str | None = Query(
        default=None, alias="userId", description="Alias for `owner` used by the extension",
    ),
    limit: int | None = Query(default=None, description="Page size (clamped to the maximum)"),
    offset: int | None = Query(default=None, description="Pagination offset"),
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkListResponse:
    """
    List bookmarks for an owner, most recently captured first.

    `total` is the owner's full count regardless of `limit`/`offset`; `limit` and
    `offset` echo the effective values after defaults and clamping.
    """
    limit, offset = service.resolve_paging(limit, offset)
    page = await service.list(owner=owner or user_id, limit=limit, offset=offset)
    items = [BookmarkResponse.model_validate(b) for b in page.records]
    return BookmarkListResponse(
        records=items,
        total=page.total,
        limit=limit,
        offset=offset,
        has_more=offset + len(items) < page.total,
    )


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: str,
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    try:
        bookmark = await service.get_one(bookmark_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkResponse.model_validate(bookmark)


@router.delete("/{bookmark_id}", response_model=BookmarkDeleteResponse)
async def delete_bookmark(
    bookmark_id: str,
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkDeleteResponse:
    """Permanently delete a bookmark. Deleting an unknown or already-deleted id is a 404."""
    try:
        await service.remove(bookmark_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkDeleteResponse(id=bookmark_id)
