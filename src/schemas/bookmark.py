"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)

from models.bookmark import (
    IDENTIFIER_MAX_LENGTH,
    MEDIA_TYPE_MAX_LENGTH,
    PLATFORM_MAX_LENGTH,
    TIMESTAMP_MAX_LENGTH,
)

# Bounded fields and the size of the column each is stored in
FIELD_MAX_LENGTHS = {
    "platform": PLATFORM_MAX_LENGTH,
    "media_type": MEDIA_TYPE_MAX_LENGTH,
    "timestamp": TIMESTAMP_MAX_LENGTH,
    "post_id": IDENTIFIER_MAX_LENGTH,
    "author_name": IDENTIFIER_MAX_LENGTH,
    "author_handle": IDENTIFIER_MAX_LENGTH,
    "author_username": IDENTIFIER_MAX_LENGTH,
    "owner": IDENTIFIER_MAX_LENGTH,
}


def _optional(*names: str) -> Any:
    """Optional string field accepting any of the given input keys."""
    return Field(default=None, validation_alias=AliasChoices(*names))


class BookmarkCandidate(BaseModel):
    """
    Candidate record produced by the page extractor.

    Accepts the extractor's camelCase keys as well as snake_case. Unknown keys are
    ignored. Which fields are required (url always, platform in the strict profile) is
    decided by the service, not here, so a missing url surfaces as invalid input rather
    than a schema error.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: str | None = None
    platform: str | None = None
    post_id: str | None = _optional("post_id", "postId")
    caption: str | None = None
    author_name: str | None = _optional("author_name", "authorName")
    author_handle: str | None = _optional("author_handle", "authorHandle")
    author_username: str | None = _optional("author_username", "authorUsername")
    media_urls: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("media_urls", "mediaUrls"),
    )
    media_type: str | None = _optional("media_type", "mediaType")
    timestamp: str | None = None
    owner: str | None = _optional("owner", "userId", "user_id")

    @field_validator(
        "url", "platform", "post_id", "caption", "author_name", "author_handle",
        "author_username", "media_type", "timestamp", "owner",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty and whitespace-only strings as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(*FIELD_MAX_LENGTHS)
    @classmethod
    def validate_length(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Validate that a bounded field fits its column."""
        max_length = FIELD_MAX_LENGTHS[info.field_name]
        if v is not None and len(v) > max_length:
            raise ValueError(
                f"{info.field_name} exceeds maximum length of {max_length} characters "
                f"(got {len(v)} characters).",
            )
        return v

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str | None) -> str | None:
        """Strip surrounding whitespace from the URL."""
        return v.strip() if v is not None else None

    @field_validator("media_urls", mode="before")
    @classmethod
    def coerce_media_urls(cls, v: Any) -> Any:
        """Accept null (no media) or a single URL string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class BookmarkResponse(BaseModel):
    """Schema for a persisted bookmark."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    platform: str
    post_id: str | None
    caption: str | None
    author_name: str | None
    author_handle: str | None
    author_username: str | None
    media_urls: list[str]
    media_type: str | None
    timestamp: str | None  # Original post time, as reported by the page
    captured_at: datetime
    owner: str


class BookmarkListResponse(BaseModel):
    """Schema for paginated bookmark list responses."""

    records: list[BookmarkResponse]
    total: int  # Total count for the owner (before pagination)
    limit: int  # Effective page size after clamping
    offset: int  # Current pagination offset
    has_more: bool  # True if there are more results beyond this page


class BookmarkDeleteResponse(BaseModel):
    """Confirmation returned after a bookmark is removed."""

    ok: bool = True
    id: UUID


class DuplicateBookmarkDetail(BaseModel):
    """Error detail for 409 responses; carries the bookmark that already exists."""

    error: str = "duplicate_url"
    message: str
    existing: BookmarkResponse | None = None
