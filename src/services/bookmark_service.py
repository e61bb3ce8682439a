"""Service layer for bookmark capture and retrieval."""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from core.config import Settings
from db.bookmark_store import BookmarkPage, BookmarkStore, NewBookmark
from db.errors import ConstraintViolationError
from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCandidate
from services.exceptions import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

AUTHOR_FIELDS = ("author_name", "author_handle", "author_username")


@dataclass(frozen=True)
class BookmarkProfile:
    """
    Validation profile for incoming candidates.

    Two deployments of the extractor disagree on whether platform is mandatory and
    on how the author is identified. Each is kept as its own profile rather than
    merging their rules.
    """

    name: str
    require_platform: bool
    author_fields: tuple[str, ...]


LENIENT_PROFILE = BookmarkProfile(
    name="lenient",
    require_platform=False,
    author_fields=AUTHOR_FIELDS,
)
STRICT_PROFILE = BookmarkProfile(
    name="strict",
    require_platform=True,
    author_fields=("author_name", "author_handle"),
)
PROFILES = {profile.name: profile for profile in (LENIENT_PROFILE, STRICT_PROFILE)}


def _format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single line."""
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "body"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class BookmarkService:
    """
    Validates, de-duplicates and persists bookmark candidates.

    Stateless apart from its configuration; all shared state lives in the store.
    """

    def __init__(
        self,
        store: BookmarkStore,
        profile: BookmarkProfile = LENIENT_PROFILE,
        default_platform: str = "instagram",
        default_owner: str = "default",
        default_limit: int = 50,
    ) -> None:
        self._store = store
        self._profile = profile
        self._default_platform = default_platform
        self._default_owner = default_owner
        self._default_limit = default_limit

    @classmethod
    def from_settings(cls, store: BookmarkStore, settings: Settings) -> "BookmarkService":
        """Build a service for the profile and defaults named in settings."""
        return cls(
            store,
            profile=PROFILES[settings.bookmark_profile],
            default_platform=settings.default_platform,
            default_owner=settings.default_owner,
            default_limit=settings.default_page_size,
        )

    @property
    def profile(self) -> BookmarkProfile:
        """The active validation profile."""
        return self._profile

    @property
    def store(self) -> BookmarkStore:
        """The store this service delegates to."""
        return self._store

    def _parse(self, candidate: BookmarkCandidate | Mapping[str, Any]) -> BookmarkCandidate:
        if isinstance(candidate, BookmarkCandidate):
            return candidate
        try:
            return BookmarkCandidate.model_validate(candidate)
        except ValidationError as e:
            raise InvalidInputError(_format_validation_error(e)) from e

    def _build_record(self, candidate: BookmarkCandidate) -> NewBookmark:
        """Validate against the active profile and apply defaults."""
        if not candidate.url:
            raise InvalidInputError("url required")
        if self._profile.require_platform and not candidate.platform:
            raise InvalidInputError("platform required")

        # Author fields outside the profile are treated like unknown keys
        authors = {
            name: getattr(candidate, name) if name in self._profile.author_fields else None
            for name in AUTHOR_FIELDS
        }
        return NewBookmark(
            url=candidate.url,
            platform=candidate.platform or self._default_platform,
            owner=candidate.owner or self._default_owner,
            post_id=candidate.post_id,
            caption=candidate.caption,
            media_urls=list(candidate.media_urls),
            media_type=candidate.media_type,
            timestamp=candidate.timestamp,
            **authors,
        )

    async def create(self, candidate: BookmarkCandidate | Mapping[str, Any]) -> Bookmark:
        """
        Create a bookmark from an extractor candidate.

        Flow:
        1. Validate (url always required; platform only in the strict profile)
        2. Pre-check (url, owner) so the common duplicate case returns the existing record
        3. Apply platform/owner defaults and insert
        4. If the insert loses a race on the unique constraint, report the same conflict

        Raises:
            InvalidInputError: If required fields are missing or malformed.
            ConflictError: If the URL is already bookmarked for the owner.
            StorageUnavailableError: If the database cannot be reached.
        """
        record = self._build_record(self._parse(candidate))

        existing = await self._store.find_by_url(record.url, record.owner)
        if existing is not None:
            logger.info("Duplicate bookmark url=%s owner=%s", record.url, record.owner)
            raise ConflictError(record.url, record.owner, existing)

        try:
            bookmark = await self._store.insert(record)
        except ConstraintViolationError as e:
            # Another writer inserted the same key after our pre-check
            logger.info("Lost insert race for url=%s owner=%s", record.url, record.owner)
            existing = await self._store.find_by_url(record.url, record.owner)
            raise ConflictError(record.url, record.owner, existing) from e

        logger.info("Created bookmark %s for owner=%s", bookmark.id, bookmark.owner)
        return bookmark

    def resolve_paging(self, limit: int | None, offset: int | None) -> tuple[int, int]:
        """Apply the default page size and clamp limit/offset to what the store serves."""
        if limit is None or limit < 1:
            limit = self._default_limit
        return min(limit, self._store.max_limit), max(offset or 0, 0)

    async def list(
        self,
        owner: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> BookmarkPage:
        """List an owner's bookmarks, newest first, applying defaults for absent arguments."""
        limit, offset = self.resolve_paging(limit, offset)
        return await self._store.list(owner or self._default_owner, limit=limit, offset=offset)

    async def get_one(self, bookmark_id: UUID | str) -> Bookmark:
        """
        Get a bookmark by id.

        Raises:
            NotFoundError: If no bookmark has this id.
        """
        bookmark = await self._store.get_by_id(bookmark_id)
        if bookmark is None:
            raise NotFoundError(bookmark_id)
        return bookmark

    async def remove(self, bookmark_id: UUID | str) -> None:
        """
        Permanently delete a bookmark.

        Raises:
            NotFoundError: If nothing was removed (unknown or already deleted id).
        """
        removed = await self._store.delete(bookmark_id)
        if removed == 0:
            raise NotFoundError(bookmark_id)
        logger.info("Deleted bookmark %s", bookmark_id)
