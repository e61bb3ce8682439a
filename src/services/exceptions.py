"""Exceptions raised by the service layer to its callers."""
from uuid import UUID

from models.bookmark import Bookmark


class BookmarkServiceError(Exception):
    """Base class for caller-facing bookmark errors."""


class InvalidInputError(BookmarkServiceError):
    """Raised when a required field is missing or malformed. Not retryable."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConflictError(BookmarkServiceError):
    """
    Raised when a bookmark with the same URL already exists for the owner.

    Carries the existing bookmark so callers can show it without another lookup.
    `existing` can be None when the conflicting row was deleted between the failed
    insert and the follow-up read.
    """

    def __init__(self, url: str, owner: str, existing: Bookmark | None) -> None:
        self.url = url
        self.owner = owner
        self.existing = existing
        super().__init__(f"A bookmark with URL '{url}' already exists")


class NotFoundError(BookmarkServiceError):
    """Raised when no bookmark has the requested id."""

    def __init__(self, bookmark_id: UUID | str) -> None:
        self.bookmark_id = bookmark_id
        super().__init__(f"Bookmark not found: {bookmark_id}")
