"""Exceptions raised by the storage layer."""


class StorageError(Exception):
    """Base class for storage-layer failures."""


class ConstraintViolationError(StorageError):
    """
    Raised when an insert collides with the (url, owner) unique constraint.

    Internal signal for the service layer; it is translated to a conflict before it
    reaches any caller.
    """

    def __init__(self, url: str, owner: str) -> None:
        self.url = url
        self.owner = owner
        super().__init__(f"A bookmark with URL '{url}' already exists for owner '{owner}'")


class StorageUnavailableError(StorageError):
    """Raised when the database cannot be reached or written. Safe for callers to retry."""

    def __init__(self, message: str = "Storage unavailable") -> None:
        super().__init__(message)
