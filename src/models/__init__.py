"""SQLAlchemy models."""
from models.base import Base, UTCDateTime, UUIDv7Mixin
from models.bookmark import Bookmark

__all__ = [
    "Base",
    "Bookmark",
    "UTCDateTime",
    "UUIDv7Mixin",
]
