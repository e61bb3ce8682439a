"""Bookmark model for storing captured social-media posts."""
from datetime import UTC, datetime

from sqlalchemy import JSON, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, UTCDateTime, UUIDv7Mixin


# Column sizes; candidates are checked against these before they reach the database
PLATFORM_MAX_LENGTH = 50
MEDIA_TYPE_MAX_LENGTH = 50
TIMESTAMP_MAX_LENGTH = 64
IDENTIFIER_MAX_LENGTH = 255


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(UTC)


class Bookmark(Base, UUIDv7Mixin):
    """Bookmark model - one captured post, unique per (url, owner)."""

    __tablename__ = "bookmarks"
    __table_args__ = (
        # Enforced by the database so concurrent writers cannot both win
        UniqueConstraint("url", "owner", name="uq_bookmarks_url_owner"),
        # Owner-scoped listing, newest first
        Index("ix_bookmarks_owner_captured_at", "owner", "captured_at", "id"),
    )

    url: Mapped[str] = mapped_column(Text, nullable=False)
    platform: Mapped[str] = mapped_column(String(PLATFORM_MAX_LENGTH), nullable=False)
    post_id: Mapped[str | None] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=True)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_name: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_MAX_LENGTH), nullable=True,
    )
    author_handle: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_MAX_LENGTH), nullable=True,
    )
    author_username: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_MAX_LENGTH), nullable=True,
    )
    # Serialized JSON array; order preserved, no normalization
    media_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    media_type: Mapped[str | None] = mapped_column(String(MEDIA_TYPE_MAX_LENGTH), nullable=True)
    # Original post time as reported by the page (ISO-8601), not the capture time
    timestamp: Mapped[str | None] = mapped_column(String(TIMESTAMP_MAX_LENGTH), nullable=True)
    captured_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now,
    )
    owner: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)

    def __repr__(self) -> str:
        return f"<Bookmark id={self.id} owner={self.owner!r} url={self.url!r}>"
