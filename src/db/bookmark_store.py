"""Durable storage for bookmarks."""
import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple
from uuid import UUID

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.config import Settings
from db.errors import ConstraintViolationError, StorageError, StorageUnavailableError
from db.session import build_engine, build_session_factory
from models.base import Base
from models.bookmark import Bookmark, utc_now

logger = logging.getLogger(__name__)

UNIQUE_CONSTRAINT_NAME = "uq_bookmarks_url_owner"
# SQLite reports the violated columns instead of the constraint name
_SQLITE_UNIQUE_MESSAGE = "bookmarks.url, bookmarks.owner"

DEFAULT_MAX_LIMIT = 200


@dataclass(frozen=True)
class NewBookmark:
    """Fields supplied for a new bookmark. id and captured_at are assigned by the store."""

    url: str
    platform: str
    owner: str
    post_id: str | None = None
    caption: str | None = None
    author_name: str | None = None
    author_handle: str | None = None
    author_username: str | None = None
    media_urls: list[str] = field(default_factory=list)
    media_type: str | None = None
    timestamp: str | None = None


class BookmarkPage(NamedTuple):
    """One page of bookmarks plus the owner's total count (independent of paging)."""

    records: list[Bookmark]
    total: int


def coerce_bookmark_id(value: UUID | str) -> UUID | None:
    """Parse a bookmark id; returns None for anything that is not a UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _is_url_owner_violation(error: IntegrityError) -> bool:
    message = str(error.orig) if error.orig is not None else str(error)
    return UNIQUE_CONSTRAINT_NAME in message or _SQLITE_UNIQUE_MESSAGE in message


class BookmarkStore:
    """
    Owns all bookmark persistence.

    Constructed explicitly and passed to the service layer. `open()` must be called
    before use (creates the schema if absent) and `close()` at shutdown. Each operation
    runs in its own short transaction; the (url, owner) uniqueness is enforced by a
    database constraint, so concurrent inserts for the same key resolve to exactly one
    row.

    Raises only ConstraintViolationError and StorageUnavailableError; "not found" is
    signalled with None / 0.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        max_limit: int = DEFAULT_MAX_LIMIT,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._database_url = database_url
        self._echo = echo
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._max_limit = max_limit
        self._clock = clock
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BookmarkStore":
        """Build a store from application settings."""
        return cls(
            settings.database_url,
            echo=settings.db_echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            max_limit=settings.max_page_size,
        )

    async def open(self) -> None:
        """Create the engine and the schema if absent. Idempotent."""
        if self._engine is not None:
            return
        engine = build_engine(
            self._database_url,
            echo=self._echo,
            pool_size=self._pool_size,
            max_overflow=self._max_overflow,
        )
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            logger.exception("Failed to open bookmark store")
            raise StorageUnavailableError(f"Cannot open storage: {e}") from e
        self._engine = engine
        self._session_factory = build_session_factory(engine)
        logger.info("Bookmark store opened (%s)", engine.dialect.name)

    async def close(self) -> None:
        """Dispose of the engine and its connections. Idempotent."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Bookmark store closed")

    @property
    def is_open(self) -> bool:
        """Check if the store has been opened."""
        return self._engine is not None

    @property
    def max_limit(self) -> int:
        """Largest page size `list` will return."""
        return self._max_limit

    async def __aenter__(self) -> "BookmarkStore":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session, translating driver failures into StorageUnavailableError."""
        if self._session_factory is None:
            raise StorageUnavailableError("Bookmark store is not open")
        try:
            async with self._session_factory() as session:
                yield session
        except StorageError:
            raise
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Storage operation failed: %s", e)
            raise StorageUnavailableError(str(e)) from e

    async def insert(self, record: NewBookmark) -> Bookmark:
        """
        Persist a new bookmark and return it with id and captured_at assigned.

        Raises:
            ConstraintViolationError: If (url, owner) already exists. Never overwrites.
        """
        bookmark = Bookmark(
            url=record.url,
            platform=record.platform,
            owner=record.owner,
            post_id=record.post_id,
            caption=record.caption,
            author_name=record.author_name,
            author_handle=record.author_handle,
            author_username=record.author_username,
            media_urls=list(record.media_urls),
            media_type=record.media_type,
            timestamp=record.timestamp,
            captured_at=self._clock(),
        )
        async with self._session() as session:
            session.add(bookmark)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if _is_url_owner_violation(e):
                    logger.info(
                        "Unique constraint rejected url=%s owner=%s", record.url, record.owner,
                    )
                    raise ConstraintViolationError(record.url, record.owner) from e
                raise
        return bookmark

    async def get_by_id(self, bookmark_id: UUID | str) -> Bookmark | None:
        """Get a bookmark by id. Returns None if absent."""
        uid = coerce_bookmark_id(bookmark_id)
        if uid is None:
            return None
        async with self._session() as session:
            return await session.get(Bookmark, uid)

    async def find_by_url(self, url: str, owner: str) -> Bookmark | None:
        """Get the bookmark for (url, owner). Returns None if absent."""
        async with self._session() as session:
            result = await session.execute(
                select(Bookmark).where(Bookmark.url == url, Bookmark.owner == owner),
            )
            return result.scalar_one_or_none()

    async def list(self, owner: str, limit: int, offset: int = 0) -> BookmarkPage:
        """
        List an owner's bookmarks, newest capture first.

        Ties on captured_at are broken by id (descending) so the order is total and
        stable across calls. `limit` is clamped to [1, max_limit] and `offset` to >= 0.
        `total` counts all of the owner's bookmarks regardless of paging.
        """
        limit = min(max(limit, 1), self._max_limit)
        offset = max(offset, 0)
        async with self._session() as session:
            total_result = await session.execute(
                select(func.count()).select_from(Bookmark).where(Bookmark.owner == owner),
            )
            total = total_result.scalar() or 0

            result = await session.execute(
                select(Bookmark)
                .where(Bookmark.owner == owner)
                .order_by(Bookmark.captured_at.desc(), Bookmark.id.desc())
                .offset(offset)
                .limit(limit),
            )
            records = list(result.scalars().all())
        return BookmarkPage(records=records, total=total)

    async def delete(self, bookmark_id: UUID | str) -> int:
        """Hard-delete a bookmark. Returns the number of rows removed (0 or 1)."""
        uid = coerce_bookmark_id(bookmark_id)
        if uid is None:
            return 0
        async with self._session() as session:
            result = await session.execute(delete(Bookmark).where(Bookmark.id == uid))
            await session.commit()
            return result.rowcount or 0

    async def clear(self) -> int:
        """Remove every bookmark for every owner. Maintenance and tests only."""
        async with self._session() as session:
            result = await session.execute(delete(Bookmark))
            await session.commit()
            removed = result.rowcount or 0
        logger.info("Cleared %d bookmarks", removed)
        return removed

    async def count(self, owner: str | None = None) -> int:
        """Count bookmarks, for one owner or for all owners when owner is None."""
        query = select(func.count()).select_from(Bookmark)
        if owner is not None:
            query = query.where(Bookmark.owner == owner)
        async with self._session() as session:
            result = await session.execute(query)
            return result.scalar() or 0

    async def ping(self) -> None:
        """Round-trip to the database. Raises StorageUnavailableError on failure."""
        async with self._session() as session:
            await session.execute(text("SELECT 1"))
