"""Tests for the maintenance script."""
import pytest

from db.bookmark_store import BookmarkStore, NewBookmark
from scripts.maintenance import build_parser, run


async def seed(database_url: str) -> None:
    """Insert three bookmarks across two owners."""
    async with BookmarkStore(database_url) as store:
        for url, owner in [("https://a/", "alice"), ("https://b/", "alice"), ("https://c/", "bob")]:
            await store.insert(NewBookmark(url=url, platform="instagram", owner=owner))


async def test__count__all_and_per_owner(
    database_url: str,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that count prints the total and the per-owner count."""
    await seed(database_url)

    args = build_parser().parse_args(["count"])
    assert await run(args, BookmarkStore(database_url)) == 0
    args = build_parser().parse_args(["count", "--owner", "alice"])
    assert await run(args, BookmarkStore(database_url)) == 0

    assert capsys.readouterr().out.split() == ["3", "2"]


async def test__clear__requires_force(
    database_url: str,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that clear refuses to run without --force."""
    await seed(database_url)

    args = build_parser().parse_args(["clear"])
    assert await run(args, BookmarkStore(database_url)) == 2
    assert "--force" in capsys.readouterr().err

    async with BookmarkStore(database_url) as store:
        assert await store.count() == 3


async def test__clear__with_force_removes_everything(
    database_url: str,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that clear --force empties the database."""
    await seed(database_url)

    args = build_parser().parse_args(["clear", "--force"])
    assert await run(args, BookmarkStore(database_url)) == 0
    assert "Removed 3 bookmarks" in capsys.readouterr().out

    async with BookmarkStore(database_url) as store:
        assert await store.count() == 0


def test__parser__requires_command() -> None:
    """Test that a sub-command is mandatory."""
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
