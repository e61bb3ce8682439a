"""Maintenance commands for the bookmark database.

Usage:
    PYTHONPATH=src python scripts/maintenance.py count
    PYTHONPATH=src python scripts/maintenance.py count --owner default
    PYTHONPATH=src python scripts/maintenance.py clear --force
"""

import argparse
import asyncio
import logging
import sys

from core.config import get_settings
from db.bookmark_store import BookmarkStore

logger = logging.getLogger(__name__)


async def count_bookmarks(store: BookmarkStore, owner: str | None = None) -> int:
    """Return the number of bookmarks, optionally for a single owner."""
    total = await store.count(owner)
    scope = f"owner '{owner}'" if owner is not None else "all owners"
    logger.info("%d bookmarks for %s", total, scope)
    return total


async def clear_bookmarks(store: BookmarkStore) -> int:
    """Delete every bookmark. Returns the number removed."""
    return await store.clear()


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(description="Bookmark database maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    count_parser = subparsers.add_parser("count", help="Print the number of bookmarks")
    count_parser.add_argument("--owner", default=None, help="Only count this owner's bookmarks")

    clear_parser = subparsers.add_parser("clear", help="Delete ALL bookmarks")
    clear_parser.add_argument(
        "--force", action="store_true", help="Required; confirms the deletion",
    )
    return parser


async def run(args: argparse.Namespace, store: BookmarkStore | None = None) -> int:
    """Execute a parsed command. Returns the process exit code."""
    if args.command == "clear" and not args.force:
        print("Refusing to clear without --force", file=sys.stderr)
        return 2

    async with store or BookmarkStore.from_settings(get_settings()) as opened:
        if args.command == "count":
            print(await count_bookmarks(opened, args.owner))
        else:
            removed = await clear_bookmarks(opened)
            print(f"Removed {removed} bookmarks")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for running maintenance as a script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
