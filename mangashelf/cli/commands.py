"""Command implementations for the mangashelf CLI."""

from __future__ import annotations

import argparse
import sys
from typing import assert_never

from mangashelf.errors import NotFound
from mangashelf.models import Manga, MangaWithYear
from mangashelf.shared.db_path import resolve_db_path
from mangashelf.shelf import MangaShelf
from mangashelf.sync.outcomes import (
    DatabaseOnly,
    Error,
    NetworkError,
    Success,
)
from mangashelf.views.sorting import parse_sort

EXIT_OK = 0
EXIT_SYNC_FAILED = 1
EXIT_NOT_FOUND = 2


def format_manga(manga: Manga) -> str:
    """
    Format a manga as one output line.

    Args:
        manga: Record to format.

    Returns:
        Display line.
    """
    flags = ("F" if manga.is_favorite else "-") + ("R" if manga.is_read else "-")
    return (
        f"{manga.id:>10}  {flags}  {manga.year}  "
        f"score={manga.score:<5g} pop={manga.popularity:<6d} {manga.title}"
    )


def format_item(item: MangaWithYear) -> str:
    return format_manga(item.manga)


async def open_shelf(args: argparse.Namespace) -> MangaShelf:
    return await MangaShelf.open(
        resolve_db_path(args.db),
        api_url=args.api_url,
        timeout=args.timeout,
        retries=args.retries,
    )


async def cmd_sync(shelf: MangaShelf, args: argparse.Namespace) -> int:
    outcome = await shelf.sync()
    match outcome:
        case Success(count=count):
            print(f"Synced {count} mangas")
            return EXIT_OK
        case DatabaseOnly():
            total = await shelf.store.count()
            print(f"Offline: showing {total} cached mangas")
            return EXIT_OK
        case NetworkError() | Error():
            print(f"Sync failed: {shelf.status.error}", file=sys.stderr)
            return EXIT_SYNC_FAILED
        case _:
            assert_never(outcome)


async def cmd_list(shelf: MangaShelf, args: argparse.Namespace) -> int:
    spec = parse_sort(args.sort)
    page = await shelf.build_page(spec, args.limit, args.offset)
    for item in page.items:
        print(format_item(item))
    if page.has_more:
        print(f"... more from offset {page.next_offset}")
    return EXIT_OK


async def cmd_view(shelf: MangaShelf, args: argparse.Namespace) -> int:
    spec = parse_sort(args.sort)
    view = await shelf.build_view(spec)
    starts = {position: year for year, position in view.year_index.items()}
    for position, item in enumerate(view.ordered):
        if position in starts:
            print(f"== {starts[position]} ==")
        print(format_item(item))
    return EXIT_OK


async def cmd_favorites(shelf: MangaShelf, args: argparse.Namespace) -> int:
    for manga in await shelf.get_favorites():
        print(format_manga(manga))
    return EXIT_OK


async def cmd_show(shelf: MangaShelf, args: argparse.Namespace) -> int:
    manga = await shelf.get_by_id(args.id)
    if manga is None:
        print(f"Manga not found: {args.id}", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(format_manga(manga))
    print(f"  category: {manga.category}")
    print(f"  image:    {manga.image_url}")
    return EXIT_OK


async def cmd_favorite(shelf: MangaShelf, args: argparse.Namespace) -> int:
    try:
        manga = await shelf.toggle_favorite(args.id)
    except NotFound as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_NOT_FOUND
    state = "added to" if manga.is_favorite else "removed from"
    print(f"{manga.title} {state} favorites")
    return EXIT_OK


async def cmd_read(shelf: MangaShelf, args: argparse.Namespace) -> int:
    try:
        manga = await shelf.toggle_read(args.id)
    except NotFound as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_NOT_FOUND
    state = "read" if manga.is_read else "unread"
    print(f"{manga.title} marked {state}")
    return EXIT_OK


async def cmd_years(shelf: MangaShelf, args: argparse.Namespace) -> int:
    for year in await shelf.available_years():
        offset = await shelf.year_offset(year)
        print(f"{year}  starts at {offset}")
    return EXIT_OK


COMMANDS = {
    "sync": cmd_sync,
    "list": cmd_list,
    "view": cmd_view,
    "favorites": cmd_favorites,
    "show": cmd_show,
    "favorite": cmd_favorite,
    "read": cmd_read,
    "years": cmd_years,
}


async def run_command(args: argparse.Namespace) -> int:
    """
    Open the shelf, run one command and close the shelf.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code.
    """
    handler = COMMANDS[args.command]
    shelf = await open_shelf(args)
    async with shelf:
        return await handler(shelf, args)
