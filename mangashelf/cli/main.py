"""CLI entrypoint for the shelf commands."""

from __future__ import annotations

import argparse
import asyncio
import logging

from mangashelf.cli.commands import run_command
from mangashelf.shared.constants import (
    FETCH_RETRIES,
    FETCH_TIMEOUT_SECONDS,
    MANGA_API_URL,
    MAX_LIMIT,
    PAGE_SIZE,
)
from mangashelf.views.sorting import parse_sort


def sort_argument(value: str) -> str:
    try:
        parse_sort(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value


def page_limit(value: str) -> int:
    limit = int(value)
    if not 1 <= limit <= MAX_LIMIT:
        raise argparse.ArgumentTypeError(f"limit must be between 1 and {MAX_LIMIT}")
    return limit


def page_offset(value: str) -> int:
    offset = int(value)
    if offset < 0:
        raise argparse.ArgumentTypeError("offset must not be negative")
    return offset


def build_parser() -> argparse.ArgumentParser:
    """
    Build CLI parser.

    Returns:
        Argument parser.
    """
    parser = argparse.ArgumentParser(
        description="Sync and browse a locally cached manga catalog"
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Database file or name under data/. Defaults to $MANGASHELF_DB.",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=MANGA_API_URL,
        help="Remote catalog endpoint.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=FETCH_TIMEOUT_SECONDS,
        help="HTTP timeout in seconds.",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=FETCH_RETRIES,
        help="Retry count for transient fetch failures.",
    )
    parser.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("sync", help="Fetch the remote catalog and merge it.")

    list_parser = subparsers.add_parser("list", help="Print one sorted page.")
    list_parser.add_argument("--sort", type=sort_argument, default="year")
    list_parser.add_argument("--limit", type=page_limit, default=PAGE_SIZE)
    list_parser.add_argument("--offset", type=page_offset, default=0)

    view_parser = subparsers.add_parser("view", help="Print the full sorted view.")
    view_parser.add_argument("--sort", type=sort_argument, default="year")

    subparsers.add_parser("favorites", help="Print favorite mangas.")
    subparsers.add_parser("years", help="Print years and their first positions.")

    for name, text in (
        ("show", "Print one manga."),
        ("favorite", "Toggle the favorite flag."),
        ("read", "Toggle the read flag."),
    ):
        command = subparsers.add_parser(name, help=text)
        command.add_argument("id", type=str)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Parse CLI arguments and run the selected command.

    Args:
        argv: Optional argument list.

    Returns:
        None.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(asyncio.run(run_command(args)))


if __name__ == "__main__":
    main()
