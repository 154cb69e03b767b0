"""Command-line entry point for managing and rotating photo feeds."""

import argparse
import json
import logging
import os
import sys

from .config import AppConfig, load_config
from .errors import FeedError
from .feeds import create_feed, delete_feed, list_feeds, refresh_feed, resolve_photo, update_feed
from .fetcher import RequestsPageFetcher
from .models import INTERVALS, SizeProfile
from .rotation import sweep_all_feeds
from .store import DEFAULT_TOKEN, build_store

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Run one subcommand against the configured store."""
    store = build_store(config.store)
    token = args.token

    if args.command == "list":
        _print_json([feed.to_dict() for feed in list_feeds(store, token)])
    elif args.command == "create":
        fetcher = RequestsPageFetcher(config.fetch)
        feed = create_feed(
            store, fetcher, token, args.album_url,
            name=args.name,
            interval=args.interval,
            size=args.size,
            extraction=config.extraction,
            fetch_config=config.fetch,
        )
        _print_json(feed.to_dict())
    elif args.command == "update":
        feed = update_feed(store, token, args.feed_id, name=args.name, interval=args.interval, size=args.size)
        _print_json(feed.to_dict())
    elif args.command == "delete":
        delete_feed(store, token, args.feed_id)
        print(f"Deleted feed {args.feed_id}")
    elif args.command == "refresh":
        _print_json(refresh_feed(store, token, args.feed_id).to_dict())
    elif args.command == "photo":
        print(resolve_photo(store, token, args.feed_id))
    elif args.command == "sweep":
        sweep_all_feeds(store)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage rotating photo feeds built from shared albums"
    )
    parser.add_argument(
        "--token",
        default=DEFAULT_TOKEN,
        help="Token whose feeds to operate on (default: %(default)s)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List feeds as JSON")

    size_help = "Size profile: " + ", ".join(profile.value for profile in SizeProfile)
    interval_help = "Rotation interval in seconds or a label such as 6h (known: " + \
        ", ".join(f"{seconds}={label}" for seconds, label in INTERVALS.items()) + ")"

    create = subparsers.add_parser("create", help="Create a feed from a shared album URL")
    create.add_argument("album_url", help="Publicly shared album URL")
    create.add_argument("--name", default=None, help="Display name")
    create.add_argument("--interval", default=None, help=interval_help)
    create.add_argument("--size", default=None, help=size_help)

    update = subparsers.add_parser("update", help="Edit a feed")
    update.add_argument("feed_id")
    update.add_argument("--name", default=None, help="New display name")
    update.add_argument("--interval", default=None, help=interval_help)
    update.add_argument("--size", default=None, help=size_help)

    for command, help_text in (
        ("delete", "Delete a feed"),
        ("refresh", "Pick a new photo for a feed now"),
        ("photo", "Print the current photo URL of a feed"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("feed_id")

    subparsers.add_parser("sweep", help="Rotate every due feed of every token (run from cron)")
    return parser


def main(argv=None) -> None:
    """Main entry point with command-line argument parsing."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
        run_command(args, config)
    except FeedError as e:
        logger.error(e.message)
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
