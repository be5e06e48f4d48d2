"""Command-line interface for feedgrab.

Meant to be run from cron or a systemd timer: ``feedgrab run`` does one
pass over the configured feed and exits.
"""

import argparse
import sys
from pathlib import Path

import structlog

from feedgrab.config import ConfigError, default_config_path, get_settings, load_config
from feedgrab.ingestion import RSSParser
from feedgrab.ingestion.rss_parser import FeedError
from feedgrab.logging import setup_logging
from feedgrab.pipeline import OutputDirError, run_pipeline

logger = structlog.get_logger(__name__)


def _resolve_config_path(args: argparse.Namespace) -> Path:
    """--config beats FEEDGRAB_CONFIG_PATH beats config.yaml beside the executable."""
    if args.config:
        return Path(args.config)
    return get_settings().config_path or default_config_path()


def cmd_run(args: argparse.Namespace) -> int:
    """Download every file linked from the configured feed."""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_format=settings.json_logs)

    try:
        config = load_config(_resolve_config_path(args))
        run_pipeline(config, settings)
    except (ConfigError, OutputDirError, FeedError) as e:
        logger.error("Run aborted", error=str(e))
        return 1

    # Per-item failures are logged by the downloader and do not fail the run
    return 0


def cmd_parse_feed(args: argparse.Namespace) -> int:
    """Parse a feed and list the links that would be downloaded."""
    settings = get_settings()
    setup_logging(log_level="WARNING", json_format=settings.json_logs)

    try:
        feed_url = args.feed_url or load_config(_resolve_config_path(args)).rss_url
        parser = RSSParser(timeout_seconds=settings.timeout_seconds, user_agent=settings.user_agent)
        items = parser.parse_feed(feed_url)
    except (ConfigError, FeedError) as e:
        print(f"Error: {e}")
        return 1

    print(f"\nFeed: {feed_url}")
    print(f"Items found: {len(items)}\n")

    for i, item in enumerate(items, 1):
        print(f"{i}. {item.link or '(no link)'}")

    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="feedgrab",
        description="Download every file linked from an RSS feed",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser("run", help="Download all files linked from the feed")
    run_parser.add_argument(
        "--config", "-c", help="Path to config.yaml (default: beside the executable)"
    )
    run_parser.set_defaults(func=cmd_run)

    # parse-feed command
    parse_parser = subparsers.add_parser("parse-feed", help="List the links in a feed")
    parse_parser.add_argument(
        "feed_url", nargs="?", help="RSS feed URL (default: rss_url from config.yaml)"
    )
    parse_parser.add_argument("--config", "-c", help="Path to config.yaml")
    parse_parser.set_defaults(func=cmd_parse_feed)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
