"""Single-pass feed download pipeline.

fetch feed -> parse -> for each item: download, then notify.
"""

from pathlib import Path

import structlog

from feedgrab.config import FeedConfig, Settings
from feedgrab.ingestion import DownloadOutcome, FileDownloader, RSSParser
from feedgrab.notifications import DiscordNotifier

logger = structlog.get_logger(__name__)


class OutputDirError(Exception):
    """Raised when the output directory cannot be created."""

    pass


def ensure_output_dir(output_dir: Path) -> Path:
    """Create the output directory (and parents) if it does not exist."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirError(f"Error creating output directory {output_dir}: {e}") from e
    return output_dir


def run_pipeline(config: FeedConfig, settings: Settings) -> list[DownloadOutcome]:
    """Run one pass over the configured feed.

    Args:
        config: Loaded config.yaml.
        settings: Runtime settings.

    Returns:
        One outcome per feed item, in feed order.

    Raises:
        OutputDirError: If the output directory cannot be created.
        FeedError: If the feed cannot be fetched or parsed. No item is
            downloaded in that case.
    """
    output_dir = ensure_output_dir(config.output_dir)

    parser = RSSParser(timeout_seconds=settings.timeout_seconds, user_agent=settings.user_agent)
    items = parser.parse_feed(config.rss_url)

    notifier = DiscordNotifier(config.discord, timeout_seconds=settings.timeout_seconds)
    if not notifier.enabled:
        logger.debug("Discord notifications disabled")

    downloader = FileDownloader(
        output_dir,
        notifier=notifier,
        timeout_seconds=settings.timeout_seconds,
        chunk_size=settings.chunk_size,
        user_agent=settings.user_agent,
    )

    return downloader.download_all(items)
