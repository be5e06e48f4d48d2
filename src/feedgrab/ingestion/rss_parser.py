"""RSS feed fetching and link extraction.

Fetches a feed over HTTP and extracts the ``<link>`` of every
``<channel><item>`` in document order. Nothing else in the feed is read.
"""

import xml.etree.ElementTree as ET

import httpx
import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)


class FeedError(Exception):
    """Raised when the feed cannot be fetched."""

    pass


class FeedParseError(FeedError):
    """Raised when the feed body is not an RSS document."""

    pass


class FeedItem(BaseModel):
    """A single feed entry pointing at a downloadable file."""

    link: str = Field(description="URL of the file to download")


class RSSParser:
    """Fetches an RSS feed and extracts item links."""

    def __init__(
        self,
        timeout_seconds: float | None = 300,
        user_agent: str | None = None,
    ) -> None:
        """Initialize the RSS parser.

        Args:
            timeout_seconds: HTTP request timeout (None disables it).
            user_agent: Optional User-Agent header value.
        """
        self.timeout = timeout_seconds
        self.headers = {"User-Agent": user_agent} if user_agent else {}
        self.logger = logger.bind(component="rss_parser")

    def parse_feed(self, feed_url: str) -> list[FeedItem]:
        """Fetch an RSS feed and return its items.

        Args:
            feed_url: URL of the RSS feed.

        Returns:
            Items in document order.

        Raises:
            FeedError: If the feed cannot be fetched.
            FeedParseError: If the body is not an RSS document.
        """
        self.logger.info("Parsing RSS feed", url=feed_url)

        body = self.fetch_feed(feed_url)
        items = self.parse_items(body)

        self.logger.info("Parsed feed successfully", url=feed_url, item_count=len(items))
        return items

    def fetch_feed(self, feed_url: str) -> bytes:
        """Download the raw feed body.

        Raises:
            FeedError: On transport errors or a non-2xx status.
        """
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(feed_url, headers=self.headers)
                response.raise_for_status()
                return response.content
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FeedError(f"Error fetching RSS from {feed_url}: {e}") from e

    def parse_items(self, body: bytes) -> list[FeedItem]:
        """Extract item links from a feed body.

        Args:
            body: Raw XML document.

        Returns:
            One FeedItem per ``channel/item``, in document order.

        Raises:
            FeedParseError: If the body is not well-formed XML or has no channel.
        """
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise FeedParseError(f"Error parsing RSS: {e}") from e

        channel = root.find("channel")
        if channel is None:
            raise FeedParseError(f"Error parsing RSS: no <channel> under <{root.tag}>")

        # Items without a link are kept so they surface as download failures
        return [
            FeedItem(link=(item.findtext("link") or "").strip())
            for item in channel.findall("item")
        ]
