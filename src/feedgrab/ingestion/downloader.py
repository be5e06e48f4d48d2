"""File downloader for feed item links.

Streams each linked file to the output directory, naming it from the
server's Content-Disposition hint or the URL, and reports one outcome
per item so a failing item never stops the run.
"""

import re
from collections.abc import Iterable
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

import httpx
import structlog
from pydantic import BaseModel, Field

from feedgrab.ingestion.rss_parser import FeedItem

if TYPE_CHECKING:
    from feedgrab.notifications.discord import DiscordNotifier

logger = structlog.get_logger(__name__)

_SEPARATORS = re.compile(r"[/\\]")


class FailureReason(StrEnum):
    """Why a single item was skipped."""

    TRANSPORT = "transport"
    STATUS = "status"
    CONTENT_TYPE = "content_type"
    FILENAME = "filename"
    WRITE = "write"


class DownloadError(Exception):
    """Raised when a file download fails."""

    reason = FailureReason.TRANSPORT


class BadStatusError(DownloadError):
    """Raised when the server answers with a non-2xx status."""

    reason = FailureReason.STATUS


class ContentTypeError(DownloadError):
    """Raised when the response does not look like a file."""

    reason = FailureReason.CONTENT_TYPE


class FilenameError(DownloadError):
    """Raised when no usable filename can be derived."""

    reason = FailureReason.FILENAME


class WriteError(DownloadError):
    """Raised when the body cannot be written to disk."""

    reason = FailureReason.WRITE


class DownloadOutcome(BaseModel):
    """Result of one download attempt."""

    url: str = Field(description="Item link that was requested")
    path: Path | None = Field(default=None, description="Written file on success")
    filename: str | None = Field(default=None, description="Derived filename on success")
    reason: FailureReason | None = Field(default=None, description="Failure category")
    error: str | None = Field(default=None, description="Failure detail")

    @property
    def ok(self) -> bool:
        return self.reason is None


def _base_name(name: str) -> str:
    """Drop any directory part so the name stays inside the output dir."""
    base = _SEPARATORS.split(name)[-1]
    # No filesystem accepts NUL in a name
    if "\x00" in base or base in (".", ".."):
        return ""
    return base


def extract_filename(response: httpx.Response) -> str:
    """Derive the local filename for a download response.

    Uses the ``filename=`` parameter of Content-Disposition with surrounding
    double quotes trimmed, falling back to the last path segment of the final
    request URL.

    Raises:
        FilenameError: If neither source yields a usable name.
    """
    filename = ""

    disposition = response.headers.get("content-disposition", "")
    parts = disposition.split("filename=")
    if len(parts) > 1:
        filename = _base_name(parts[1].strip('"'))

    if not filename:
        filename = _base_name(response.url.path.rstrip("/"))

    if not filename:
        raise FilenameError("could not determine filename")

    return filename


class FileDownloader:
    """Downloads feed items to a local directory."""

    def __init__(
        self,
        output_dir: Path,
        notifier: "DiscordNotifier | None" = None,
        timeout_seconds: float | None = 300,
        chunk_size: int = 8192,
        user_agent: str | None = None,
    ) -> None:
        """Initialize the file downloader.

        Args:
            output_dir: Existing directory files are written to.
            notifier: Optional notifier called after each successful download.
            timeout_seconds: HTTP request timeout (None disables it).
            chunk_size: Chunk size for streaming downloads.
            user_agent: Optional User-Agent header value.
        """
        self.output_dir = Path(output_dir)
        self.notifier = notifier
        self.timeout = timeout_seconds
        self.chunk_size = chunk_size
        self.headers = {"User-Agent": user_agent} if user_agent else {}
        self.logger = logger.bind(component="file_downloader")

    def download(self, url: str) -> Path:
        """Download a single file into the output directory.

        Args:
            url: Link to download.

        Returns:
            Path of the written file.

        Raises:
            DownloadError: On transport failure, or one of its subclasses
                for a bad status, content type, filename or write failure.
        """
        self.logger.debug("Downloading file", url=url)

        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                with client.stream("GET", url, headers=self.headers) as response:
                    self._check_response(response)
                    dest_path = self.output_dir / extract_filename(response)
                    self._write_body(response, dest_path)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DownloadError(f"error downloading file: {e}") from e

        return dest_path

    def _check_response(self, response: httpx.Response) -> None:
        if not response.is_success:
            raise BadStatusError(f"bad status: {response.status_code} {response.reason_phrase}")

        # Coarse filter against HTML error pages
        content_type = response.headers.get("content-type", "")
        if "application/" not in content_type:
            raise ContentTypeError(f"unexpected content type: {content_type}")

    def _write_body(self, response: httpx.Response, dest_path: Path) -> None:
        """Stream the response body to disk, overwriting any existing file."""
        try:
            with open(dest_path, "wb") as f:
                for chunk in response.iter_bytes(chunk_size=self.chunk_size):
                    f.write(chunk)
        except (OSError, ValueError, httpx.HTTPError) as e:
            raise WriteError(f"error writing file {dest_path}: {e}") from e

    def download_item(self, item: FeedItem) -> DownloadOutcome:
        """Download one item, converting failures into an outcome.

        The notifier runs only after the file is fully written and cannot
        change the outcome.
        """
        try:
            path = self.download(item.link)
        except DownloadError as e:
            self.logger.error(
                "Failed to download file",
                url=item.link,
                reason=e.reason.value,
                error=str(e),
            )
            return DownloadOutcome(url=item.link, reason=e.reason, error=str(e))

        self.logger.info("Successfully downloaded file", path=str(path))

        if self.notifier is not None:
            self.notifier.notify(path.name)

        return DownloadOutcome(url=item.link, path=path, filename=path.name)

    def download_all(self, items: Iterable[FeedItem]) -> list[DownloadOutcome]:
        """Download every item in order, one at a time.

        Args:
            items: Feed items in document order.

        Returns:
            One outcome per item, in the same order.
        """
        outcomes = [self.download_item(item) for item in items]

        self.logger.info(
            "Feed download complete",
            successful=sum(1 for outcome in outcomes if outcome.ok),
            total=len(outcomes),
        )

        return outcomes
