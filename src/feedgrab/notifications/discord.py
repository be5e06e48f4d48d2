"""Discord webhook notifications for completed downloads.

Each successful download is announced with a single embed. Notification
failures are logged and never affect the download they describe.
"""

from collections.abc import Callable
from datetime import UTC, datetime

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError
from pydantic_core import PydanticSerializationError

from feedgrab.config import DiscordSettings

logger = structlog.get_logger(__name__)

EMBED_TITLE = "🧲 Torrent Downloaded Successfully"
EMBED_COLOR = 0x00FF00
TORRENT_SUFFIX = ".torrent"


class DiscordEmbed(BaseModel):
    """A single rich embed in a webhook message."""

    title: str
    description: str
    color: int
    timestamp: datetime


class DiscordWebhook(BaseModel):
    """Webhook execute payload. Unset fields are omitted from the JSON."""

    username: str | None = Field(default=None, description="Display name override")
    avatar_url: str | None = Field(default=None, description="Avatar override")
    embeds: list[DiscordEmbed] = Field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DiscordNotifier:
    """Posts a message to a Discord webhook for every downloaded file."""

    def __init__(
        self,
        settings: DiscordSettings,
        timeout_seconds: float | None = 300,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the notifier.

        Args:
            settings: Discord section of the configuration.
            timeout_seconds: HTTP request timeout (None disables it).
            clock: Source of the embed timestamp.
        """
        self.settings = settings
        self.timeout = timeout_seconds
        self.clock = clock
        self.logger = logger.bind(component="discord_notifier")

    @property
    def enabled(self) -> bool:
        return self.settings.enabled and bool(self.settings.webhook_url)

    def build_payload(self, filename: str) -> DiscordWebhook:
        """Build the webhook message announcing ``filename``."""
        display_name = filename.removesuffix(TORRENT_SUFFIX)

        embed = DiscordEmbed(
            title=EMBED_TITLE,
            description=f"**{display_name}**",
            color=EMBED_COLOR,
            timestamp=self.clock(),
        )

        return DiscordWebhook(
            username=self.settings.username or None,
            avatar_url=self.settings.avatar_url or None,
            embeds=[embed],
        )

    def notify(self, filename: str) -> bool:
        """Announce a completed download.

        Args:
            filename: Name of the file written to disk.

        Returns:
            True if the webhook accepted the message, False if notifications
            are disabled or sending failed.
        """
        if not self.enabled:
            return False

        try:
            body = self.build_payload(filename).model_dump_json(exclude_none=True)
        except (ValidationError, PydanticSerializationError) as e:
            self.logger.error("Failed to marshal Discord webhook payload", error=str(e))
            return False

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    self.settings.webhook_url,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.error("Failed to send Discord webhook", error=str(e))
            return False

        if not response.is_success:
            self.logger.error(
                "Discord webhook returned non-success status",
                status_code=response.status_code,
                filename=filename,
            )
            return False

        self.logger.info("Discord notification sent successfully", filename=filename)
        return True
