"""Central configuration management.

The feed definition lives in a ``config.yaml`` next to the executable and
is validated with pydantic. Process-level knobs (logging, HTTP tuning,
config file override) come from environment variables via pydantic-settings.
Create a .env file for local development.
"""

import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedgrab import __version__

logger = structlog.get_logger(__name__)

CONFIG_FILENAME = "config.yaml"


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded."""

    pass


class DiscordSettings(BaseModel):
    """Discord webhook notification settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Send a message per download")
    webhook_url: str = Field(default="", description="Discord webhook endpoint")
    username: str = Field(default="", description="Display name override")
    avatar_url: str = Field(default="", description="Avatar image URL override")


class FeedConfig(BaseModel):
    """Contents of config.yaml."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    rss_url: str = Field(min_length=1, description="RSS feed to poll")
    output_dir: Path = Field(description="Directory downloaded files are written to")
    discord: DiscordSettings = Field(default_factory=DiscordSettings)

    @field_validator("discord", mode="before")
    @classmethod
    def _empty_discord_block(cls, value):
        # A bare `discord:` key loads as None
        return {} if value is None else value


class Settings(BaseSettings):
    """Runtime settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="FEEDGRAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_parse_none_str="None",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")
    config_path: Path | None = Field(
        default=None, description="Override for the config.yaml location"
    )
    timeout_seconds: float | None = Field(
        default=300.0, description="HTTP timeout, None waits forever"
    )
    chunk_size: int = Field(default=8192, gt=0, description="Chunk size for streaming downloads")
    user_agent: str = Field(default=f"feedgrab/{__version__}", description="HTTP User-Agent")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Runtime settings loaded from environment.
    """
    return Settings()


def default_config_path() -> Path:
    """Return the config.yaml path beside the running executable."""
    return Path(sys.argv[0]).resolve().parent / CONFIG_FILENAME


def load_config(file_path: Path | str) -> FeedConfig:
    """Load and validate the YAML configuration file.

    Args:
        file_path: Path to config.yaml.

    Returns:
        Validated, immutable configuration.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid YAML
            or lacks a required key.
    """
    path = Path(file_path)

    try:
        with path.open("r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except OSError as e:
        logger.error("Error reading config file", path=str(path), error=str(e))
        raise ConfigError(f"Error reading config file {path}: {e}") from e
    except yaml.YAMLError as e:
        logger.error("Invalid YAML syntax", path=str(path), error=str(e))
        raise ConfigError(f"Error parsing config file {path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        config = FeedConfig.model_validate(raw_config)
    except ValidationError as e:
        logger.error("Configuration validation failed", path=str(path), error=str(e))
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    logger.info("Configuration loaded", path=str(path))
    return config
