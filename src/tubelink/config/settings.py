"""
Application settings and configuration management.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from tubelink import __version__

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="tubelink")
    app_version: str = Field(default=__version__)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    development_mode: bool = Field(default=False)

    # Outbound HTTP
    youtube_base_url: str = Field(default="https://www.youtube.com")
    request_timeout: float = Field(default=15.0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    # Feed
    feed_latest_entry_index: int = Field(default=1)

    # Headless browser
    browser_executable_path: Path | None = Field(default=None)
    browser_headless: bool = Field(default=True)
    browser_wait_until: str = Field(default="networkidle")
    browser_navigation_timeout: float = Field(default=30.0)
    browser_selector_timeout: float = Field(default=15.0)
    browser_viewport_width: int = Field(default=1280)
    browser_viewport_height: int = Field(default=720)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("youtube_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended directly."""
        return v.rstrip("/")

    @field_validator("feed_latest_entry_index")
    @classmethod
    def validate_entry_index(cls, v: int) -> int:
        """Validate the feed entry index used for latest-video fields."""
        if v < 0:
            raise ValueError(f"feed_latest_entry_index must be >= 0, got {v}")
        return v

    @field_validator("browser_wait_until")
    @classmethod
    def validate_wait_until(cls, v: str) -> str:
        """Validate the navigation wait condition."""
        valid_conditions = ["load", "domcontentloaded", "networkidle", "commit"]
        if v.lower() not in valid_conditions:
            raise ValueError(f"Invalid browser wait condition: {v}")
        return v.lower()

    @field_validator(
        "request_timeout", "browser_navigation_timeout", "browser_selector_timeout"
    )
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate that timeouts are positive."""
        if v <= 0:
            raise ValueError(f"Timeout must be greater than 0, got {v}")
        return v

    @property
    def feed_url(self) -> str:
        """Atom video feed endpoint; the handle goes in the ``user`` param."""
        return f"{self.youtube_base_url}/feeds/videos.xml"

    def channel_page_url(self, handle: str) -> str:
        """Get the public ``/@handle`` page URL, percent-encoding the handle."""
        encoded = quote(handle, safe="")
        return f"{self.youtube_base_url}/@{encoded}"

    def channel_id_url(self, channel_id: str) -> str:
        """Get the canonical ``/channel/<ID>`` URL for a channel ID."""
        return f"{self.youtube_base_url}/channel/{channel_id}"

    model_config = {
        "env_prefix": "TUBELINK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
