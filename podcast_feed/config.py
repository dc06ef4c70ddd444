"""Configuration management for the podcast feed generator."""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_fields() -> dict[str, Any]:
    return {
        "summary": "",
        "categories": {},
        "isPermaLink": "false",
    }


class Settings(BaseSettings):
    """Package settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="PODCAST_FEED_", extra="ignore"
    )

    # Fallback values for channel and episode fields, keyed like the input mappings.
    # Set from the environment as JSON, e.g. PODCAST_FEED_DEFAULTS='{"author": "Jo"}'
    defaults: dict[str, Any] = Field(default_factory=_default_fields)

    # Logging
    log_level: str = Field(default="INFO")

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
