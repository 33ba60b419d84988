"""
Runtime configuration for the notification facade.

Settings are read from environment variables with the NOTIFY_ prefix, e.g.
NOTIFY_TEMPLATE_DIR=/etc/notifications/templates.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s"


class NotificationSettings(BaseSettings):
    """Notification facade settings."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_", extra="ignore")

    # Templates
    template_dir: Optional[Path] = Field(
        default=None,
        description="Extra directory searched for templates after the bundled ones",
    )
    template_suffix: str = Field(default=".j2", description="Appended to template ids without it")

    # Delivery
    default_sender: str = Field(default="noreply@example.com")
    sms_max_length: int = Field(default=160, ge=1, description="Longer SMS bodies log a warning")

    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> NotificationSettings:
    """Settings loaded once from the environment."""
    return NotificationSettings()


def configure_logging(settings: Optional[NotificationSettings] = None) -> None:
    """Send all facade loggers to stderr in a single readable format."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
