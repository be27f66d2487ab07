"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./taskboard.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Asia/Singapore",
        description="IANA timezone (or UTC+HH:MM offset) used for scheduling and storage",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    reminder_grace_minutes: int = Field(
        default=10,
        description="How many minutes after its trigger time a reminder may still fire",
        ge=0,
    )
    reminder_interval_seconds: int = Field(
        default=60,
        description="Period of the reminder scan",
        gt=0,
    )
    dispatch_interval_seconds: int = Field(
        default=60,
        description="Period of the notification delivery sweep",
        gt=0,
    )
    overdue_cron_hour: int = Field(default=9, ge=0, le=23)
    overdue_cron_minute: int = Field(default=0, ge=0, le=59)
    overdue_interval_seconds: int | None = Field(
        default=None,
        description="Run the overdue sweep on an interval instead of the daily cron",
        gt=0,
    )
    enable_scheduler: bool = Field(
        default=False,
        description="Start the background scheduler together with the API",
    )
    digest_enabled: bool = Field(
        default=True,
        description="Send the consolidated overdue digest to project owners",
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
