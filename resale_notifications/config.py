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
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone (or UTC offset) used for timestamps and quiet hours",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Base URL of the marketplace frontend, used for links in emails",
    )
    brand_name: str = Field(
        default="SneatSnags",
        description="Marketplace name shown in the email header and footer",
    )
    sendgrid_timeout_seconds: float = Field(
        default=10.0,
        description="HTTP timeout for a single SendGrid API request",
        gt=0,
    )
    channel_send_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for a single channel delivery before it is abandoned",
        gt=0,
    )
    due_dispatch_batch_size: int = Field(
        default=100,
        description="Maximum number of deferred notifications sent per dispatch pass",
        gt=0,
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

    @property
    def preferences_url(self) -> str:
        """Link to the page where users manage their notification settings."""

        return f"{self.frontend_url.rstrip('/')}/settings/notifications"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
