"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_ACTIVITY_WEBHOOK = (
    "https://discord.com/api/webhooks/000000000000000000/library-activity"
)
DEFAULT_YEARLY_WEBHOOK = (
    "https://discord.com/api/webhooks/000000000000000000/library-yearly"
)
DEFAULT_RELEASE_WEBHOOK = (
    "https://discord.com/api/webhooks/000000000000000000/library-release"
)


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./mangashelf.db",
        description="Database connection URL used by SQLAlchemy for the document store",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key for signing JWT tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    activity_webhook_default: str = Field(
        default=DEFAULT_ACTIVITY_WEBHOOK,
        description="Webhook used when settings/webhooks holds no activity target",
        min_length=1,
    )
    yearly_webhook_default: str = Field(
        default=DEFAULT_YEARLY_WEBHOOK,
        description="Webhook stored for yearly summaries when settings/webhooks is created",
        min_length=1,
    )
    release_webhook_default: str = Field(
        default=DEFAULT_RELEASE_WEBHOOK,
        description="Webhook stored for release reminders when settings/webhooks is created",
        min_length=1,
    )
    activity_log_path: str = Field(
        default="./activity_log.json",
        description="File backing the local key-value store for the activity log",
        min_length=1,
    )
    webhook_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to outbound webhook requests",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone or UTC offset used for human readable timestamps",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )

    @field_validator(
        "activity_webhook_default", "yearly_webhook_default", "release_webhook_default"
    )
    @classmethod
    def _strip_webhook(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Webhook defaults must not be blank")
        return stripped


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "DEFAULT_ACTIVITY_WEBHOOK",
    "DEFAULT_RELEASE_WEBHOOK",
    "DEFAULT_YEARLY_WEBHOOK",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
