"""
Application configuration using Pydantic Settings.

Push delivery reads an immutable PushDeliveryConfig derived from Settings once
at startup instead of module-level flags.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nudge.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./nudge.db"

    # ===========================================
    # Web Push (VAPID)
    # ===========================================
    VAPID_PUBLIC_KEY: str = ""
    VAPID_PRIVATE_KEY: str = ""
    VAPID_SUBJECT: str = "mailto:notifications@example.com"

    # Short TTL: a missed check-in is not worth delivering hours later
    PUSH_TTL_SECONDS: int = Field(60, ge=0, le=3600)
    PUSH_URGENCY: Literal["very-low", "low", "normal", "high"] = "high"
    PUSH_TIMEOUT_SECONDS: float = Field(10.0, gt=0)
    PUSH_NOTIFICATION_TAG: str = "nudge-scheduled"

    # ===========================================
    # Delivery pass
    # ===========================================
    # Shared secret for the trigger endpoints. Empty = open.
    CRON_SECRET: str = ""
    DELIVERY_MAX_CONCURRENCY: int = Field(8, ge=1, le=256)
    # Run the pass from an in-process APScheduler job (once per minute)
    DELIVERY_SCHEDULER_ENABLED: bool = False

    # ===========================================
    # Users / activities
    # ===========================================
    DEFAULT_USER_ID: str = "default-user"
    DEFAULT_TIMEZONE: str = "America/Los_Angeles"
    # Optional JSON file ({"activity_id": "Display name"}) merged into the catalog
    ACTIVITY_CATALOG_PATH: str = ""

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"

    @property
    def vapid_configured(self) -> bool:
        return bool(self.VAPID_PUBLIC_KEY and self.VAPID_PRIVATE_KEY)


class PushDeliveryConfig(BaseModel):
    """Immutable configuration handed to the push dispatcher."""

    model_config = ConfigDict(frozen=True)

    vapid_public_key: str
    vapid_private_key: str
    vapid_subject: str
    ttl_seconds: int = 60
    urgency: str = "high"
    timeout_seconds: float = 10.0
    notification_tag: str = "nudge-scheduled"
    max_concurrency: int = 8
    default_user_id: str = "default-user"

    @classmethod
    def from_settings(cls, settings: Settings) -> "PushDeliveryConfig":
        """
        Build the delivery configuration.

        Raises:
            ConfigurationError: If VAPID keys or the database URL are missing.
        """
        if not settings.DATABASE_URL:
            raise ConfigurationError("Database not configured")
        if not settings.vapid_configured:
            raise ConfigurationError("VAPID keys not configured")
        return cls(
            vapid_public_key=settings.VAPID_PUBLIC_KEY,
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_subject=settings.VAPID_SUBJECT,
            ttl_seconds=settings.PUSH_TTL_SECONDS,
            urgency=settings.PUSH_URGENCY,
            timeout_seconds=settings.PUSH_TIMEOUT_SECONDS,
            notification_tag=settings.PUSH_NOTIFICATION_TAG,
            max_concurrency=settings.DELIVERY_MAX_CONCURRENCY,
            default_user_id=settings.DEFAULT_USER_ID,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
