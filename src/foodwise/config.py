"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: str = "json"
    data_dir: Path = Path("data")
    storage_key: str = "foodwise_items"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    telegram_bot_token: str | None = None
    telegram_alert_chat_id: int | None = None
    expiring_threshold_days: int = 3
    rescan_interval_seconds: int = 3600
    storage_poll_seconds: int = 30
    banner_critical_below_days: float = 2
    banner_warning_below_days: float = 4
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="FOODWISE_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def telegram_alerts_enabled(settings: Settings) -> bool:
    """Return True when both a bot token and a target chat are configured."""
    token = (settings.telegram_bot_token or "").strip()
    return bool(token) and settings.telegram_alert_chat_id is not None
