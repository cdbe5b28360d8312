"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    supabase_url: str
    supabase_service_key: str
    api_token: str
    telegram_allowed_user_ids: str | None = None
    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    openai_store: bool = False
    analysis_enabled: bool = True
    analysis_timeout_seconds: float = 20.0
    vision_enabled: bool = True
    fatsecret_consumer_key: str
    fatsecret_consumer_secret: str
    fatsecret_base_url: str = "https://platform.fatsecret.com/rest/server.api"
    default_language: str = "uk"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_user_ids(raw: str | None) -> set[int] | None:
    """Parse allowed Telegram user IDs; ``None`` means everyone is allowed."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return None
    ids = {
        int(value)
        for value in (chunk.strip() for chunk in cleaned.split(","))
        if value.isdigit()
    }
    return ids or None
