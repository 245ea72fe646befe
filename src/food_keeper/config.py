"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = "http://localhost:8080/api"
    oauth_authorize_url: str = "http://localhost:8080/oauth2/authorize/google"
    token_file: str = "~/.food_keeper/token"
    request_timeout_seconds: float = 10.0
    banner_ttl_seconds: int = 3
    recent_window_days: int = 7
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_token_path(raw: str) -> Path:
    """Expand the configured token location into an absolute path."""
    return Path(raw.strip() or "~/.food_keeper/token").expanduser()
