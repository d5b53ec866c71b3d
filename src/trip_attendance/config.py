"""Application configuration."""

import os
from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STORAGE_BACKENDS = {"supabase", "local"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_service_key: str | None = None
    storage_backend: str = "supabase"
    local_store_path: str = ".trip-attendance-sessions.json"
    session_duration_hours: float = 24
    poll_interval_seconds: float = 10
    api_prefix: str = "/api"
    api_base_url: str = "http://localhost:3000/api"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str) -> str:
    """Normalize the configured storage backend name."""
    value = raw.strip().lower()
    if value not in STORAGE_BACKENDS:
        allowed = ", ".join(sorted(STORAGE_BACKENDS))
        raise ValueError(f"Unknown storage backend {raw!r} (expected one of {allowed})")
    return value


def session_duration(settings: Settings) -> timedelta:
    """Return the default session lifetime."""
    return timedelta(hours=settings.session_duration_hours)
