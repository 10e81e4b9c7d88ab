"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STORAGE_BACKENDS = frozenset({"memory", "file", "supabase"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = "http://localhost:5000"
    request_timeout_seconds: float = 15
    food_recommendations_timeout_seconds: float = 35
    demo_token: str = "demo-token"
    storage_backend: str = "file"
    data_dir: str = ".nutriai"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "client_preferences"
    reminder_poll_seconds: float = 30
    autosave_debounce_seconds: float = 0.5
    fallback_seed: int | None = None
    reports_dir: str = "reports"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the storage backend name from env."""
    if raw is None:
        return "file"
    cleaned = raw.strip().lower()
    if not cleaned:
        return "file"
    if cleaned not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend: {raw}")
    return cleaned
