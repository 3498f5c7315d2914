"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    storage_backend: str = "supabase"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    timezone: str = "UTC"
    password_iterations: int = 100_000
    auth_delay_seconds: float = 0.0
    recent_history_limit: int = 6
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the configured storage backend name."""
    if raw is None:
        return "memory"
    cleaned = raw.strip().lower()
    if cleaned in {"", "memory", "inmemory", "in-memory"}:
        return "memory"
    if cleaned == "supabase":
        return "supabase"
    raise ValueError(f"Unknown storage backend: {raw}")
