"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    llm_models: str = "gpt-4o-mini,gpt-4.1-mini"
    llm_timeout_seconds: float = 15.0
    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    timezone: str = "UTC"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_model_list(raw: str | None) -> list[str]:
    """Parse the comma-separated model preference list, keeping order."""
    if raw is None:
        return []
    models: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and value not in models:
            models.append(value)
    return models
