"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from fitcoach.domain.nutrition import MACRO_FIELDS, MacroTargets

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_TARGETS = "calories=2000,protein_g=150,carbs_g=250,fat_g=65,fiber_g=25"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    timezone: str = "UTC"
    meal_photo_bucket: str = "meal-photos"
    max_photo_mb: int = 5
    streak_requires_recent: bool = False
    food_cache_ttl_seconds: int = 900
    default_targets: str = DEFAULT_TARGETS
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_macro_targets(raw: str | None) -> MacroTargets:
    """Parse ``macro=value`` pairs over the built-in default profile."""
    values: dict[str, float] = {}
    for source in (DEFAULT_TARGETS, raw or ""):
        for chunk in source.split(","):
            key, sep, value = chunk.partition("=")
            key = key.strip()
            if not sep or key not in MACRO_FIELDS:
                continue
            try:
                values[key] = float(value)
            except ValueError:
                continue
    return MacroTargets(**values)
