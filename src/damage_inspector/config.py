"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_DEBUG_ENVIRONMENTS = {"local", "development"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str
    table_prefix: str
    inference_base_url: str
    inference_timeout_seconds: float = 60.0
    storage_public: bool = True
    signed_url_ttl_seconds: int = 3600
    max_upload_bytes: int = 10 * 1024 * 1024
    share_web_url: str = "http://localhost:3000"
    api_base_paths: str = ""
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_base_paths(raw: str | None) -> list[str]:
    """Parse gateway base path prefixes from env, longest first."""
    if raw is None:
        return []
    paths: set[str] = set()
    for chunk in raw.split(","):
        value = chunk.strip().rstrip("/")
        if not value:
            continue
        if not value.startswith("/"):
            value = f"/{value}"
        paths.add(value)
    return sorted(paths, key=len, reverse=True)


def is_debug_environment(environment: str) -> bool:
    """Return true when error details may be exposed to callers."""
    return environment.lower() in _DEBUG_ENVIRONMENTS


REQUIRED_FIELDS = (
    "supabase_url",
    "supabase_service_key",
    "storage_bucket",
    "table_prefix",
    "inference_base_url",
)


def blank_required_fields(settings: Settings) -> list[str]:
    """Return env names of required settings that are present but empty."""
    return [
        name.upper()
        for name in REQUIRED_FIELDS
        if not str(getattr(settings, name)).strip()
    ]
