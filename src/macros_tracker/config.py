"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    foods_table: str = "foods"
    blocks_table: str = "macro_blocks"
    other_items_label: str = "Other Items"
    block_cache_ttl_seconds: int = 300
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_block_ids(raw: str | None) -> list[str]:
    """Parse a comma separated list of block ids, keeping order."""
    if raw is None:
        return []
    ids: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value:
            ids.append(value)
    return ids
