"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with CHATDROP_ prefix.
The listening port also honours a bare PORT variable, which is what most
hosting environments set.

Learn: pydantic-settings auto-loads from environment, validates types,
provides defaults. Tests build their own Settings pointing at tmp dirs.
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via CHATDROP_* env vars (and PORT)."""

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("PORT", "CHATDROP_PORT"),
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Storage
    messages_file: Path = Path("messages.json")
    upload_dir: Path = Path("uploads")
    public_dir: Path = Path("public")

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
    ]

    model_config = {"env_prefix": "CHATDROP_", "populate_by_name": True}


# Singleton — import this everywhere
settings = Settings()
