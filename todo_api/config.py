"""
Configuration management using Pydantic Settings.
Challenge: Centralized config, env validation, type safety.
Design: Single source of truth for all environment variables.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment. Validates at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Todo API"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Session tokens (signing secret is read once at startup, never rotated at runtime)
    secret_key: str = DEFAULT_SECRET_KEY
    jwt_algorithm: str = "HS256"
    session_expire_minutes: int = 60 * 24 * 7

    # Password hashing work factor (bcrypt accepts 4..31)
    bcrypt_rounds: int = 12

    # Database (PostgreSQL in production, SQLite for local runs)
    database_url: str = "sqlite+aiosqlite:///./todo_api.db"
    create_tables_on_startup: bool = True

    # CORS for frontend/API consumers
    cors_origins: list[str] = ["*"]

    # Avatar uploads
    avatar_max_bytes: int = 1_000_000

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Refuse to sign tokens with the placeholder secret outside development."""
        if self.environment != "development" and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set to a secure value outside development")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance. Avoids re-reading env on every request (performance)."""
    return Settings()
