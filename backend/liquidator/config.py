"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: a local SQLite file works out-of-the-box
    - expose_verification_code defaults to True: no mail channel exists, the code
      is handed back to the caller (demo/test fixture, disable in production)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./liquidator.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Identity
    allowed_email_domain: str = "fl1capital.com"
    verification_code_length: int = Field(6, ge=4, le=12)
    verification_code_ttl_minutes: int = Field(10, ge=1)
    expose_verification_code: bool = True

    # Ledger
    history_limit: int = Field(20, ge=1, le=200)
    summary_limit: int = Field(10, ge=1, le=200)

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
