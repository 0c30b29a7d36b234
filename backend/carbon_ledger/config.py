"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Ledger genesis parameters come from environment variables with safe defaults
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - SQLite default: works out-of-the-box; PostgreSQL via DATABASE_URL in deployment
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from carbon_ledger.core.domain_types import (
    DEFAULT_ADMIN, DEFAULT_ISSUANCE_FEE, DEFAULT_MAX_ISSUERS,
    DEFAULT_GRACE_PERIOD, DEFAULT_TOKEN_URI, DEFAULT_MAX_SUPPLY,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./carbon_ledger.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs use postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Create tables on startup (local SQLite); deployments run alembic instead
    database_auto_create: bool = True

    # Ledger genesis
    ledger_admin: str = DEFAULT_ADMIN
    ledger_issuance_fee: int = DEFAULT_ISSUANCE_FEE
    ledger_max_issuers: int = DEFAULT_MAX_ISSUERS
    ledger_grace_period: int = DEFAULT_GRACE_PERIOD
    ledger_token_uri: str = DEFAULT_TOKEN_URI
    ledger_max_supply: int = DEFAULT_MAX_SUPPLY
    ledger_initial_height: int = 0

    # Post-operation invariant audit (rolls back on violation)
    ledger_audit_invariants: bool = True

    # Write a state snapshot after every successful operation
    persist_snapshots: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
