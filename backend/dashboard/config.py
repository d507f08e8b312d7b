"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The database connection string comes from the environment (POSTGRES_URL or DATABASE_URL)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Navigation paths live here so action handlers never hardcode redirect targets
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_AUTH_SECRET = "dev-only-secret-change-me"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    postgres_url: str = Field(
        "postgresql+asyncpg://dashboard:dashboard@db:5432/dashboard",
        validation_alias=AliasChoices("postgres_url", "database_url"),
    )

    @field_validator("postgres_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgres:// URLs; asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str):
            for prefix in ("postgres://", "postgresql://"):
                if v.startswith(prefix):
                    return v.replace(prefix, "postgresql+asyncpg://", 1)
        return v

    database_ssl: str | None = "require"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    auth_secret: str = DEV_AUTH_SECRET
    session_cookie_name: str = "dashboard_session"
    bcrypt_rounds: int = Field(10, ge=4, le=31)

    # Failure visibility for delete (create/update/register always surface)
    delete_failure_policy: Literal["surface", "suppress"] = "suppress"

    # Navigation
    invoices_path: str = "/dashboard/invoices"
    login_path: str = "/login"
    dashboard_path: str = "/dashboard"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def uses_dev_auth_secret(self) -> bool:
        return self.auth_secret == DEV_AUTH_SECRET


@lru_cache
def get_settings() -> Settings:
    return Settings()
