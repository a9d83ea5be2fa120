"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (defaults are development-only)
    - get_settings() is cached (lru_cache) — single instance per process
    - Settings are frozen: the only process-wide state is immutable configuration
    - pagination_default_limit <= pagination_max_limit

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Notifications disabled when notifier_webhook_url is unset (no-op adapter)
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, frozen=True,
    )

    # Database
    database_url: str = (
        "postgresql+asyncpg://crud:crud@db:5432/crud"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Pagination
    pagination_default_limit: int = 20
    pagination_max_limit: int = 100

    # Auth (tokens are minted by the identity provider; we only verify)
    auth_secret: str = "dev-secret-change-me"
    auth_algorithm: str = "HS256"
    auth_token_ttl_minutes: int = 60

    # Notifications
    notifier_webhook_url: str | None = None
    notifier_timeout_seconds: float = 10.0
    notifier_max_retries: int = 2
    notifier_base_delay_ms: int = 200

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @model_validator(mode="after")
    def check_pagination_bounds(self):
        if self.pagination_max_limit < 1:
            raise ValueError("pagination_max_limit must be >= 1")
        if not 1 <= self.pagination_default_limit <= self.pagination_max_limit:
            raise ValueError(
                "pagination_default_limit must be between 1 and pagination_max_limit",
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
