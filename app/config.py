"""HandRest settings, read from the environment and `.env`."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-handrest-dev-secret"


class Settings(BaseSettings):
    """Settings for the booking API and its workers."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    app_name: str = "HandRest"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4
    log_level: str = "INFO"
    slow_request_seconds: float = 1.0

    # Postgres (asyncpg for the app, psycopg2 for Alembic)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "handrest"
    postgres_password: str = "handrest"
    postgres_db: str = "handrest"
    db_pool_size: int = 10
    db_max_overflow: int = 5

    # Tests point this at sqlite+aiosqlite://
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Redis backs the rate limiter only
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    # Staff and admin sessions
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # Requests per client IP per minute
    rate_limit_per_minute: int = 100
    login_rate_limit_per_minute: int = 5
    transition_rate_limit_per_minute: int = 30

    # Staff portal and admin console origins
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:8080"]

    booking_number_prefix: str = "HR"

    @computed_field
    @property
    def database_url(self) -> str:
        """Async URL used by the application engine."""
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_location}"

    @computed_field
    @property
    def sync_database_url(self) -> str:
        """Blocking URL used by Alembic."""
        return f"postgresql://{self.postgres_location}"

    @property
    def postgres_location(self) -> str:
        return (
            f"{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field
    @property
    def redis_url(self) -> str:
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def rate_limiting_enabled(self) -> bool:
        """Rate limits apply in staging and production only."""
        return self.environment in ("staging", "production")

    @model_validator(mode="after")
    def require_real_secret_in_production(self) -> "Settings":
        if self.environment == "production" and self.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
