"""
TimeTracker Backend - Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values come from environment variables (or a .env file), are coerced
       and range-checked on load, and are exposed through the `settings`
       singleton.
Who:   Imported by the database layer, security stub, rate limiters and the
       application factory.

Every setting has a development default, so `uvicorn timetracker.main:app`
works out of the box against a local SQLite file.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern. Names are case-insensitive, so
    DATABASE_URL and database_url both work.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///./file.db or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./timetracker.db",
        description="Async SQLAlchemy connection URL",
    )

    # Pool sizing only applies to server databases; SQLite uses NullPool.
    db_pool_size: int = Field(default=20, ge=5, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)
    db_echo: bool = Field(default=False, description="Log every SQL statement")

    # ── Startup ───────────────────────────────────────────────────────────
    create_schema_on_startup: bool = Field(
        default=True,
        description="Create missing tables when the application starts",
    )
    seed_demo_data: bool = Field(
        default=True,
        description="Insert the demo clients, users, projects and time entries into an empty store",
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    # Demo default: any origin. Comma-separated list otherwise.
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Demo Authentication ───────────────────────────────────────────────
    # Every request is signed in as this principal; no tokens are issued.
    demo_user_name: str = Field(default="Demo User")
    demo_user_roles: str = Field(default="Admin", description="Comma-separated role names")
    auth_require_token: bool = Field(
        default=False,
        description="Reject requests that carry no Authorization: Bearer header",
    )

    @property
    def demo_user_roles_list(self) -> List[str]:
        return [role.strip() for role in self.demo_user_roles.split(",") if role.strip()]

    # ── Rate Limiting ─────────────────────────────────────────────────────
    rate_limit_enabled: bool = Field(default=True)

    # "get" partition: concurrency limiter
    rate_limit_get_permit_limit: int = Field(default=2, ge=1, le=1000)
    rate_limit_get_queue_limit: int = Field(default=2, ge=0, le=1000)

    # "modify" partition without a `token` header: fixed window
    rate_limit_modify_permit_limit: int = Field(default=1, ge=1, le=1000)
    rate_limit_modify_window_seconds: float = Field(default=5.0, gt=0, le=3600)
    rate_limit_modify_queue_limit: int = Field(default=5, ge=0, le=1000)

    # "modify" partition with a `token` header: token bucket
    rate_limit_token_limit: int = Field(default=1, ge=1, le=1000)
    rate_limit_tokens_per_period: int = Field(default=1, ge=1, le=1000)
    rate_limit_replenishment_seconds: float = Field(default=5.0, gt=0, le=3600)
    rate_limit_token_queue_limit: int = Field(default=5, ge=0, le=1000)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# Singleton instance, imported throughout the application
settings = Settings()
