"""
Travel Journal Backend — Application Configuration
====================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Settings are grouped by concern: database, country directory upstream,
demo account, CORS, server, rate limiting.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults that work for local development against a
    SQLite file. Production deployments override DATABASE_URL and CORS_ORIGINS.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///./file.db or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./travel_journal.db",
        description="Async SQLAlchemy connection URL",
    )

    # Pool sizing only applies to server databases; SQLite ignores it
    db_pool_size: int = Field(default=20, ge=5, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Country Directory (REST Countries) ───────────────────────────────
    countries_api_url: str = Field(default="https://restcountries.com/v3.1")
    countries_fields: str = Field(
        default="name,cca2,cca3,flag,capital,population,region,languages",
        description="Field filter sent on the full-list call",
    )

    # Freshness window for the cached country list, in seconds
    countries_cache_ttl: int = Field(default=3600, ge=0, le=86400)

    # Timeout applied to every upstream call, in seconds
    upstream_timeout: float = Field(default=10.0, gt=0, le=120)

    # ── Demo Account ──────────────────────────────────────────────────────
    # Seeded as user id 1 on startup; its bearer token is demo_token
    demo_username: str = Field(default="demo")
    demo_password: str = Field(default="demo")
    demo_email: str = Field(default="demo@example.com")
    demo_token: str = Field(default="demo-token")
    demo_user_id: int = Field(default=1, ge=1)

    # bcrypt work factor for stored passwords; tests lower it for speed
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins of the browser client
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

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

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # Per-IP sliding window
    rate_limit_requests: int = Field(default=1000, ge=1, le=100000)
    rate_limit_window: int = Field(default=3600, ge=1, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
