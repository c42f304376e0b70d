"""Dashboard templates configuration using Pydantic Settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardConfig(BaseSettings):
    """Main configuration class. Loads from .env file and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "dashboard-templates"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    database_url: str = "sqlite+aiosqlite:///./dashboard_templates.db"
    db_wal_mode: bool = True
    db_busy_timeout: int = 5000  # milliseconds
    db_synchronous: str = "NORMAL"

    # Logging
    log_dir: str = "logs"
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    # Identity is resolved upstream and forwarded in this header
    identity_header: str = "X-User-Id"

    @field_validator("db_synchronous")
    @classmethod
    def validate_db_synchronous(cls, v: str) -> str:
        allowed = {"OFF", "NORMAL", "FULL", "EXTRA"}
        upper = v.upper()
        if upper not in allowed:
            raise ValueError(f"db_synchronous must be one of {allowed}")
        return upper

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent.parent


def get_config() -> DashboardConfig:
    """Factory function to create config instance."""
    return DashboardConfig()
