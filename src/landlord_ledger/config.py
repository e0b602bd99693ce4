"""Settings for Landlord Ledger, read from ``LANDLORD_*`` environment variables.

A ``.env`` file in the working directory is honored as well. Plan limits
and the tax-category table are not settings; they live in ``domain``.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Runtime configuration.

    Examples:
        LANDLORD_SQLITE_PATH=/var/lib/landlord/ledger.db
        LANDLORD_ENVIRONMENT=production
        LANDLORD_ENABLE_STATEMENT_AUDIT=false
        LANDLORD_DEFAULT_TREND_WINDOW=1year
    """

    model_config = SettingsConfigDict(
        env_prefix="LANDLORD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Landlord Ledger"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool | None = None

    # Ledger store
    sqlite_path: Path = Field(
        default=Path("landlord_ledger.db"),
        description="SQLite file backing the ledger store; ':memory:' for a scratch store",
    )

    # API
    api_host: str = "127.0.0.1"
    api_port: int = Field(default=8000, ge=1, le=65535)

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] | None = Field(
        default=None, description="Defaults to json in production, console elsewhere"
    )
    log_file: Path | None = None

    # Statements and analytics
    enable_statement_audit: bool = Field(
        default=True, description="Keep a copy of every generated statement (best effort)"
    )
    default_trend_window: Literal["3months", "6months", "1year"] = "6months"
    ai_history_limit: int = Field(default=20, ge=1, le=100)
    recent_activity_limit: int = Field(default=10, ge=1, le=100)

    @field_validator("sqlite_path", mode="after")
    @classmethod
    def expand_sqlite_path(cls, v: Path) -> Path:
        if str(v) == ":memory:":
            return v
        return v.expanduser()

    @model_validator(mode="after")
    def apply_environment_defaults(self) -> "Settings":
        """Fill ``debug`` and ``log_format`` from the environment when unset."""
        if self.debug is None:
            self.debug = self.environment == Environment.DEVELOPMENT
        if self.log_format is None:
            self.log_format = "json" if self.environment == Environment.PRODUCTION else "console"
        return self

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Cached settings; call ``get_settings.cache_clear()`` to reload."""
    return Settings()
