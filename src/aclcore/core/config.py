"""aclcore settings, read from ACL_* environment variables or a .env file."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine, store, logging and listing configuration.

    ``ACL_DATABASE_URL=postgresql+asyncpg://...`` selects PostgreSQL;
    the default is a local SQLite file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ACL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Process
    app_name: str = "aclcore"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Store
    database_url: str = "sqlite+aiosqlite:///./acl_data/acl.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Effective permission cache
    permission_cache_ttl_seconds: int = 300  # 5 minutes

    # Listing
    default_page_size: int = 50
    max_page_size: int = Field(default=500, description="Upper bound for list page sizes")

    # Bootstrap
    root_domain_name: str = "ROOT"
    root_admin_account_name: str = Field(
        default="admin",
        description="Name of the root admin account seeded by init-db",
    )

    @field_validator("max_page_size")
    @classmethod
    def validate_max_page_size(cls, v: int) -> int:
        """Reject non-positive page size limits."""
        if v <= 0:
            raise ValueError("max_page_size must be a positive integer")
        return v

    @property
    def is_production(self) -> bool:
        """True when ACL_ENVIRONMENT=production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """True when ACL_ENVIRONMENT=development."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """True when ACL_ENVIRONMENT=testing."""
        return self.environment == "testing"

    @property
    def database_url_sync(self) -> str:
        """The database URL with its async driver suffix removed."""
        url = self.database_url
        if url.startswith("sqlite+aiosqlite"):
            return url.replace("sqlite+aiosqlite", "sqlite")
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql")
        return url


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings, loading them on first call."""
    return Settings()
