"""
Application settings and configuration.

Loads environment variables for logging, page sizes, search limits and the
detail cache bound used by the records store.
"""
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.pagination import MAX_PAGE_SIZE, MIN_PAGE_SIZE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = Field(default="development", description="development/production")
    DEBUG: bool = Field(default=False)

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Minimum structlog level")
    LOG_JSON: bool = Field(default=False, description="Render logs as JSON lines")

    # Paginated list
    RECORDS_PAGE_SIZE: int = Field(default=25, description="Records per paginated fetch")

    # Search suggestions
    RECORDS_SEARCH_LIMIT: int = Field(default=10, description="Max suggestions per search")
    RECORDS_SEARCH_MIN_QUERY_LENGTH: int = Field(default=2, ge=2, description="Shorter queries never reach the repository")
    SEARCH_DEBOUNCE_SECONDS: float = Field(default=0.3, ge=0.0)

    # Detail cache
    RECORD_REPORTS_SUMMARY_LIMIT: int = Field(default=20, ge=1)
    DETAIL_CACHE_MAX_ENTRIES: Optional[int] = Field(
        default=None,
        description="LRU bound for the detail cache (None = unbounded)"
    )

    # Seed data for the in-memory repository
    SEED_FILE: Optional[Path] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("RECORDS_PAGE_SIZE")
    @classmethod
    def clamp_page_size(cls, v: int) -> int:
        return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, v))

    @field_validator("RECORDS_SEARCH_LIMIT")
    @classmethod
    def validate_search_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("RECORDS_SEARCH_LIMIT must be at least 1")
        return v

    @field_validator("DETAIL_CACHE_MAX_ENTRIES")
    @classmethod
    def validate_cache_bound(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("DETAIL_CACHE_MAX_ENTRIES must be positive or unset")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
