"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database - any async SQLAlchemy URL (sqlite+aiosqlite, postgresql+asyncpg)
    database_url: str = "sqlite+aiosqlite:///./bookmarks.db"
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")
    db_echo: bool = Field(default=False, validation_alias="DB_ECHO")

    # Validation profile - see services.bookmark_service.PROFILES
    bookmark_profile: Literal["lenient", "strict"] = Field(
        default="lenient", validation_alias="BOOKMARK_PROFILE",
    )
    default_platform: str = Field(default="instagram", validation_alias="DEFAULT_PLATFORM")
    default_owner: str = Field(default="default", validation_alias="DEFAULT_OWNER")

    # Pagination
    default_page_size: int = Field(default=50, validation_alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=200, validation_alias="MAX_PAGE_SIZE")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(default="*", validation_alias="CORS_ORIGINS")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "Settings":
        """Ensure the default page size fits within the maximum."""
        if self.max_page_size < 1:
            raise ValueError(f"MAX_PAGE_SIZE must be positive (got {self.max_page_size})")
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE "
                f"({self.max_page_size}), got {self.default_page_size}",
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
