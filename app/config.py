# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for sign-in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify access tokens"
    )

    # -------------------------------------------------------------------------
    # Storage Settings
    # -------------------------------------------------------------------------

    CLIENTS_BUCKET: str = Field(
        default="clients_avatar",
        description="Storage bucket holding client photos"
    )

    SIGNED_URL_TTL_SECONDS: int = Field(
        default=60 * 60 * 24,
        ge=60,
        description="Lifetime of signed avatar URLs"
    )

    REPORT_SIGNED_URL_TTL_SECONDS: int = Field(
        default=60 * 60,
        ge=60,
        description="Lifetime of signed URLs embedded in exported documents"
    )

    MAX_IMAGE_SIZE_MB: int = Field(
        default=2,
        ge=1,
        le=50,
        description="Maximum client photo size in MB"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/png,image/jpg,image/svg+xml",
        description="Allowed photo content types (comma-separated)"
    )

    IMAGE_FETCH_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout when downloading images for PDF export"
    )

    # -------------------------------------------------------------------------
    # Listing Settings
    # -------------------------------------------------------------------------

    DEFAULT_PAGE_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Clients shown per page when the request doesn't say"
    )

    AVATAR_CONCURRENCY: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Max avatar URLs resolved at the same time"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://myapp.com" -> ["http://localhost:5173", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_types_list(self) -> list[str]:
        """Parse ALLOWED_IMAGE_TYPES into a list of lower-cased content types."""
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        """Convert MB to bytes for photo size validation."""
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
