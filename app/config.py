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
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models.common import DeveloperStorageConfig, ProjectStorageConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,  # ... means required (no default)
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Storage Locations
    # -------------------------------------------------------------------------

    PROJECT_BUCKET: str = Field(
        default="project-files",
        description="Storage bucket holding project hero images, galleries and documents"
    )

    PROJECT_HERO_FOLDER: str = Field(default="hero-images")
    PROJECT_IMAGES_FOLDER: str = Field(default="project-images")
    PROJECT_DOCUMENTS_FOLDER: str = Field(default="project-documents")

    DEVELOPER_BUCKET: str = Field(
        default="developer-images",
        description="Storage bucket holding developer logos"
    )

    DEVELOPER_LOGO_FOLDER: str = Field(default="developers")

    # -------------------------------------------------------------------------
    # Listing Settings
    # -------------------------------------------------------------------------

    DEFAULT_PAGE_SIZE: int = Field(
        default=20,
        ge=1,
        description="Page size used when the client doesn't send one"
    )

    PROJECT_LIST_MAX_LIMIT: int = Field(
        default=150,
        ge=1,
        le=1000,
        description="Upper bound on projects returned per page"
    )

    DEVELOPER_LIST_MAX_LIMIT: int = Field(
        default=150,
        ge=1,
        le=1000,
        description="Upper bound on developers returned per page"
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
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Maximum size of a single uploaded file in MB"
    )

    MAX_FILES_PER_FIELD: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Maximum number of files accepted in one multipart field"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty env vars as unset so defaults apply
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://admin.example.com"
            -> ["http://localhost:5173", "https://admin.example.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def project_storage(self) -> ProjectStorageConfig:
        """Storage locations handed to the project repository."""
        return ProjectStorageConfig(
            bucket=self.PROJECT_BUCKET,
            hero_folder=self.PROJECT_HERO_FOLDER,
            images_folder=self.PROJECT_IMAGES_FOLDER,
            documents_folder=self.PROJECT_DOCUMENTS_FOLDER,
        )

    @property
    def developer_storage(self) -> DeveloperStorageConfig:
        """Storage locations handed to the developer repository."""
        return DeveloperStorageConfig(
            bucket=self.DEVELOPER_BUCKET,
            logo_folder=self.DEVELOPER_LOGO_FOLDER,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
