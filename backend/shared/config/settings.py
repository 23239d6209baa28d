"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    # Database
    database_url: str = "sqlite:///./objects.db"

    # REST surface
    api_namespace: str = "api/v1"
    base_url: str = "http://localhost:8000"
    rest_api_port: int = 8000
    # Comma-separated CORS origins; empty uses the development defaults
    allowed_origins: str = ""

    # Collections
    default_page_size: int = 10
    max_page_size: int = 100
    max_batch_items: int = 100

    # Trash retention in days. 0 disables soft delete for every resource type.
    empty_trash_days: int = 30

    # Environment
    environment: str = "development"
    debug: bool = True

    # Logging. Empty values follow debug / environment.
    log_level: str = ""
    log_format: str = ""  # "json" or "text"

    # Seed a few demo objects on startup
    seed_demo_data: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def validate_production_settings(self) -> list[str]:
        """
        Validate settings that must not keep development defaults in production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

            if self.base_url.startswith("http://localhost"):
                errors.append("BASE_URL must be the public URL of the API in production")

        if self.max_page_size < 1:
            errors.append("MAX_PAGE_SIZE must be at least 1")

        if not 1 <= self.default_page_size <= self.max_page_size:
            errors.append("DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE")

        return errors

    @property
    def supports_trash(self) -> bool:
        """Whether soft delete is enabled globally."""
        return self.empty_trash_days > 0


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (FastAPI dependency friendly)."""
    return Settings()


settings = get_settings()

DATABASE_URL = settings.database_url
