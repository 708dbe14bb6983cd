# backend/app/core/config.py
"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "ssl-grader"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    # Connection checks
    HTTPS_TIMEOUT: float = 10.0
    HTTP_FALLBACK_TIMEOUT: float = 5.0

    # Header scoring
    XSS_PROTECTION_WEIGHT: int = Field(
        default=0,
        ge=0,
        description="Deduction for a missing X-XSS-Protection header (0 = inspect only)",
    )

    # AI enrichment
    AI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AI_API_KEY", "LOVABLE_API_KEY"),
    )
    AI_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    AI_MODEL: str = "google/gemini-2.5-flash"
    AI_TIMEOUT: Optional[float] = None

    # CLI
    MAX_BULK_DOMAINS: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins(self) -> list:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
