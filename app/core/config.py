"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_name: str = "Rentline"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"

    # Database
    database_url: str
    database_echo: bool = False

    # Firebase Auth
    firebase_project_id: str
    google_application_credentials: Optional[str] = None

    # CORS
    allowed_origins: str = "http://localhost:5173"

    # Square payments (credentials live in system_settings)
    square_api_version: str = "2024-01-18"
    square_timeout_seconds: float = 30.0

    # AI provider key verification
    ai_key_verify_timeout_seconds: float = 10.0

    # Outbound notifications
    notification_from_email: str = "noreply@rentline.app"

    @property
    def cors_origins(self) -> list[str]:
        """Parsed ALLOWED_ORIGINS list, first entry is the default origin."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
