"""Application configuration using Pydantic Settings."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "habitual"

    # Plan generation (Gemini)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    generation_timeout_seconds: float = 60.0
    generation_max_attempts: int = 1
    generation_retry_backoff_seconds: float = 1.0
    max_timeframe_days: int = 365

    # Calendar days are computed in this IANA timezone
    timezone: str = "UTC"

    # Single-user mode
    default_user_id: str = "user123"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


settings = Settings()
