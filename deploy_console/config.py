"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file and override existing env vars
load_dotenv(override=True)


class Settings(BaseSettings):
    """Console settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"

    # Backend API
    api_base_url: str = "http://localhost:8000"
    request_timeout_seconds: float = 30.0

    # GitHub App integration
    github_app_install_url: str = Field(default="")

    # Workflow timers
    otp_resend_cooldown_seconds: int = 60
    countdown_interval_seconds: float = 1.0
    dashboard_poll_interval_seconds: float = 10.0
    message_ttl_seconds: float = 5.0

    # Form defaults
    min_password_length: int = 8
    default_branch: str = "main"
    default_environment: str = "production"

    # Durable client state (session token, signup draft)
    storage_path: str = ".deploy_console/state.json"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_file: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
