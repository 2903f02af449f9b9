"""
Configuration module for the Clinic Portal client.
Loads settings from environment variables (and an optional .env file).
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Clinic REST backend
    api_base_url: str = Field(
        default="http://localhost:8080",
        alias="API_BASE_URL",
        description="Base URL of the clinic REST backend"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        alias="REQUEST_TIMEOUT_SECONDS",
        description="Timeout applied to every backend request"
    )

    # Directory filtering
    filter_debounce_seconds: float = Field(
        default=0.0,
        alias="FILTER_DEBOUNCE_SECONDS",
        description="Delay before a filter change is sent (0 disables debouncing)"
    )

    # Persisted client state (token / role written by the login flow)
    session_store_path: str = Field(
        default="./data/session.json",
        alias="SESSION_STORE_PATH",
        description="Path to the JSON key-value store holding token and role"
    )

    # Application Configuration
    app_host: str = Field(
        default="0.0.0.0",
        alias="APP_HOST",
        description="Host to bind the application"
    )
    app_port: int = Field(
        default=8000,
        alias="APP_PORT",
        description="Port to bind the application"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    # Branding Configuration
    brand_name: str = Field(
        default="Clinic Portal",
        alias="BRAND_NAME",
        description="Application name shown in header"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
