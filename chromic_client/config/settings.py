"""
Client Settings
===============

Process-wide configuration for the rendering client using Pydantic Settings.
Selects the backend (local engine or remote service) and carries the service
URL, timeouts and local engine executables.
"""

from typing import Optional
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chromic_client.models.schemas import Mode


class Settings(BaseSettings):
    """Client settings with environment variable support."""

    # Application Configuration
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Backend Selection
    mode: Mode = Field(default=Mode.REMOTE_SERVICE, description="Rendering backend")

    # Remote Service Configuration
    api_url: str = Field(
        default="http://localhost:8080",
        validation_alias=AliasChoices("CHROME_SERVICE_URL", "CHROMIC_CLIENT_API_URL"),
        description="Base URL of the rendering service",
    )
    receive_timeout: float = Field(
        default=30.0, gt=0, description="Response read timeout in seconds"
    )
    connect_timeout: float = Field(default=8.0, gt=0, description="Connect timeout in seconds")

    # Local Engine Configuration
    chrome_executable: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CHROME_EXECUTABLE", "CHROMIC_CLIENT_CHROME_EXECUTABLE"),
        description="Chromium binary used by the local engine",
    )
    ghostscript_executable: str = Field(
        default="gs", description="Ghostscript binary used for PDF/A output"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="CHROMIC_CLIENT_",
        populate_by_name=True,
        extra="ignore",
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
