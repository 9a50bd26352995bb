"""
Configuration management for the metadata extractor.

This module uses pydantic-settings so every option can come from
environment variables (prefixed ``METAEXTRACTOR_``) or a ``.env`` file.
"""
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Log levels supported by the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Main settings class for the metadata extractor."""
    # Extraction
    default_image: str = ""
    language: str = "en"
    detect_language_from_markup: bool = False

    # Fetching
    timeout_seconds: float = Field(default=10.0)
    use_single_http_client: bool = False
    user_agent: Optional[str] = None

    # Logging
    log_level: LogLevel = LogLevel.INFO
    structured_logging: bool = False

    model_config = SettingsConfigDict(
        env_prefix="METAEXTRACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Timeouts must be positive."""
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


def load_settings() -> Settings:
    """Load settings from environment variables and .env file."""
    return Settings()
