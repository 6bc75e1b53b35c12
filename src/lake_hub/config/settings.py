"""
Configuration management for LakeHub.

Environment-based configuration using Pydantic BaseSettings. Values come from
the process environment or from a ``.env`` file at the project root (override
the location with ``LAKE_HUB_ENV_FILE``).
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("LAKE_HUB_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Fields (no prefix, uppercase names):
    - DATABASE_URL: SQLAlchemy URL of the database holding scopes/scope configs
    - ENVIRONMENT: Deployment environment (dev, staging, prod)
    - LOG_LEVEL: Logging level
    - LOG_TO_FILE: Also write logs to a daily rotating file
    - LOG_FILE_DIR: Directory for log files
    """

    DATABASE_URL: str = Field(
        default="sqlite:///lake_hub.db",
        validation_alias="DATABASE_URL",
        description="SQLAlchemy database URL",
    )
    ENVIRONMENT: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        validation_alias="ENVIRONMENT",
        description="Deployment environment",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )
    LOG_TO_FILE: bool = Field(
        default=False,
        validation_alias="LOG_TO_FILE",
        description="Enable file logging",
    )
    LOG_FILE_DIR: str = Field(
        default="logs",
        validation_alias="LOG_FILE_DIR",
        description="Directory for log files",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {LOG_LEVELS}, got {v!r}")
        return level

    @model_validator(mode="after")
    def validate_production_database_url(self) -> "Settings":
        """Production must not run against a local SQLite file."""
        if self.ENVIRONMENT == "prod" and self.DATABASE_URL.startswith("sqlite"):
            raise ValueError(
                "Production environment requires a server database; "
                f"got: {self.DATABASE_URL[:20]}..."
            )
        return self

    model_config = SettingsConfigDict(
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
