"""Environment configuration and validation.

This module defines strongly-typed tool settings loaded from environment variables (optionally via a
local `.env` file). Project-level options (directories, locale mappings, language-model overrides)
live in the project's `project.json`; see `src.project.config`.
"""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tool settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_dir: str = Field(default=".", alias="PROJECT_DIR")
    project_config: str = Field(default="project.json", alias="PROJECT_CONFIG")
    stage: str | None = Field(default=None, alias="STAGE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that the log level is one of the standard `logging` level names."""

        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}")
        return level

    @field_validator("stage")
    @classmethod
    def empty_stage_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
