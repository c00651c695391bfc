"""
Application Configuration

Pydantic-based settings management using environment variables.
Supports nested configuration, validation, and caching.

Usage:
    from schemadoc.config import get_settings

    settings = get_settings()
    print(settings.api.model)
    print(settings.generation.max_tables_per_batch)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class ApiSettings(BaseSettings):
    """Gemini generateContent endpoint configuration."""

    api_key: SecretStr | None = Field(None, description="Gemini API key")
    model: str = Field(default="gemini-2.0-flash", description="Gemini model identifier")
    base_url: str = Field(
        default=GEMINI_BASE_URL,
        description="Base URL of the models collection (without trailing model name)",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature sent with every request",
    )
    timeout: float = Field(
        default=120.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        """Model identifiers are path segments; reject blanks and slashes."""
        v = v.strip()
        if not v or "/" in v:
            raise ValueError("model must be a bare model identifier such as 'gemini-2.0-flash'")
        return v

    def require_api_key(self) -> str:
        """Return the API key, failing when it is not configured."""
        if self.api_key is None or not self.api_key.get_secret_value().strip():
            raise ValueError("Gemini API key is not configured. Set GEMINI_API_KEY")
        return self.api_key.get_secret_value()


class GenerationSettings(BaseSettings):
    """Batching, quota and output settings for documentation generation."""

    max_tables_per_batch: int = Field(
        default=5, gt=0, description="Maximum tables submitted in one generation call"
    )
    max_prompt_weight: int = Field(
        default=8000, gt=0, description="Estimated prompt budget per batch"
    )
    requests_per_window: int = Field(
        default=15, gt=0, description="Requests allowed per rate window"
    )
    window_seconds: float = Field(default=60.0, gt=0, description="Rate window length")
    safety_margin_seconds: float = Field(
        default=0.1, ge=0, description="Extra wait added when the quota is exhausted"
    )
    cooldown_seconds: float = Field(
        default=60.0, ge=0, description="Wait after an HTTP 429 before retrying"
    )
    max_attempts: int = Field(
        default=5, gt=0, description="Attempts per request when throttled (HTTP 429)"
    )
    language: str = Field(
        default="Traditional Chinese", description="Language the document is written in"
    )
    detail_heading: str = Field(
        default="## 表格詳細說明",
        description="Heading placed between the overview and the per-batch sections",
    )

    model_config = SettingsConfigDict(
        env_prefix="DOCGEN_",
        env_file=".env",
        extra="ignore",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stderr only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )
        # Request URLs carry the API key.
        logging.getLogger("httpx").setLevel(max(logging.WARNING, getattr(logging, self.level)))


class Settings(BaseSettings):
    """
    Main application settings.

    Environment Variables:
        GEMINI_*: Endpoint configuration (see ApiSettings)
        DOCGEN_*: Batching and quota configuration (see GenerationSettings)
        LOG_*: Logging configuration (see LoggingSettings)
        CONNECT_TIMEOUT: Database connect timeout in seconds
    """

    connect_timeout: int = Field(
        default=30,
        gt=0,
        description="Database connect/login timeout in seconds",
    )

    api: ApiSettings = Field(default_factory=ApiSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def configure_logging(self) -> "Settings":
        """Configure logging when settings are loaded."""
        self.logging.configure()
        return self

    def model_post_init(self, __context) -> None:
        logger = logging.getLogger(__name__)
        logger.debug(
            f"Settings loaded (model={self.api.model})",
            extra={
                "model": self.api.model,
                "max_tables_per_batch": self.generation.max_tables_per_batch,
                "requests_per_window": self.generation.requests_per_window,
            },
        )


_DOTENV_PATH = Path.cwd() / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("SCHEMADOC_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses functools.lru_cache to ensure settings are loaded only once.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
