"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import IdentityDefaults
from ..domain.shared.messages import ErrorMessages


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/viewpoints.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class WebSettings(BaseModel):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    localhost_address: str = Field(
        default="localhost:3000",
        validation_alias=AliasChoices("localhost_address", "localhost"),
    )


class IdentitySettings(BaseModel):
    """Where voter identities are read from on incoming requests."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    session_cookie_name: str = Field(
        default=IdentityDefaults.SESSION_COOKIE_NAME,
        min_length=1,
        validation_alias=AliasChoices("session_cookie_name", "cookie_name"),
    )
    user_id_header: str = Field(
        default=IdentityDefaults.USER_ID_HEADER,
        min_length=1,
        validation_alias=AliasChoices("user_id_header", "user_header"),
    )
    session_cookie_max_age_s: int = Field(
        default=IdentityDefaults.SESSION_COOKIE_MAX_AGE_S,
        ge=60,
        validation_alias=AliasChoices("session_cookie_max_age_s", "cookie_max_age"),
    )
    secure_cookies: bool = False


class VotingSettings(BaseModel):
    """Limits for in-memory voting sessions."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    max_sessions: int = Field(default=10_000, ge=1)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DATABASE__URL, DATABASE__BUSY_TIMEOUT_MS (nested with ``__``)
    - WEB__HOST, WEB__PORT, WEB__LOCALHOST_ADDRESS
    - IDENTITY__SESSION_COOKIE_NAME, IDENTITY__USER_ID_HEADER
    - VOTING__MAX_SESSIONS
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    web: WebSettings = Field(default_factory=WebSettings)
    identity: IdentitySettings = Field(default_factory=IdentitySettings)
    voting: VotingSettings = Field(default_factory=VotingSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
