"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="YAMA Studio", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./yama.db", alias="DATABASE_URL"
    )

    # Endpoint used when no connection has been stored yet; blank keeps the
    # studio in simulation mode.
    default_api_url: str | None = Field(default=None, alias="YAMA_API_URL")
    request_timeout_seconds: float = Field(
        default=20.0, alias="REQUEST_TIMEOUT", gt=0, le=300
    )
    read_retry_attempts: int = Field(
        default=0, alias="READ_RETRY_ATTEMPTS", ge=0, le=5
    )
    read_retry_backoff_seconds: float = Field(
        default=0.25, alias="READ_RETRY_BACKOFF", ge=0, le=10
    )

    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-09-2025", alias="GEMINI_MODEL"
    )
    gemini_api_url: HttpUrl = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_API_URL",
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("default_api_url", "gemini_api_key", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        """Treat blank strings as missing values."""

        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
        return value

    @field_validator("default_api_url")
    @classmethod
    def _normalise_api_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError("YAMA_API_URL must be an http(s) URL")
        return value.rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
