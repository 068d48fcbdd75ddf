"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the page views and the
command-line checks share a consistent configuration surface.
"""

from functools import lru_cache

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cdlytics.utils.http import RetryConfig


class LeagueApiSettings(BaseSettings):
    """Configuration for talking to the upstream league REST API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    base_url: AnyHttpUrl = Field(
        "https://cdlytics.me/api/v1",
        validation_alias="LEAGUE_API_BASE_URL",
    )
    timeout_seconds: float = Field(
        10.0,
        gt=0,
        validation_alias="LEAGUE_API_TIMEOUT",
        description="Per-attempt request deadline.",
    )
    max_retries: int = Field(3, ge=0, validation_alias="LEAGUE_API_MAX_RETRIES")
    retry_delay_seconds: float = Field(
        1.0,
        ge=0,
        validation_alias="LEAGUE_API_RETRY_DELAY",
        description="Base unit of the linear retry backoff.",
    )

    @property
    def base_url_str(self) -> str:
        return str(self.base_url).rstrip("/")

    def retry_config(self, *, enabled: bool = True) -> RetryConfig:
        """Build the default retry policy for resources."""
        return RetryConfig(
            max_retries=self.max_retries,
            retry_base_delay=self.retry_delay_seconds,
            enabled=enabled,
            timeout_seconds=self.timeout_seconds,
        )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    host: str = Field("127.0.0.1", validation_alias="APP_HOST")
    port: int = Field(8000, ge=1, le=65535, validation_alias="APP_PORT")
    default_transfer_season: str = Field(
        "Black Ops 6",
        validation_alias="DEFAULT_TRANSFER_SEASON",
        description="Season preselected on the transfers page.",
    )
    league_api: LeagueApiSettings = Field(default_factory=LeagueApiSettings)

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        """Accept lowercase level names from the environment."""
        return value.strip().upper()


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = ["AppSettings", "LeagueApiSettings", "get_settings"]
