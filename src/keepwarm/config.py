"""Configuration management with pydantic-settings."""

import re
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_idle_timeout(raw: str) -> int | None:
    """Read the leading integer of an idle timeout value.

    Trailing text is ignored, so "3600s" reads as 3600.

    Returns:
        The parsed seconds, or None when the value does not start with an integer.
    """
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


class KeepwarmSettings(BaseSettings):
    """keepwarm application settings loaded from environment variables.

    All settings use the KEEPWARM_ prefix for environment variables. The idle
    timeout is also read from SECONDS_OF_DW_INACTIVITY_BEFORE_IDLING, which the
    workspace environment sets for the idling service.
    """

    # Coalescing and retry configuration
    coalesce_period: float = Field(
        default=60.0,
        description="Seconds during which repeated activity signals collapse into one report",
    )
    retry_delay: float = Field(
        default=5.0,
        description="Seconds to wait before retrying a failed activity report",
    )
    max_retries: int = Field(
        default=5,
        description="Retries after the first failed report before giving up",
    )

    # Activity service endpoint
    activity_url: str = Field(
        default="http://127.0.0.1:3333/activity/tick",
        description="Endpoint that resets the workspace inactivity timer",
    )
    activity_method: str = Field(
        default="POST",
        description="HTTP method used for the activity endpoint",
    )
    request_timeout: float = Field(
        default=10.0,
        description="Activity request timeout in seconds",
    )

    # Idle eviction, kept as the raw string so malformed values can be reported
    idle_timeout: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "KEEPWARM_IDLE_TIMEOUT",
            "SECONDS_OF_DW_INACTIVITY_BEFORE_IDLING",
        ),
        description="Seconds of inactivity before the workspace is idled",
    )

    # Logging configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format: console or json")

    model_config = SettingsConfigDict(
        env_prefix="KEEPWARM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("coalesce_period", "retry_delay", "request_timeout")
    @classmethod
    def _non_negative_seconds(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be zero or positive")
        return value

    @field_validator("max_retries")
    @classmethod
    def _non_negative_retries(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be zero or positive")
        return value

    @field_validator("idle_timeout")
    @classmethod
    def _blank_idle_timeout_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def idle_timeout_seconds(self) -> int | None:
        """Parsed idle timeout, or None when unset or not an integer."""
        if self.idle_timeout is None:
            return None
        return parse_idle_timeout(self.idle_timeout)

    def get_coordinator_config(self) -> dict[str, Any]:
        """Get the keyword arguments for ActivityCoordinator timing.

        Returns:
            Configuration dictionary with coalesce_period, retry_delay and max_retries.
        """
        return {
            "coalesce_period": self.coalesce_period,
            "retry_delay": self.retry_delay,
            "max_retries": self.max_retries,
        }

    def get_reporter_config(self) -> dict[str, Any]:
        """Get the keyword arguments for HTTPActivityReporter.

        Returns:
            Configuration dictionary with url, method and timeout.
        """
        return {
            "url": self.activity_url,
            "method": self.activity_method,
            "timeout": self.request_timeout,
        }


# Global settings instance
_settings: KeepwarmSettings | None = None


def get_settings() -> KeepwarmSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = KeepwarmSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
