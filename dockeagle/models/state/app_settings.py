"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field

from dockeagle.constants.defaults import (
    LOG_LEVEL_DEFAULT,
    SUMMARY_INTERVAL_DEFAULT,
    SUMMARY_WINDOW_SECONDS_DEFAULT,
)
from dockeagle.constants.limits import MAX_HISTORY_SAMPLES
from dockeagle.constants.timeouts import (
    DOCKER_CLIENT_TIMEOUT,
    HEALTH_STALE_THRESHOLD,
    PING_INTERVAL,
    STATS_DECODE_RETRY_DELAY,
    STATS_WATCHDOG_TIMEOUT,
    SUPERVISOR_RETRY_DELAY,
)


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Control plane connection
    docker_base_url: str | None = None  # None reads DOCKER_HOST & co.
    docker_timeout: int = Field(default=DOCKER_CLIENT_TIMEOUT, gt=0)

    # Supervision
    ping_interval: float = Field(default=PING_INTERVAL, gt=0)
    retry_delay: float = Field(default=SUPERVISOR_RETRY_DELAY, ge=0)

    # Stats streams
    decode_retry_delay: float = Field(default=STATS_DECODE_RETRY_DELAY, ge=0)
    watchdog_timeout: float = Field(default=STATS_WATCHDOG_TIMEOUT, gt=0)
    health_stale_seconds: float = Field(default=HEALTH_STALE_THRESHOLD, ge=0)
    history_capacity: int = Field(default=MAX_HISTORY_SAMPLES, ge=1)

    # Headless runner
    summary_interval: float = Field(default=SUMMARY_INTERVAL_DEFAULT, gt=0)
    summary_window_seconds: float = Field(default=SUMMARY_WINDOW_SECONDS_DEFAULT, gt=0)
    log_level: str = LOG_LEVEL_DEFAULT


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
