"""Constants module for dockeagle.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (labels, header names, event actions)
- timeouts.py: Timeout and interval values (seconds)
- limits.py: Limit values (history capacity, id lengths)
- defaults.py: Default values for settings
"""

from dockeagle.constants.defaults import (
    LOG_LEVEL_DEFAULT,
    SUMMARY_INTERVAL_DEFAULT,
    SUMMARY_WINDOW_SECONDS_DEFAULT,
)
from dockeagle.constants.enums import (
    HealthState,
    MetricName,
    RegistryEvent,
    WorkloadState,
)
from dockeagle.constants.limits import MAX_HISTORY_SAMPLES, SHORT_ID_LENGTH
from dockeagle.constants.timeouts import (
    HEALTH_STALE_THRESHOLD,
    PING_INTERVAL,
    STATS_DECODE_RETRY_DELAY,
    STATS_WATCHDOG_TIMEOUT,
    SUPERVISOR_RETRY_DELAY,
)
from dockeagle.constants.values import APP_NAME, CONFIG_ENV_VAR

__all__ = [
    # Application
    "APP_NAME",
    "CONFIG_ENV_VAR",
    # Timeouts
    "HEALTH_STALE_THRESHOLD",
    "PING_INTERVAL",
    "STATS_DECODE_RETRY_DELAY",
    "STATS_WATCHDOG_TIMEOUT",
    "SUPERVISOR_RETRY_DELAY",
    # Limits
    "MAX_HISTORY_SAMPLES",
    "SHORT_ID_LENGTH",
    # Defaults
    "LOG_LEVEL_DEFAULT",
    "SUMMARY_INTERVAL_DEFAULT",
    "SUMMARY_WINDOW_SECONDS_DEFAULT",
    # Enums
    "HealthState",
    "MetricName",
    "RegistryEvent",
    "WorkloadState",
]
