"""Timeout constants for dockeagle.

All timeout and interval values (float, in seconds) for stream handling,
liveness checks and retry cycles.
"""

from typing import Final

# ============================================================================
# Stats stream timings
# ============================================================================

STATS_DECODE_RETRY_DELAY: Final = 0.1
STATS_WATCHDOG_TIMEOUT: Final = 2.0

# Literal 5ns staleness window; effectively re-checks health on every frame.
HEALTH_STALE_THRESHOLD: Final = 5e-9

# ============================================================================
# Supervision timings
# ============================================================================

PING_INTERVAL: Final = 5.0
SUPERVISOR_RETRY_DELAY: Final = 5.0

# ============================================================================
# Control plane timeouts
# ============================================================================

DOCKER_CLIENT_TIMEOUT: Final = 60

__all__ = [
    "DOCKER_CLIENT_TIMEOUT",
    "HEALTH_STALE_THRESHOLD",
    "PING_INTERVAL",
    "STATS_DECODE_RETRY_DELAY",
    "STATS_WATCHDOG_TIMEOUT",
    "SUPERVISOR_RETRY_DELAY",
]
