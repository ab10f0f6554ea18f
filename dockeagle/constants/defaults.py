"""Default values for settings.

All default values used in the AppSettings model.
"""

from typing import Final

# ============================================================================
# Runner defaults
# ============================================================================

SUMMARY_INTERVAL_DEFAULT: Final = 10.0
SUMMARY_WINDOW_SECONDS_DEFAULT: Final = 60.0
LOG_LEVEL_DEFAULT: Final = "INFO"

__all__ = [
    "LOG_LEVEL_DEFAULT",
    "SUMMARY_INTERVAL_DEFAULT",
    "SUMMARY_WINDOW_SECONDS_DEFAULT",
]
