"""Limit constants for dockeagle."""

from typing import Final

# ============================================================================
# History limits
# ============================================================================

MAX_HISTORY_SAMPLES: Final = 512

# ============================================================================
# Naming limits
# ============================================================================

SHORT_ID_LENGTH: Final = 8
TASK_NAME_ID_LENGTH: Final = 12

__all__ = [
    "MAX_HISTORY_SAMPLES",
    "SHORT_ID_LENGTH",
    "TASK_NAME_ID_LENGTH",
]
