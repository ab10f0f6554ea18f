"""Formatting utilities for resource values.

Provides functions to render byte counts and percentages for log output:
- Bytes: binary units (KiB, MiB, GiB, TiB)
- Percentages: fixed precision, "-" for missing values
"""

import math

# Module-level constants to avoid re-creating on every function call.
# Unit suffixes for format_bytes(), each 1024 times the previous.
_BYTE_UNITS: tuple[str, ...] = ("B", "KiB", "MiB", "GiB", "TiB")


def format_bytes(value: float) -> str:
    """Render a byte count with a binary unit suffix.

    Examples:
    - 512 -> "512 B"
    - 1536 -> "1.5 KiB"
    - 1073741824 -> "1.0 GiB"

    Args:
        value: Number of bytes

    Returns:
        Human readable string. Negative or non-finite values render as "-".
    """
    if not math.isfinite(value) or value < 0:
        return "-"

    size = float(value)
    for unit in _BYTE_UNITS:
        if size < 1024 or unit == _BYTE_UNITS[-1]:
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.1f} {unit}"
        size /= 1024
    return "-"


def format_percent(value: float, precision: int = 1) -> str:
    """Render a percentage, "-" when the value is NaN or infinite."""
    if not math.isfinite(value):
        return "-"
    return f"{value:.{precision}f}%"
