"""Timestamp parsing for control plane payloads."""

from __future__ import annotations

import re
from contextlib import suppress
from datetime import datetime, timezone
from typing import Any

# Docker reports nanoseconds; datetime keeps at most microseconds.
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


def parse_datetime(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Go's zero time (year 1), used by the daemon for "never", maps to None.
    """
    if not isinstance(value, str) or not value:
        return None
    normalized = _FRACTION_PATTERN.sub(r"\1", value.strip()).replace("Z", "+00:00")
    with suppress(ValueError, TypeError):
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        if parsed.year <= 1:
            return None
        return parsed
    return None


def parse_timestamp(value: Any) -> float:
    """Parse an RFC 3339 timestamp into unix seconds, 0.0 when absent."""
    parsed = parse_datetime(value)
    if parsed is None:
        return 0.0
    return parsed.timestamp()


__all__ = ["parse_datetime", "parse_timestamp"]
