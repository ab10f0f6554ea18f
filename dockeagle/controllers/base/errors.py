"""Exception hierarchy for control plane access.

Adapters translate SDK-specific failures into these types so the core never
depends on a client library's exceptions.
"""

from __future__ import annotations


class ControlPlaneError(Exception):
    """Base exception for control plane failures."""


class ControlPlaneUnavailableError(ControlPlaneError):
    """Raised when the control plane cannot be reached at all."""


class WorkloadNotFoundError(ControlPlaneError):
    """Raised when the control plane does not know a workload ID."""


class StatsDecodeError(ControlPlaneError):
    """Raised for a malformed stats frame; the stream itself is still usable."""

    def __init__(self, message: str, payload: bytes = b"") -> None:
        super().__init__(message)
        self.payload = payload


class StatsStreamClosed(ControlPlaneError):
    """Raised once a stats stream has delivered its last frame."""


__all__ = [
    "ControlPlaneError",
    "ControlPlaneUnavailableError",
    "StatsDecodeError",
    "StatsStreamClosed",
    "WorkloadNotFoundError",
]
