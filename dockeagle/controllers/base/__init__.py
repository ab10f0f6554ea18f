"""Base classes shared by all controllers."""

from dockeagle.controllers.base.control_plane import (
    ControlPlane,
    ControlPlaneEvent,
    StatsStream,
)
from dockeagle.controllers.base.errors import (
    ControlPlaneError,
    ControlPlaneUnavailableError,
    StatsDecodeError,
    StatsStreamClosed,
    WorkloadNotFoundError,
)

__all__ = [
    "ControlPlane",
    "ControlPlaneError",
    "ControlPlaneEvent",
    "ControlPlaneUnavailableError",
    "StatsDecodeError",
    "StatsStream",
    "StatsStreamClosed",
    "WorkloadNotFoundError",
]
