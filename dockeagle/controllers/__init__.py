"""Controllers module for dockeagle.

This module provides the control plane abstraction, the Docker adapter,
the workload registry and the supervisor that keeps them running.
"""

from __future__ import annotations

# Base classes
from dockeagle.controllers.base import (
    ControlPlane,
    ControlPlaneError,
    ControlPlaneEvent,
    ControlPlaneUnavailableError,
    StatsStream,
)

# Docker domain
from dockeagle.controllers.docker import (
    DockerControlPlane,
    EventWatcher,
    StatsStreamReader,
)

# Registry and supervision
from dockeagle.controllers.registry import WorkloadRegistry
from dockeagle.controllers.supervisor import SupervisorLoop, SupervisorResult

__all__ = [
    # Base
    "ControlPlane",
    "ControlPlaneError",
    "ControlPlaneEvent",
    "ControlPlaneUnavailableError",
    "StatsStream",
    # Docker
    "DockerControlPlane",
    "EventWatcher",
    "StatsStreamReader",
    # Registry and supervision
    "SupervisorLoop",
    "SupervisorResult",
    "WorkloadRegistry",
]
