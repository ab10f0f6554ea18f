"""All enum definitions for dockeagle.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Lifecycle Enums
# =============================================================================

class WorkloadState(Enum):
    """Lifecycle state of a tracked workload.

    STOPPED is terminal: a workload that shows up again under the same ID
    gets a brand-new record.
    """

    UNKNOWN = "unknown"
    RUNNING = "running"
    RESTARTING = "restarting"
    STOPPING = "stopping"
    STOPPED = "stopped"


class HealthState(Enum):
    """Health check status reported by the control plane."""

    UNKNOWN = "unknown"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


# =============================================================================
# Metric Enums
# =============================================================================

class MetricName(Enum):
    """Metrics that keep a bounded history per workload."""

    CPU_PERCENT = "cpu_percent"
    CPU_THROTTLED_PERCENT = "cpu_throttled_percent"
    MEMORY = "memory"
    MEMORY_PERCENT = "memory_percent"
    NETWORK_RX = "network_rx"
    NETWORK_TX = "network_tx"


# =============================================================================
# Notification Enums
# =============================================================================

class RegistryEvent(Enum):
    """Notifications published on the registry event bus."""

    UPDATED = "updated"
    STOPPED = "stopped"


__all__ = [
    # Lifecycle
    "HealthState",
    "WorkloadState",
    # Metrics
    "MetricName",
    # Notifications
    "RegistryEvent",
]
