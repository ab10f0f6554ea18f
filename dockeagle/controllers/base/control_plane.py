"""Control plane contract used by the stats pipeline.

The pipeline only talks to the container runtime through these classes,
so tests can drive it with an in-memory implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ControlPlaneEvent:
    """One lifecycle notification from the control plane event feed."""

    type: str
    action: str
    actor_id: str
    time: float = 0.0
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> ControlPlaneEvent:
        """Build an event from a decoded Docker events payload."""
        actor = raw.get("Actor") or {}
        return cls(
            type=str(raw.get("Type") or ""),
            action=str(raw.get("Action") or raw.get("status") or ""),
            actor_id=str(actor.get("ID") or raw.get("id") or ""),
            time=float(raw.get("time") or 0),
            attributes=dict(actor.get("Attributes") or {}),
        )


class StatsStream(ABC):
    """A long-lived stream of raw stats bytes for one workload."""

    @property
    @abstractmethod
    def os_type(self) -> str:
        """OS family reported by the daemon when the stream was opened."""
        ...

    @abstractmethod
    async def read_chunk(self) -> bytes:
        """Read the next chunk of raw bytes.

        Returns:
            The bytes received, or ``b""`` once the stream has ended.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection."""
        ...


class ControlPlane(ABC):
    """Async access to the container control plane."""

    @abstractmethod
    async def ping(self) -> bool:
        """Check if the control plane is reachable.

        Returns:
            True if the daemon answered, False otherwise
        """
        ...

    @abstractmethod
    async def list_workload_ids(self) -> list[str]:
        """Return the IDs of all currently running workloads."""
        ...

    @abstractmethod
    async def inspect(self, workload_id: str) -> dict[str, Any]:
        """Return the raw inspect payload (labels, env, health, start time)."""
        ...

    @abstractmethod
    async def open_stats(self, workload_id: str) -> StatsStream:
        """Open a continuous stats stream for one workload."""
        ...

    @abstractmethod
    def events(self) -> AsyncIterator[ControlPlaneEvent]:
        """Subscribe to the lifecycle event feed.

        The iterator ends when the feed is closed by the daemon.
        """
        ...

    @abstractmethod
    async def stop(self, workload_id: str) -> None:
        """Stop a workload."""
        ...

    @abstractmethod
    async def restart(self, workload_id: str) -> None:
        """Restart a workload."""
        ...

    async def close(self) -> None:
        """Release client resources. Default implementation does nothing."""
        return None
