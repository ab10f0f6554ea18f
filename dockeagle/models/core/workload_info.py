"""Tracked workload models."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pydantic import BaseModel, ConfigDict, Field

from dockeagle.constants.enums import HealthState, MetricName, WorkloadState
from dockeagle.constants.limits import SHORT_ID_LENGTH
from dockeagle.models.history import History


def derive_alternative_name(
    workload_id: str,
    *,
    name: str = "",
    compose_service: str = "",
    compose_container_number: int = 0,
) -> str:
    """Build a human-readable display name for a workload.

    Priority: ``<service>-<number>`` when both are present and the number
    is positive, then the compose service alone, then the raw name, then
    the first characters of the ID.
    """
    if compose_service and compose_container_number > 0:
        return f"{compose_service}-{compose_container_number}"
    if compose_service:
        return compose_service
    name = name.lstrip("/")
    if name:
        return name
    return workload_id[:SHORT_ID_LENGTH]


async def _acquire_off_loop(lock: threading.Lock) -> None:
    loop = asyncio.get_running_loop()
    acquiring = loop.run_in_executor(None, lock.acquire)
    try:
        await asyncio.shield(acquiring)
    except asyncio.CancelledError:
        # The worker still gets the lock; give it back once it does.
        acquiring.add_done_callback(lambda done: done.cancelled() or lock.release())
        raise


class WorkloadData(BaseModel):
    """State and metrics of one tracked workload.

    The registry hands out deep copies of this model; mutating a copy never
    affects the tracked workload.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    state: WorkloadState = WorkloadState.UNKNOWN
    created: float = 0.0
    name: str = ""
    alternative_name: str = ""
    image: str = ""
    compose_project: str = ""
    compose_project_dir: str = ""
    compose_service: str = ""
    compose_container_number: int = 0
    env_vars: dict[str, str] = Field(default_factory=dict)

    last_updated: float = 0.0
    cpu_percent: float = 0.0
    cpu_throttled_percent: float = 0.0
    memory: int = 0
    memory_limit: int = 0
    memory_percent: float = 0.0
    network_rx: int = 0
    network_tx: int = 0
    block_read: int = 0
    block_write: int = 0
    pids: int = 0
    health_updated: float = 0.0
    health_status: HealthState = HealthState.UNKNOWN

    cpu_percent_history: History = Field(default_factory=History)
    cpu_throttled_percent_history: History = Field(default_factory=History)
    memory_history: History = Field(default_factory=History)
    memory_percent_history: History = Field(default_factory=History)
    network_rx_history: History = Field(default_factory=History)
    network_tx_history: History = Field(default_factory=History)

    def history(self, metric: MetricName) -> History:
        """Return the history tracked for ``metric``."""
        return getattr(self, f"{metric.value}_history")

    def set_alternative_name(self) -> None:
        self.alternative_name = derive_alternative_name(
            self.id,
            name=self.name,
            compose_service=self.compose_service,
            compose_container_number=self.compose_container_number,
        )


class WorkloadRecord:
    """Registry-owned holder pairing workload data with its own lock.

    Every read or write of ``data`` must happen while holding ``lock``.
    Coroutines use ``hold()``; plain threads use ``lock`` directly.
    """

    __slots__ = ("data", "lock")

    def __init__(self, workload_id: str, history_capacity: int | None = None) -> None:
        self.lock = threading.Lock()
        self.data = WorkloadData(id=workload_id)
        if history_capacity is not None:
            for metric in MetricName:
                setattr(self.data, f"{metric.value}_history", History(history_capacity))

    @property
    def id(self) -> str:
        return self.data.id

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[WorkloadData]:
        """Hold the lock from a coroutine without blocking the event loop.

        An uncontended lock is taken in place; otherwise the wait happens
        in a worker thread.
        """
        if not self.lock.acquire(blocking=False):
            await _acquire_off_loop(self.lock)
        try:
            yield self.data
        finally:
            self.lock.release()

    def snapshot(self) -> WorkloadData:
        """Return a deep copy of the current data."""
        with self.lock:
            return self.data.model_copy(deep=True)

    async def snapshot_async(self) -> WorkloadData:
        async with self.hold() as data:
            return data.model_copy(deep=True)


class RegistrySummary(BaseModel):
    """Aggregated usage over all running workloads."""

    workload_count: int = 0
    running_count: int = 0
    cpu_percent: float = 0.0
    memory: int = 0
