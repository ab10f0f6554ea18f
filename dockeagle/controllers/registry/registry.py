"""Workload registry - owns every tracked workload and its stats task.

Structural changes (add/remove) are guarded by one coarse lock; each
workload's fields are guarded by its own record lock, so ingesting metrics
for one workload never blocks another. The registry lock is never held
while a record lock is being acquired.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass

from dockeagle.constants.enums import RegistryEvent, WorkloadState
from dockeagle.constants.limits import TASK_NAME_ID_LENGTH
from dockeagle.constants.values import EVENT_ACTION_STOP
from dockeagle.controllers.base import ControlPlane, ControlPlaneError
from dockeagle.controllers.docker.fetchers.stats_reader import StatsStreamReader
from dockeagle.controllers.docker.parsers import apply_identity, parse_inspect
from dockeagle.models.core import RegistrySummary, WorkloadData, WorkloadRecord
from dockeagle.models.state.app_settings import AppSettings
from dockeagle.utils.event_bus import EventBus

logger = logging.getLogger(__name__)


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


@dataclass
class _TrackedWorkload:
    """A record paired with the task that feeds it."""

    record: WorkloadRecord
    task: asyncio.Task[None]


class WorkloadRegistry:
    """Maps workload IDs to records and drives their lifecycle.

    Add requests from events and from the initial enumeration go through a
    single-consumer queue (see ``run``), so the same ID can never get two
    stats tasks.
    """

    def __init__(
        self,
        control_plane: ControlPlane,
        *,
        bus: EventBus | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._control_plane = control_plane
        self._bus = bus or EventBus()
        self._settings = settings or AppSettings()
        self._lock = threading.Lock()
        self._workloads: dict[str, _TrackedWorkload] = {}
        self._pending: asyncio.Queue[str] = asyncio.Queue()
        self._bus.subscribe(RegistryEvent.STOPPED, self._deregister)

    @property
    def bus(self) -> EventBus:
        return self._bus

    def __contains__(self, workload_id: object) -> bool:
        with self._lock:
            return workload_id in self._workloads

    def __len__(self) -> int:
        with self._lock:
            return len(self._workloads)

    def _lookup(self, workload_id: str) -> _TrackedWorkload | None:
        with self._lock:
            return self._workloads.get(workload_id)

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._workloads)

    # =========================================================================
    # Registration
    # =========================================================================

    def request_add(self, workload_id: str) -> None:
        """Queue a workload for registration; duplicates are dropped on consumption."""
        self._pending.put_nowait(workload_id)

    async def run(self) -> None:
        """Consume add requests until cancelled, then drop all state."""
        try:
            while True:
                workload_id = await self._pending.get()
                await self.register(workload_id)
        finally:
            self.clear()

    async def register(self, workload_id: str) -> bool:
        """Start tracking a workload.

        Returns:
            True if a new record was created, False if the ID is already tracked.
        """
        if workload_id in self:
            logger.debug("Workload %s is already tracked", workload_id)
            return False

        record = WorkloadRecord(workload_id, history_capacity=self._settings.history_capacity)
        try:
            raw = await self._control_plane.inspect(workload_id)
        except ControlPlaneError as e:
            logger.warning("Failed to inspect workload %s: %s", workload_id, e)
            async with record.hold() as data:
                data.set_alternative_name()
        else:
            info = parse_inspect(raw)
            async with record.hold() as data:
                data.state = WorkloadState.RUNNING
                apply_identity(data, info)

        reader = StatsStreamReader(
            self._control_plane,
            record,
            self._bus,
            decode_retry_delay=self._settings.decode_retry_delay,
            watchdog_timeout=self._settings.watchdog_timeout,
            health_stale_seconds=self._settings.health_stale_seconds,
        )
        with self._lock:
            if workload_id in self._workloads:
                return False
            task = asyncio.create_task(
                reader.run(), name=f"stats-{workload_id[:TASK_NAME_ID_LENGTH]}"
            )
            self._workloads[workload_id] = _TrackedWorkload(record, task)
        task.add_done_callback(self._on_reader_done)

        async with record.hold() as data:
            label = data.alternative_name
        logger.info("Following workload: %s (%s)", label, workload_id)
        return True

    @staticmethod
    def _on_reader_done(task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Stats task %s failed", task.get_name(), exc_info=error)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def handle_stop_event(self, workload_id: str, action: str = EVENT_ACTION_STOP) -> bool:
        """Mark a workload stopped after a stop/destroy event.

        A plain stop event during a restart belongs to the restart and keeps
        the record.

        Returns:
            True if the workload transitioned to STOPPED.
        """
        tracked = self._lookup(workload_id)
        if tracked is None:
            return False

        async with tracked.record.hold() as data:
            if data.state == WorkloadState.STOPPED:
                return False
            if data.state == WorkloadState.RESTARTING and action == EVENT_ACTION_STOP:
                logger.debug("Ignoring %s event of restarting workload %s", action, workload_id)
                return False
            data.state = WorkloadState.STOPPED
            label = data.alternative_name

        logger.info("Workload stopped: %s (%s)", label, workload_id)
        self._bus.publish(RegistryEvent.STOPPED, workload_id)
        self._bus.publish(RegistryEvent.UPDATED, workload_id)
        return True

    def _deregister(self, workload_id: str) -> None:
        """Remove a stopped workload and tear down its stats task."""
        with self._lock:
            tracked = self._workloads.pop(workload_id, None)
        if tracked is None:
            return
        # A reader that detected the stop itself exits on its own.
        if tracked.task is not _current_task():
            tracked.task.cancel()
        logger.debug("Deregistered workload %s", workload_id)

    def clear(self) -> None:
        """Cancel every stats task and forget every workload."""
        with self._lock:
            tracked = list(self._workloads.values())
            self._workloads.clear()
        while not self._pending.empty():
            self._pending.get_nowait()
        for entry in tracked:
            if entry.task is not _current_task():
                entry.task.cancel()
        if tracked:
            logger.info("Cleared %d tracked workloads", len(tracked))

    # =========================================================================
    # Commands
    # =========================================================================

    async def stop(self, workload_id: str) -> None:
        """Stop a running workload; unknown IDs are ignored."""
        tracked = self._lookup(workload_id)
        if tracked is None:
            return

        record = tracked.record
        async with record.hold() as data:
            if data.state != WorkloadState.RUNNING:
                return
            data.state = WorkloadState.STOPPING
            label = data.alternative_name

        logger.info("Stopping workload %s (%s)...", label, workload_id)
        try:
            await self._control_plane.stop(workload_id)
        except ControlPlaneError as e:
            logger.warning("Failed to stop workload %s (%s): %s", label, workload_id, e)
            async with record.hold() as data:
                if data.state == WorkloadState.STOPPING:
                    data.state = WorkloadState.RUNNING

    async def restart(self, workload_id: str) -> None:
        """Restart a running workload; unknown IDs are ignored."""
        tracked = self._lookup(workload_id)
        if tracked is None:
            return

        record = tracked.record
        async with record.hold() as data:
            if data.state != WorkloadState.RUNNING:
                return
            data.state = WorkloadState.RESTARTING
            label = data.alternative_name

        logger.info("Restarting workload %s (%s)...", label, workload_id)
        try:
            await self._control_plane.restart(workload_id)
        except ControlPlaneError as e:
            logger.warning("Failed to restart workload %s (%s): %s", label, workload_id, e)
        finally:
            async with record.hold() as data:
                if data.state == WorkloadState.RESTARTING:
                    data.state = WorkloadState.RUNNING

    # =========================================================================
    # Read access
    # =========================================================================
    # These block on record locks; coroutines call them through
    # asyncio.to_thread.

    def get(self, workload_id: str) -> WorkloadData | None:
        tracked = self._lookup(workload_id)
        if tracked is None:
            return None
        return tracked.record.snapshot()

    def snapshot(self) -> list[WorkloadData]:
        """Return deep copies of every tracked workload."""
        with self._lock:
            records = [entry.record for entry in self._workloads.values()]
        return [record.snapshot() for record in records]

    def summary(self) -> RegistrySummary:
        """Aggregate CPU and memory over running workloads."""
        with self._lock:
            records = [entry.record for entry in self._workloads.values()]
        summary = RegistrySummary(workload_count=len(records))
        for record in records:
            with record.lock:
                data = record.data
                if data.state != WorkloadState.RUNNING:
                    continue
                summary.running_count += 1
                summary.cpu_percent += data.cpu_percent
                summary.memory += data.memory
        return summary
