"""Supervisor loop - keeps the stats pipeline alive across daemon outages.

One cycle wires the event watcher, the registry consumer and a periodic
ping together. When any of them ends, the cycle is over: all state is
dropped and a new cycle starts after a fixed delay. Cancellation skips the
delay and propagates immediately.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from dockeagle.controllers.base import ControlPlane, ControlPlaneError
from dockeagle.controllers.docker.fetchers import EventWatcher
from dockeagle.controllers.registry import WorkloadRegistry
from dockeagle.models.core import WorkloadData
from dockeagle.models.state.app_settings import AppSettings
from dockeagle.utils.event_bus import EventBus

logger = logging.getLogger(__name__)

ControlPlaneFactory = Callable[[], ControlPlane]


@dataclass
class SupervisorResult:
    """Result of connecting or running the supervisor."""

    success: bool
    error: str | None = None
    cycles: int = 0
    duration_ms: float = 0.0


class SupervisorLoop:
    """Top-level cancellable unit owning the registry and the control plane."""

    def __init__(
        self,
        factory: ControlPlaneFactory,
        *,
        settings: AppSettings | None = None,
        bus: EventBus | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            factory: Blocking callable creating the control plane client.
                It must raise ControlPlaneError when no client can be built.
            settings: Timing settings; defaults apply when omitted.
            bus: Event bus shared with consumers of update notifications.
        """
        self._factory = factory
        self._settings = settings or AppSettings()
        self._bus = bus or EventBus()
        self._control_plane: ControlPlane | None = None
        self._registry: WorkloadRegistry | None = None
        self.cycles = 0

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def registry(self) -> WorkloadRegistry | None:
        return self._registry

    def snapshot(self) -> list[WorkloadData]:
        if self._registry is None:
            return []
        return self._registry.snapshot()

    async def connect(self) -> SupervisorResult:
        """Establish the control plane client once.

        A failure here means the environment is broken; it is returned as a
        fatal result instead of being retried.
        """
        if self._control_plane is not None:
            return SupervisorResult(success=True, cycles=self.cycles)

        start = time.monotonic()
        try:
            control_plane = await asyncio.to_thread(self._factory)
        except ControlPlaneError as e:
            logger.error("Failed to connect to the control plane: %s", e)
            return SupervisorResult(
                success=False,
                error=str(e),
                duration_ms=(time.monotonic() - start) * 1000,
            )

        self._control_plane = control_plane
        self._registry = WorkloadRegistry(control_plane, bus=self._bus, settings=self._settings)
        return SupervisorResult(success=True, duration_ms=(time.monotonic() - start) * 1000)

    async def run(self) -> SupervisorResult:
        """Run cycles until cancelled.

        Returns only when the initial connection fails.
        """
        result = await self.connect()
        if not result.success:
            return result

        control_plane = self._control_plane
        registry = self._registry
        if control_plane is None or registry is None:
            raise RuntimeError("SupervisorLoop.connect() did not set up the control plane")
        try:
            while True:
                self.cycles += 1
                logger.info("Following docker stats (cycle %d)...", self.cycles)
                await self.run_once()
                registry.clear()
                logger.info(
                    "Retrying to follow docker stats in %.1fs...", self._settings.retry_delay
                )
                await asyncio.sleep(self._settings.retry_delay)
        finally:
            registry.clear()
            await control_plane.close()

    async def run_once(self) -> None:
        """Run one cycle; returns when the cycle is done."""
        control_plane = self._control_plane
        registry = self._registry
        if control_plane is None or registry is None:
            raise RuntimeError("SupervisorLoop.connect() must succeed before run_once()")

        watcher = EventWatcher(control_plane, registry)
        events = asyncio.create_task(watcher.run(), name="event-watcher")
        consumer = asyncio.create_task(registry.run(), name="registry-consumer")
        ping = asyncio.create_task(self._ping_loop(control_plane), name="control-plane-ping")
        tasks = (events, consumer, ping)
        try:
            try:
                running_ids = await control_plane.list_workload_ids()
            except ControlPlaneError as e:
                logger.warning("Failed to get running workloads: %s", e)
                return
            for workload_id in running_ids:
                logger.info("Workload is running: %s", workload_id)
                registry.request_add(workload_id)

            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    logger.warning(
                        "%s ended with an error", task.get_name(), exc_info=task.exception()
                    )
                else:
                    logger.info("%s ended", task.get_name())
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _ping_loop(self, control_plane: ControlPlane) -> None:
        """Return as soon as the control plane stops answering."""
        while True:
            await asyncio.sleep(self._settings.ping_interval)
            try:
                alive = await control_plane.ping()
            except ControlPlaneError as e:
                logger.warning("Ping docker server failed: %s", e)
                return
            if not alive:
                logger.warning("Ping docker server failed")
                return
            logger.debug("Ping docker server ok")
