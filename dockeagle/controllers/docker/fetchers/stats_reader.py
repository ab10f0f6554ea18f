"""Stats stream reader - follows one workload's stats stream.

One reader runs per tracked workload. It decodes frames from the stream,
turns them into normalized metrics and writes them into the workload
record under the record's own lock.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable
from typing import Any

from dockeagle.constants.enums import RegistryEvent, WorkloadState
from dockeagle.constants.timeouts import (
    HEALTH_STALE_THRESHOLD,
    STATS_DECODE_RETRY_DELAY,
    STATS_WATCHDOG_TIMEOUT,
)
from dockeagle.controllers.base import (
    ControlPlane,
    ControlPlaneError,
    StatsDecodeError,
    StatsStream,
    StatsStreamClosed,
)
from dockeagle.controllers.docker.parsers import (
    apply_identity,
    parse_inspect,
    parse_stats_frame,
)
from dockeagle.models.core import WorkloadRecord
from dockeagle.models.history import Sample
from dockeagle.utils.event_bus import EventBus

logger = logging.getLogger(__name__)

_LIVENESS_CHECK_STATES = (WorkloadState.RUNNING, WorkloadState.STOPPING)


class FrameDecoder:
    """Incremental decoder for newline-delimited JSON stats frames.

    Bytes that have been received but not yet decoded stay buffered, so a
    new decoder can pick up exactly where a failed one stopped.
    """

    def __init__(self, buffered: bytes = b"") -> None:
        self._buffer = bytearray(buffered)
        self._ended = False

    def buffered(self) -> bytes:
        return bytes(self._buffer)

    def feed(self, chunk: bytes) -> None:
        self._buffer.extend(chunk)

    def end(self) -> None:
        """Mark the underlying stream as exhausted."""
        self._ended = True

    def next_frame(self) -> dict[str, Any] | None:
        """Decode the next complete frame.

        Returns:
            The decoded frame, or None if more bytes are needed.

        Raises:
            StatsDecodeError: the next frame is malformed; it is dropped.
            StatsStreamClosed: the stream ended and nothing is left.
        """
        while True:
            newline = self._buffer.find(b"\n")
            if newline >= 0:
                line = bytes(self._buffer[:newline])
                del self._buffer[: newline + 1]
            elif self._ended:
                line = bytes(self._buffer)
                self._buffer.clear()
                if not line.strip():
                    raise StatsStreamClosed("end of stats stream")
            else:
                return None
            if line.strip():
                return self._decode(line)

    @staticmethod
    def _decode(line: bytes) -> dict[str, Any]:
        try:
            frame = json.loads(line)
        except ValueError as e:
            raise StatsDecodeError(f"malformed stats frame: {e}", line) from e
        if not isinstance(frame, dict):
            raise StatsDecodeError("stats frame is not an object", line)
        return frame


class StatsStreamReader:
    """Follows the stats stream of one workload until cancelled or ended."""

    def __init__(
        self,
        control_plane: ControlPlane,
        record: WorkloadRecord,
        bus: EventBus,
        *,
        decode_retry_delay: float = STATS_DECODE_RETRY_DELAY,
        watchdog_timeout: float = STATS_WATCHDOG_TIMEOUT,
        health_stale_seconds: float = HEALTH_STALE_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._control_plane = control_plane
        self._record = record
        self._bus = bus
        self._decode_retry_delay = decode_retry_delay
        self._watchdog_timeout = watchdog_timeout
        self._health_stale_seconds = health_stale_seconds
        self._clock = clock
        self._activity = asyncio.Event()
        self._observed = False
        self._name = record.id
        self.decode_errors = 0
        self.watchdog_timeouts = 0

    @property
    def workload_id(self) -> str:
        return self._record.id

    def _report_activity(self) -> None:
        self._activity.set()

    async def run(self) -> None:
        """Open the stream and follow it until it ends or the task is cancelled."""
        async with self._record.hold() as data:
            self._name = data.alternative_name or data.id
        try:
            stream = await self._control_plane.open_stats(self.workload_id)
        except ControlPlaneError as e:
            logger.warning(
                "Failed to open stats stream of workload %s (%s): %s",
                self._name,
                self.workload_id,
                e,
            )
            return

        watchdog = asyncio.create_task(
            self._watch(), name=f"stats-watchdog-{self.workload_id[:12]}"
        )
        try:
            await self._follow(stream)
        finally:
            watchdog.cancel()
            stream.close()
            logger.info(
                "Done following stats of workload %s (%s)", self._name, self.workload_id
            )

    async def _follow(self, stream: StatsStream) -> None:
        os_type = stream.os_type
        decoder = FrameDecoder()
        while True:
            try:
                frame = await self._next_frame(stream, decoder)
            except StatsStreamClosed:
                self._report_activity()
                return
            except StatsDecodeError as e:
                self.decode_errors += 1
                self._report_activity()
                logger.warning(
                    "Error while following stats of workload %s (%s): %s",
                    self._name,
                    self.workload_id,
                    e,
                )
                decoder = FrameDecoder(decoder.buffered())
                await asyncio.sleep(self._decode_retry_delay)
                continue

            stopped = await self.apply_frame(frame, os_type)
            self._report_activity()
            if stopped:
                return

    @staticmethod
    async def _next_frame(stream: StatsStream, decoder: FrameDecoder) -> dict[str, Any]:
        while True:
            frame = decoder.next_frame()
            if frame is not None:
                return frame
            chunk = await stream.read_chunk()
            if chunk:
                decoder.feed(chunk)
            else:
                decoder.end()

    async def _watch(self) -> None:
        """Log a notice whenever neither a frame nor an error shows up in time."""
        while True:
            try:
                await asyncio.wait_for(self._activity.wait(), timeout=self._watchdog_timeout)
            except asyncio.TimeoutError:
                self.watchdog_timeouts += 1
                logger.info(
                    "Timeout while following stats of workload %s (%s)",
                    self._name,
                    self.workload_id,
                )
            else:
                self._activity.clear()

    async def apply_frame(self, frame: dict[str, Any], os_type: str) -> bool:
        """Write one decoded frame into the record.

        Returns:
            True if the workload was detected as stopped.
        """
        update = parse_stats_frame(frame, os_type)
        first_seen = not self._observed
        self._observed = True

        async with self._record.hold() as data:
            health_stale = self._clock() - data.health_updated > self._health_stale_seconds
            if first_seen:
                rx_delta, tx_delta = 0, 0
            else:
                rx_delta = max(0, update.network_rx - data.network_rx)
                tx_delta = max(0, update.network_tx - data.network_tx)

            ts = update.timestamp
            data.last_updated = ts
            data.cpu_percent = update.cpu_percent
            data.cpu_percent_history.add(Sample(ts, update.cpu_percent))
            data.cpu_throttled_percent = update.cpu_throttled_percent
            data.cpu_throttled_percent_history.add(Sample(ts, update.cpu_throttled_percent))
            data.memory = update.memory
            data.memory_limit = update.memory_limit
            data.memory_history.add(Sample(ts, float(update.memory)))
            data.memory_percent = update.memory_percent
            data.memory_percent_history.add(Sample(ts, update.memory_percent))
            data.network_rx = update.network_rx
            data.network_tx = update.network_tx
            data.network_rx_history.add(Sample(ts, float(rx_delta)))
            data.network_tx_history.add(Sample(ts, float(tx_delta)))
            data.block_read = update.block_read
            data.block_write = update.block_write
            data.pids = update.pids
            self._name = data.alternative_name or data.id

        if first_seen or health_stale:
            await self._refresh_metadata(first_seen)

        async with self._record.hold() as data:
            needs_liveness_check = data.state in _LIVENESS_CHECK_STATES and data.pids == 0

        stopped = needs_liveness_check and await self._confirm_stopped()
        if stopped:
            self._bus.publish(RegistryEvent.STOPPED, self.workload_id)
        self._bus.publish(RegistryEvent.UPDATED, self.workload_id)
        return stopped

    async def _refresh_metadata(self, first_seen: bool) -> None:
        """Re-read health, and on first sight the environment, via inspect.

        A workload whose registration inspect failed is completed here and
        becomes RUNNING.
        """
        try:
            raw = await self._control_plane.inspect(self.workload_id)
        except ControlPlaneError as e:
            logger.warning(
                "Failed to inspect workload %s (%s): %s", self._name, self.workload_id, e
            )
            return

        info = parse_inspect(raw)
        async with self._record.hold() as data:
            if first_seen:
                data.env_vars = dict(info.env_vars)
            data.health_updated = data.last_updated
            data.health_status = info.health_status
            promoted = data.state == WorkloadState.UNKNOWN
            if promoted:
                apply_identity(data, info)
                data.state = WorkloadState.RUNNING
            self._name = data.alternative_name or data.id

        if promoted:
            logger.info("Workload %s (%s) is running", self._name, self.workload_id)

    async def _confirm_stopped(self) -> bool:
        """Double check a workload reporting no processes against a fresh listing."""
        try:
            running_ids = await self._control_plane.list_workload_ids()
        except ControlPlaneError as e:
            logger.warning("Failed to list running workloads: %s", e)
            return False
        if self.workload_id in running_ids:
            return False

        async with self._record.hold() as data:
            if data.state not in _LIVENESS_CHECK_STATES:
                return False
            data.state = WorkloadState.STOPPED
        logger.info("Workload %s (%s) is no longer running", self._name, self.workload_id)
        return True
