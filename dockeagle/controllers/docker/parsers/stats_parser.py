"""Metric calculations for Docker stats frames.

Every function here is pure: a frame carries both the current counters and
the previous reading (``precpu_stats``), so one frame is enough to derive
the delta metrics.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from dockeagle.constants.values import OS_TYPE_WINDOWS
from dockeagle.utils.timestamps import parse_datetime, parse_timestamp

_ONE_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class StatsUpdate:
    """Normalized metrics derived from one stats frame."""

    timestamp: float
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


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _section(payload: dict[str, Any] | None, key: str) -> dict[str, Any]:
    value = (payload or {}).get(key)
    return value if isinstance(value, dict) else {}


def cpu_percent_unix(cpu_stats: dict[str, Any], precpu_stats: dict[str, Any]) -> float:
    """CPU usage relative to one core, cgroup counters.

    Zero unless both the container and the system delta are positive.
    """
    cpu_usage = _section(cpu_stats, "cpu_usage")
    cpu_delta = float(_as_int(cpu_usage.get("total_usage"))) - float(
        _as_int(_section(precpu_stats, "cpu_usage").get("total_usage"))
    )
    system_delta = float(_as_int(cpu_stats.get("system_cpu_usage"))) - float(
        _as_int(precpu_stats.get("system_cpu_usage"))
    )
    if system_delta <= 0.0 or cpu_delta <= 0.0:
        return 0.0
    num_cpus = max(len(cpu_usage.get("percpu_usage") or ()), _as_int(cpu_stats.get("online_cpus")))
    return (cpu_delta / system_delta) * num_cpus * 100.0


def cpu_percent_windows(
    cpu_stats: dict[str, Any],
    precpu_stats: dict[str, Any],
    read: Any,
    preread: Any,
    num_procs: int,
) -> float:
    """CPU usage from 100ns intervals used over intervals possible."""
    read_at = parse_datetime(read)
    preread_at = parse_datetime(preread)
    if read_at is None or preread_at is None:
        return 0.0
    elapsed_ns = (read_at - preread_at) // _ONE_MICROSECOND * 1000
    possible_intervals = elapsed_ns // 100 * num_procs
    if possible_intervals <= 0:
        return 0.0
    intervals_used = _as_int(_section(cpu_stats, "cpu_usage").get("total_usage")) - _as_int(
        _section(precpu_stats, "cpu_usage").get("total_usage")
    )
    return intervals_used / possible_intervals * 100.0


def cpu_throttled_percent(cpu_stats: dict[str, Any], precpu_stats: dict[str, Any]) -> float:
    """Share of CFS periods in which the container was throttled, in [0, 100]."""
    current = _section(cpu_stats, "throttling_data")
    previous = _section(precpu_stats, "throttling_data")
    throttled_delta = _as_int(current.get("throttled_periods")) - _as_int(
        previous.get("throttled_periods")
    )
    periods_delta = _as_int(current.get("periods")) - _as_int(previous.get("periods"))
    if throttled_delta <= 0 or periods_delta <= 0:
        return 0.0
    return min(100.0, max(0.0, throttled_delta / periods_delta * 100.0))


def memory_percent(usage: int, limit: int) -> float:
    # The limit stays 0 until the cgroup has reported at least once.
    if limit == 0:
        return 0.0
    return usage / limit * 100.0


def block_io(blkio_stats: dict[str, Any] | None) -> tuple[int, int]:
    """Sum read and write bytes; other operations are ignored."""
    read = 0
    write = 0
    for entry in (blkio_stats or {}).get("io_service_bytes_recursive") or ():
        op = str(entry.get("op") or "").lower()
        if op == "read":
            read += _as_int(entry.get("value"))
        elif op == "write":
            write += _as_int(entry.get("value"))
    return read, write


def network_totals(networks: dict[str, Any] | None) -> tuple[int, int]:
    """Sum received and transmitted bytes across all interfaces."""
    rx = 0
    tx = 0
    for interface in (networks or {}).values():
        rx += _as_int(interface.get("rx_bytes"))
        tx += _as_int(interface.get("tx_bytes"))
    return rx, tx


def parse_stats_frame(frame: dict[str, Any], os_type: str) -> StatsUpdate:
    """Convert one decoded stats frame into normalized metrics."""
    cpu_stats = _section(frame, "cpu_stats")
    precpu_stats = _section(frame, "precpu_stats")
    memory_stats = _section(frame, "memory_stats")
    rx, tx = network_totals(frame.get("networks"))
    timestamp = parse_timestamp(frame.get("read"))

    if os_type == OS_TYPE_WINDOWS:
        storage = _section(frame, "storage_stats")
        return StatsUpdate(
            timestamp=timestamp,
            cpu_percent=cpu_percent_windows(
                cpu_stats,
                precpu_stats,
                frame.get("read"),
                frame.get("preread"),
                _as_int(frame.get("num_procs")),
            ),
            memory=_as_int(memory_stats.get("privateworkingset")),
            network_rx=rx,
            network_tx=tx,
            block_read=_as_int(storage.get("read_size_bytes")),
            block_write=_as_int(storage.get("write_size_bytes")),
        )

    usage = _as_int(memory_stats.get("usage"))
    limit = _as_int(memory_stats.get("limit"))
    block_read, block_write = block_io(frame.get("blkio_stats"))
    return StatsUpdate(
        timestamp=timestamp,
        cpu_percent=cpu_percent_unix(cpu_stats, precpu_stats),
        cpu_throttled_percent=cpu_throttled_percent(cpu_stats, precpu_stats),
        memory=usage,
        memory_limit=limit,
        memory_percent=memory_percent(usage, limit),
        network_rx=rx,
        network_tx=tx,
        block_read=block_read,
        block_write=block_write,
        pids=_as_int(_section(frame, "pids_stats").get("current")),
    )
