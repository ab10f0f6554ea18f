"""Tests for workload models."""

from __future__ import annotations

import asyncio
import threading
from contextlib import suppress

import pytest

from dockeagle.constants.enums import HealthState, MetricName, WorkloadState
from dockeagle.models.core import RegistrySummary, WorkloadData, WorkloadRecord
from dockeagle.models.core.workload_info import derive_alternative_name
from dockeagle.models.history import Sample


class TestDeriveAlternativeName:
    """Tests for derive_alternative_name."""

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({"name": "/x", "compose_service": "web", "compose_container_number": 2}, "web-2"),
            ({"name": "/x", "compose_service": "web", "compose_container_number": 0}, "web"),
            ({"name": "/x"}, "x"),
            ({"name": ""}, "abcdef12"),
            ({"name": "/"}, "abcdef12"),
        ],
    )
    def test_priority(self, kwargs: dict, expected: str) -> None:
        """Test service-number, service, name and short ID take turns."""
        assert derive_alternative_name("abcdef1234567890", **kwargs) == expected

    def test_short_id_shorter_than_prefix(self) -> None:
        """Test IDs shorter than the prefix are used whole."""
        assert derive_alternative_name("abc") == "abc"


class TestWorkloadData:
    """Tests for WorkloadData."""

    def test_defaults(self) -> None:
        """Test a fresh record starts UNKNOWN with empty metrics."""
        data = WorkloadData(id="abc")
        assert data.state == WorkloadState.UNKNOWN
        assert data.health_status == HealthState.UNKNOWN
        assert data.env_vars == {}
        assert len(data.cpu_percent_history) == 0

    def test_history_by_metric(self) -> None:
        """Test every metric maps to its own history."""
        data = WorkloadData(id="abc")
        histories = {id(data.history(metric)) for metric in MetricName}
        assert len(histories) == len(MetricName)
        assert data.history(MetricName.MEMORY) is data.memory_history

    def test_set_alternative_name(self) -> None:
        """Test the display name follows the compose labels."""
        data = WorkloadData(
            id="abcdef1234567890",
            name="proj-web-3",
            compose_service="web",
            compose_container_number=3,
        )
        data.set_alternative_name()
        assert data.alternative_name == "web-3"


class TestWorkloadRecord:
    """Tests for WorkloadRecord."""

    def test_snapshot_is_deep_copy(self) -> None:
        """Test mutating a snapshot never changes the record."""
        record = WorkloadRecord("abc")
        with record.lock:
            record.data.cpu_percent_history.add(Sample(10.0, 1.0))
            record.data.env_vars["A"] = "1"

        snapshot = record.snapshot()
        snapshot.cpu_percent = 99.0
        snapshot.env_vars["B"] = "2"
        snapshot.cpu_percent_history.add(Sample(11.0, 2.0))

        assert record.data.cpu_percent == 0.0
        assert record.data.env_vars == {"A": "1"}
        assert len(record.data.cpu_percent_history) == 1

    def test_custom_history_capacity(self) -> None:
        """Test every history uses the configured capacity."""
        record = WorkloadRecord("abc", history_capacity=16)
        for metric in MetricName:
            assert record.data.history(metric).capacity == 16

    def test_snapshot_releases_lock(self) -> None:
        """Test the lock is free again after taking a snapshot."""
        record = WorkloadRecord("abc")
        record.snapshot()
        assert record.lock.acquire(blocking=False) is True
        record.lock.release()


class TestWorkloadRecordHold:
    """Tests for WorkloadRecord.hold."""

    @pytest.mark.asyncio
    async def test_hold_yields_data_and_releases(self) -> None:
        record = WorkloadRecord("abc")
        async with record.hold() as data:
            assert data is record.data
            assert record.lock.locked()
        assert not record.lock.locked()

    @pytest.mark.asyncio
    async def test_waits_for_lock_held_by_thread(self) -> None:
        """Test a coroutine gets the lock once another thread lets go."""
        record = WorkloadRecord("abc")
        acquired = threading.Event()
        release = threading.Event()

        def hold() -> None:
            with record.lock:
                acquired.set()
                release.wait(timeout=5)

        async def write() -> None:
            async with record.hold() as data:
                data.cpu_percent = 42.0

        thread = threading.Thread(target=hold)
        thread.start()
        assert acquired.wait(timeout=5)
        task = asyncio.create_task(write())
        await asyncio.sleep(0.05)
        assert not task.done()
        release.set()
        await asyncio.wait_for(task, timeout=2.0)
        thread.join()

        assert record.snapshot().cpu_percent == 42.0
        assert not record.lock.locked()

    @pytest.mark.asyncio
    async def test_cancelled_waiter_gives_lock_back(self) -> None:
        """Test cancelling a waiting coroutine never leaves the lock taken."""
        record = WorkloadRecord("abc")
        acquired = threading.Event()
        release = threading.Event()

        def hold() -> None:
            with record.lock:
                acquired.set()
                release.wait(timeout=5)

        async def write() -> None:
            async with record.hold():
                pass

        thread = threading.Thread(target=hold)
        thread.start()
        assert acquired.wait(timeout=5)
        task = asyncio.create_task(write())
        await asyncio.sleep(0.05)
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        release.set()
        thread.join()
        await asyncio.sleep(0.1)

        assert record.lock.acquire(timeout=1.0) is True
        record.lock.release()

    @pytest.mark.asyncio
    async def test_snapshot_async(self) -> None:
        record = WorkloadRecord("abc")
        snapshot = await record.snapshot_async()
        snapshot.memory = 1
        assert record.data.memory == 0


class TestRegistrySummary:
    """Tests for RegistrySummary defaults."""

    def test_defaults(self) -> None:
        summary = RegistrySummary()
        assert summary.workload_count == 0
        assert summary.running_count == 0
        assert summary.cpu_percent == 0.0
        assert summary.memory == 0
