"""Tests for the Docker control plane adapter."""

from __future__ import annotations

import asyncio
import threading
from unittest.mock import MagicMock, patch

import pytest
import requests
from docker.errors import APIError, DockerException, NotFound

from dockeagle.controllers.base import (
    ControlPlaneError,
    ControlPlaneUnavailableError,
    WorkloadNotFoundError,
)
from dockeagle.controllers.docker import DockerControlPlane, DockerStatsStream
from dockeagle.models.state import AppSettings


class _EventStream:
    """Blocking iterator standing in for the SDK's CancellableStream."""

    def __init__(self, items: list[dict]) -> None:
        self._items = list(items)
        self.closed = False
        self.readers: list[str] = []

    def __iter__(self) -> _EventStream:
        return self

    def __next__(self) -> dict:
        self.readers.append(threading.current_thread().name)
        if not self._items:
            raise StopIteration
        return self._items.pop(0)

    def close(self) -> None:
        self.closed = True


def _response(status: int = 200, chunks: list[bytes] | None = None, os_type: str = "Linux"):
    response = MagicMock()
    response.status_code = status
    response.headers = {"Ostype": os_type}
    response.iter_content.return_value = iter(chunks or [])
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.api.base_url = "http+docker://localhost"
    client.api.api_version = "1.44"
    return client


@pytest.fixture
def control_plane(client: MagicMock) -> DockerControlPlane:
    return DockerControlPlane(client, timeout=30)


class TestDockerControlPlaneConnect:
    """Tests for DockerControlPlane.connect."""

    def test_from_env(self) -> None:
        """Test the environment is used without a base URL."""
        with patch("dockeagle.controllers.docker.client.docker.from_env") as from_env:
            control_plane = DockerControlPlane.connect(AppSettings(docker_timeout=10))
        from_env.assert_called_once_with(timeout=10)
        assert isinstance(control_plane, DockerControlPlane)

    def test_base_url(self) -> None:
        settings = AppSettings(docker_base_url="tcp://127.0.0.1:2375")
        with patch("dockeagle.controllers.docker.client.docker.DockerClient") as docker_client:
            DockerControlPlane.connect(settings)
        docker_client.assert_called_once_with(
            base_url="tcp://127.0.0.1:2375", timeout=settings.docker_timeout
        )

    def test_unavailable(self) -> None:
        """Test a client that cannot be built raises ControlPlaneUnavailableError."""
        with patch(
            "dockeagle.controllers.docker.client.docker.from_env",
            side_effect=DockerException("no socket"),
        ):
            with pytest.raises(ControlPlaneUnavailableError, match="no socket"):
                DockerControlPlane.connect()


class TestDockerControlPlaneCalls:
    """Tests for the request/response operations."""

    @pytest.mark.asyncio
    async def test_ping(self, control_plane: DockerControlPlane, client: MagicMock) -> None:
        client.api.ping.return_value = True
        assert await control_plane.ping() is True

    @pytest.mark.asyncio
    async def test_ping_failure_is_false(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        """Test a failing ping reports False instead of raising."""
        client.api.ping.side_effect = requests.exceptions.ConnectionError("refused")
        assert await control_plane.ping() is False

    @pytest.mark.asyncio
    async def test_list_workload_ids(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        client.api.containers.return_value = [{"Id": "a"}, {"Id": "b"}]
        assert await control_plane.list_workload_ids() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_inspect(self, control_plane: DockerControlPlane, client: MagicMock) -> None:
        client.api.inspect_container.return_value = {"Name": "/web"}
        assert await control_plane.inspect("abc") == {"Name": "/web"}
        client.api.inspect_container.assert_called_once_with("abc")

    @pytest.mark.asyncio
    async def test_inspect_not_found(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        """Test NotFound is translated to WorkloadNotFoundError."""
        client.api.inspect_container.side_effect = NotFound("No such container: abc")
        with pytest.raises(WorkloadNotFoundError):
            await control_plane.inspect("abc")

    @pytest.mark.asyncio
    async def test_api_error(self, control_plane: DockerControlPlane, client: MagicMock) -> None:
        """Test other SDK errors become ControlPlaneError."""
        client.api.stop.side_effect = APIError("server error")
        with pytest.raises(ControlPlaneError) as exc_info:
            await control_plane.stop("abc")
        assert not isinstance(exc_info.value, WorkloadNotFoundError)

    @pytest.mark.asyncio
    async def test_stop_and_restart(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        await control_plane.stop("abc")
        await control_plane.restart("abc")
        client.api.stop.assert_called_once_with("abc")
        client.api.restart.assert_called_once_with("abc")

    @pytest.mark.asyncio
    async def test_close(self, control_plane: DockerControlPlane, client: MagicMock) -> None:
        await control_plane.close()
        client.close.assert_called_once_with()


class TestDockerStats:
    """Tests for the stats stream."""

    @pytest.mark.asyncio
    async def test_open_stats(self, control_plane: DockerControlPlane, client: MagicMock) -> None:
        """Test the stream reports the OS type and yields chunks until exhausted."""
        response = _response(chunks=[b'{"a": 1}\n', b'{"b": 2}\n'])
        client.api.get.return_value = response

        stream = await control_plane.open_stats("abc")

        client.api.get.assert_called_once_with(
            "http+docker://localhost/v1.44/containers/abc/stats",
            params={"stream": True},
            stream=True,
            timeout=30,
        )
        assert isinstance(stream, DockerStatsStream)
        assert stream.os_type == "linux"
        assert await stream.read_chunk() == b'{"a": 1}\n'
        assert await stream.read_chunk() == b'{"b": 2}\n'
        assert await stream.read_chunk() == b""
        stream.close()
        response.close.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_open_stats_not_found(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        response = _response(status=404)
        client.api.get.return_value = response
        with pytest.raises(WorkloadNotFoundError):
            await control_plane.open_stats("abc")
        response.close.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_open_stats_server_error(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        client.api.get.return_value = _response(status=500)
        with pytest.raises(ControlPlaneError):
            await control_plane.open_stats("abc")

    @pytest.mark.asyncio
    async def test_interrupted_stream_ends(self) -> None:
        """Test a broken connection reads as end of stream."""
        response = _response()

        def broken():
            raise requests.exceptions.ChunkedEncodingError("reset")
            yield b""

        response.iter_content.return_value = broken()
        stream = DockerStatsStream(response)
        assert await stream.read_chunk() == b""

    @pytest.mark.asyncio
    async def test_reads_run_on_stream_thread(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        """Test each stream reads on a thread named after its workload."""
        readers: list[str] = []

        def chunks():
            readers.append(threading.current_thread().name)
            yield b"{}\n"

        response = _response()
        response.iter_content.return_value = chunks()
        client.api.get.return_value = response

        stream = await control_plane.open_stats("abcdef1234567890")
        assert await stream.read_chunk() == b"{}\n"
        stream.close()

        assert len(readers) == 1
        assert readers[0].startswith("stats-abcdef12")

    @pytest.mark.asyncio
    async def test_blocked_streams_leave_short_calls_running(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        """Test many silent stats streams never hold up a ping."""
        release = threading.Event()

        def silent():
            release.wait(timeout=5)
            yield b""

        streams = []
        for _ in range(40):
            response = _response()
            response.iter_content.return_value = silent()
            streams.append(DockerStatsStream(response))
        reads = [asyncio.create_task(stream.read_chunk()) for stream in streams]
        await asyncio.sleep(0.05)
        client.api.ping.return_value = True

        try:
            assert await asyncio.wait_for(control_plane.ping(), timeout=1.0) is True
            assert not any(read.done() for read in reads)
        finally:
            release.set()
            await asyncio.gather(*reads)
            for stream in streams:
                stream.close()

    @pytest.mark.asyncio
    async def test_read_after_close(self) -> None:
        response = _response(chunks=[b"{}\n"])
        stream = DockerStatsStream(response)
        stream.close()
        assert await stream.read_chunk() == b""
        response.close.assert_called_once_with()


class TestDockerEvents:
    """Tests for the event feed."""

    @pytest.mark.asyncio
    async def test_events(self, control_plane: DockerControlPlane, client: MagicMock) -> None:
        """Test decoded events are converted and the stream is closed at the end."""
        feed = _EventStream(
            [
                {"Type": "container", "Action": "start", "Actor": {"ID": "a"}},
                {"Type": "container", "Action": "stop", "Actor": {"ID": "a"}},
            ]
        )
        client.events.return_value = feed

        events = [event async for event in control_plane.events()]

        client.events.assert_called_once_with(decode=True)
        assert [(e.action, e.actor_id) for e in events] == [("start", "a"), ("stop", "a")]
        assert feed.closed is True

    @pytest.mark.asyncio
    async def test_events_read_on_own_thread(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        """Test the blocking feed is read off the shared worker pool."""
        feed = _EventStream([{"Type": "container", "Action": "start", "Actor": {"ID": "a"}}])
        client.events.return_value = feed

        events = [event async for event in control_plane.events()]

        assert [e.actor_id for e in events] == ["a"]
        assert feed.readers
        assert all(name.startswith("docker-events") for name in feed.readers)

    @pytest.mark.asyncio
    async def test_events_unavailable(
        self, control_plane: DockerControlPlane, client: MagicMock
    ) -> None:
        client.events.side_effect = DockerException("down")
        with pytest.raises(ControlPlaneError):
            await asyncio.wait_for(anext(control_plane.events()), timeout=2.0)
