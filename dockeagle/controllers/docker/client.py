"""Docker implementation of the control plane contract.

The Docker SDK is blocking. Short calls run in a worker thread through
``asyncio.to_thread``. Long-lived reads (stats streams, the event feed)
block for as long as the daemon stays silent, so each gets a thread of its
own and never starves the shared pool used by short calls.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

import docker
from docker.errors import DockerException, NotFound
import requests

from dockeagle.constants.limits import TASK_NAME_ID_LENGTH
from dockeagle.constants.timeouts import DOCKER_CLIENT_TIMEOUT
from dockeagle.constants.values import OS_TYPE_HEADER
from dockeagle.controllers.base import (
    ControlPlane,
    ControlPlaneError,
    ControlPlaneEvent,
    ControlPlaneUnavailableError,
    StatsStream,
    WorkloadNotFoundError,
)
from dockeagle.models.state.app_settings import AppSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _translate(error: Exception) -> ControlPlaneError:
    if isinstance(error, NotFound):
        return WorkloadNotFoundError(str(error))
    return ControlPlaneError(str(error))


class DockerStatsStream(StatsStream):
    """Raw streaming response of ``GET /containers/{id}/stats``."""

    def __init__(self, response: requests.Response, name: str = "stats") -> None:
        self._response = response
        self._reader = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._closed = False
        self._os_type = str(response.headers.get(OS_TYPE_HEADER) or "").lower()
        self._chunks: Iterator[bytes] = response.iter_content(chunk_size=None)

    @property
    def os_type(self) -> str:
        return self._os_type

    def _read_chunk_sync(self) -> bytes:
        try:
            return next(self._chunks, b"")
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.debug("Stats stream interrupted: %s", e)
            return b""

    async def read_chunk(self) -> bytes:
        if self._closed:
            return b""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._reader, self._read_chunk_sync)

    def close(self) -> None:
        self._closed = True
        # Closing the response unblocks a read in progress.
        self._response.close()
        self._reader.shutdown(wait=False, cancel_futures=True)


class DockerControlPlane(ControlPlane):
    """Control plane backed by a ``docker.DockerClient``."""

    def __init__(self, client: docker.DockerClient, timeout: int = DOCKER_CLIENT_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    @classmethod
    def connect(cls, settings: AppSettings | None = None) -> DockerControlPlane:
        """Create a client and negotiate the API version with the daemon.

        Raises:
            ControlPlaneUnavailableError: if no daemon can be reached.
        """
        settings = settings or AppSettings()
        try:
            if settings.docker_base_url:
                client = docker.DockerClient(
                    base_url=settings.docker_base_url,
                    timeout=settings.docker_timeout,
                )
            else:
                client = docker.from_env(timeout=settings.docker_timeout)
        except DockerException as e:
            raise ControlPlaneUnavailableError(f"Failed to get docker client: {e}") from e
        return cls(client, timeout=settings.docker_timeout)

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except (DockerException, requests.exceptions.RequestException) as e:
            raise _translate(e) from e

    async def ping(self) -> bool:
        try:
            return bool(await self._call(self._client.api.ping))
        except ControlPlaneError as e:
            logger.warning("Ping docker server failed: %s", e)
            return False

    async def list_workload_ids(self) -> list[str]:
        containers = await self._call(self._client.api.containers)
        return [container["Id"] for container in containers]

    async def inspect(self, workload_id: str) -> dict[str, Any]:
        return await self._call(self._client.api.inspect_container, workload_id)

    def _open_stats_sync(self, workload_id: str) -> DockerStatsStream:
        api = self._client.api
        url = f"{api.base_url}/v{api.api_version}/containers/{workload_id}/stats"
        response = api.get(url, params={"stream": True}, stream=True, timeout=self._timeout)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            response.close()
            if response.status_code == 404:
                raise WorkloadNotFoundError(f"No such container: {workload_id}") from e
            raise
        return DockerStatsStream(response, name=f"stats-{workload_id[:TASK_NAME_ID_LENGTH]}")

    async def open_stats(self, workload_id: str) -> StatsStream:
        return await self._call(self._open_stats_sync, workload_id)

    async def events(self) -> AsyncIterator[ControlPlaneEvent]:
        stream = await self._call(lambda: self._client.events(decode=True))
        reader = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docker-events")
        loop = asyncio.get_running_loop()
        try:
            while True:
                try:
                    raw = await loop.run_in_executor(reader, next, stream, None)
                except (DockerException, requests.exceptions.RequestException) as e:
                    logger.warning("Docker event feed interrupted: %s", e)
                    return
                if raw is None:
                    return
                yield ControlPlaneEvent.from_raw(raw)
        finally:
            stream.close()
            reader.shutdown(wait=False, cancel_futures=True)

    async def stop(self, workload_id: str) -> None:
        await self._call(self._client.api.stop, workload_id)

    async def restart(self, workload_id: str) -> None:
        await self._call(self._client.api.restart, workload_id)

    async def close(self) -> None:
        await asyncio.to_thread(self._client.close)
