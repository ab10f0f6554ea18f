"""Docker domain: control plane adapter, stream fetchers and parsers."""

from dockeagle.controllers.docker.client import DockerControlPlane, DockerStatsStream
from dockeagle.controllers.docker.fetchers import (
    EventWatcher,
    FrameDecoder,
    StatsStreamReader,
)

__all__ = [
    "DockerControlPlane",
    "DockerStatsStream",
    "EventWatcher",
    "FrameDecoder",
    "StatsStreamReader",
]
