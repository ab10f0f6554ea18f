"""Fetchers following Docker streams."""

from dockeagle.controllers.docker.fetchers.event_fetcher import EventWatcher
from dockeagle.controllers.docker.fetchers.stats_reader import (
    FrameDecoder,
    StatsStreamReader,
)

__all__ = ["EventWatcher", "FrameDecoder", "StatsStreamReader"]
