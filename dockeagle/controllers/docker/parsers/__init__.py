"""Parsers for Docker payloads."""

from dockeagle.controllers.docker.parsers.inspect_parser import (
    InspectInfo,
    apply_identity,
    parse_container_number,
    parse_env_vars,
    parse_health,
    parse_inspect,
)
from dockeagle.controllers.docker.parsers.stats_parser import (
    StatsUpdate,
    block_io,
    cpu_percent_unix,
    cpu_percent_windows,
    cpu_throttled_percent,
    memory_percent,
    network_totals,
    parse_stats_frame,
)

__all__ = [
    "InspectInfo",
    "StatsUpdate",
    "apply_identity",
    "block_io",
    "cpu_percent_unix",
    "cpu_percent_windows",
    "cpu_throttled_percent",
    "memory_percent",
    "network_totals",
    "parse_container_number",
    "parse_env_vars",
    "parse_health",
    "parse_inspect",
    "parse_stats_frame",
]
