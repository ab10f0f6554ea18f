"""Headless runner for dockeagle.

Starts the supervisor and periodically logs a one-line summary per tracked
workload. Rendering front ends consume the same snapshot API.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
import time
from collections.abc import Sequence
from pathlib import Path

from dockeagle.constants.enums import MetricName
from dockeagle.constants.values import APP_NAME
from dockeagle.controllers.docker import DockerControlPlane
from dockeagle.controllers.supervisor import SupervisorLoop
from dockeagle.models.core import WorkloadData
from dockeagle.models.state import AppSettings, ConfigLoadError, ConfigManager
from dockeagle.utils.logging_setup import configure_logging
from dockeagle.utils.resource_parser import format_bytes, format_percent

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Follow resource usage of running Docker containers.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML file")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between summaries (overrides settings)",
    )
    return parser


def format_workload_line(data: WorkloadData, now: float, window_seconds: float) -> str:
    """Render one workload as a single summary line."""
    cpu_avg = data.history(MetricName.CPU_PERCENT).range_average(now - window_seconds, now)
    avg_text = "-" if math.isnan(cpu_avg) else format_percent(cpu_avg)
    return (
        f"{data.alternative_name or data.id[:12]} [{data.state.value}] "
        f"cpu={format_percent(data.cpu_percent)} (avg {avg_text}) "
        f"throttled={format_percent(data.cpu_throttled_percent)} "
        f"mem={format_bytes(data.memory)} ({format_percent(data.memory_percent)}) "
        f"rx={format_bytes(data.network_rx)} tx={format_bytes(data.network_tx)} "
        f"health={data.health_status.value}"
    )


async def report_loop(supervisor: SupervisorLoop, settings: AppSettings) -> None:
    while True:
        await asyncio.sleep(settings.summary_interval)
        registry = supervisor.registry
        if registry is None:
            continue
        summary = await asyncio.to_thread(registry.summary)
        logger.info(
            "%d workloads (%d running), %s CPU, %s memory",
            summary.workload_count,
            summary.running_count,
            format_percent(summary.cpu_percent),
            format_bytes(summary.memory),
        )
        now = time.time()
        snapshot = await asyncio.to_thread(registry.snapshot)
        for data in sorted(snapshot, key=lambda d: d.alternative_name):
            logger.info("  %s", format_workload_line(data, now, settings.summary_window_seconds))


async def run_app(settings: AppSettings) -> int:
    supervisor = SupervisorLoop(lambda: DockerControlPlane.connect(settings), settings=settings)
    result = await supervisor.connect()
    if not result.success:
        logger.error("Cannot start without a docker daemon: %s", result.error)
        return EXIT_FATAL

    reporter = asyncio.create_task(report_loop(supervisor, settings), name="summary-reporter")
    try:
        result = await supervisor.run()
    finally:
        reporter.cancel()
    return EXIT_OK if result.success else EXIT_FATAL


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or "INFO")
    try:
        settings = ConfigManager.load(args.config)
    except ConfigLoadError as e:
        logger.error("%s", e)
        return EXIT_CONFIG

    if args.interval is not None:
        settings.summary_interval = args.interval
    configure_logging(args.log_level or settings.log_level)

    try:
        return asyncio.run(run_app(settings))
    except KeyboardInterrupt:
        return EXIT_OK
