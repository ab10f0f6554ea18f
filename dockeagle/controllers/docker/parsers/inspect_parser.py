"""Parser for Docker container inspect payloads."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from dockeagle.constants.enums import HealthState
from dockeagle.constants.values import (
    COMPOSE_CONTAINER_NUMBER_LABEL,
    COMPOSE_PROJECT_DIR_LABEL,
    COMPOSE_PROJECT_LABEL,
    COMPOSE_SERVICE_LABEL,
    HEALTH_STATUS_HEALTHY,
)
from dockeagle.models.core import WorkloadData
from dockeagle.utils.timestamps import parse_timestamp


@dataclass(frozen=True)
class InspectInfo:
    """Metadata extracted from one inspect call."""

    name: str = ""
    image: str = ""
    started_at: float = 0.0
    compose_project: str = ""
    compose_project_dir: str = ""
    compose_service: str = ""
    compose_container_number: int = 1
    env_vars: dict[str, str] = field(default_factory=dict)
    health_status: HealthState = HealthState.UNKNOWN


def parse_env_vars(entries: Iterable[str] | None) -> dict[str, str]:
    """Split ``KEY=VALUE`` strings on the first ``=``.

    Entries without ``=`` are skipped.
    """
    env_vars: dict[str, str] = {}
    for entry in entries or ():
        key, sep, value = str(entry).partition("=")
        if not sep:
            continue
        env_vars[key] = value
    return env_vars


def parse_health(state: dict[str, Any] | None) -> HealthState:
    """Map the inspect ``State.Health`` block to a HealthState."""
    health = (state or {}).get("Health")
    if not health:
        return HealthState.UNKNOWN
    if health.get("Status") == HEALTH_STATUS_HEALTHY:
        return HealthState.HEALTHY
    return HealthState.UNHEALTHY


def parse_container_number(value: Any) -> int:
    """Parse the compose container-number label, defaulting to 1."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 1


def parse_inspect(raw: dict[str, Any]) -> InspectInfo:
    """Parse a raw inspect payload into InspectInfo."""
    config = raw.get("Config") or {}
    state = raw.get("State") or {}
    labels = config.get("Labels") or {}
    return InspectInfo(
        name=str(raw.get("Name") or "").lstrip("/"),
        image=str(config.get("Image") or raw.get("Image") or ""),
        started_at=parse_timestamp(state.get("StartedAt")),
        compose_project=labels.get(COMPOSE_PROJECT_LABEL, ""),
        compose_project_dir=labels.get(COMPOSE_PROJECT_DIR_LABEL, ""),
        compose_service=labels.get(COMPOSE_SERVICE_LABEL, ""),
        compose_container_number=parse_container_number(
            labels.get(COMPOSE_CONTAINER_NUMBER_LABEL)
        ),
        env_vars=parse_env_vars(config.get("Env")),
        health_status=parse_health(state),
    )


def apply_identity(data: WorkloadData, info: InspectInfo) -> None:
    """Copy identity and compose metadata onto a record and rename it."""
    data.created = info.started_at
    data.name = info.name
    data.image = info.image
    data.compose_project = info.compose_project
    data.compose_project_dir = info.compose_project_dir
    data.compose_service = info.compose_service
    data.compose_container_number = info.compose_container_number
    data.set_alternative_name()
