"""Scalar value constants for dockeagle."""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_NAME: Final = "dockeagle"
CONFIG_ENV_VAR: Final = "DOCKEAGLE_CONFIG"

# ============================================================================
# Docker compose labels
# ============================================================================

COMPOSE_PROJECT_LABEL: Final = "com.docker.compose.project"
COMPOSE_PROJECT_DIR_LABEL: Final = "com.docker.compose.project.working_dir"
COMPOSE_SERVICE_LABEL: Final = "com.docker.compose.service"
COMPOSE_CONTAINER_NUMBER_LABEL: Final = "com.docker.compose.container-number"

# ============================================================================
# Control plane values
# ============================================================================

OS_TYPE_WINDOWS: Final = "windows"
OS_TYPE_HEADER: Final = "Ostype"
EVENT_TYPE_CONTAINER: Final = "container"
EVENT_ACTION_START: Final = "start"
EVENT_ACTION_STOP: Final = "stop"
EVENT_ACTION_DESTROY: Final = "destroy"
HEALTH_STATUS_HEALTHY: Final = "healthy"

__all__ = [
    "APP_NAME",
    "COMPOSE_CONTAINER_NUMBER_LABEL",
    "COMPOSE_PROJECT_DIR_LABEL",
    "COMPOSE_PROJECT_LABEL",
    "COMPOSE_SERVICE_LABEL",
    "CONFIG_ENV_VAR",
    "EVENT_ACTION_DESTROY",
    "EVENT_ACTION_START",
    "EVENT_ACTION_STOP",
    "EVENT_TYPE_CONTAINER",
    "HEALTH_STATUS_HEALTHY",
    "OS_TYPE_HEADER",
    "OS_TYPE_WINDOWS",
]
