"""Event watcher - forwards container lifecycle events into the registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dockeagle.constants.values import (
    EVENT_ACTION_DESTROY,
    EVENT_ACTION_START,
    EVENT_ACTION_STOP,
    EVENT_TYPE_CONTAINER,
)
from dockeagle.controllers.base import ControlPlane, ControlPlaneEvent

if TYPE_CHECKING:
    from dockeagle.controllers.registry import WorkloadRegistry

logger = logging.getLogger(__name__)


class EventWatcher:
    """Subscribes to the control plane event feed."""

    _STOP_ACTIONS = (EVENT_ACTION_STOP, EVENT_ACTION_DESTROY)

    def __init__(self, control_plane: ControlPlane, registry: WorkloadRegistry) -> None:
        """Initialize with the control plane and the registry to feed.

        Args:
            control_plane: Source of the event feed
            registry: Registry receiving start and stop notifications
        """
        self._control_plane = control_plane
        self._registry = registry

    async def run(self) -> None:
        """Consume events until the feed ends."""
        async for event in self._control_plane.events():
            await self.handle(event)
        logger.warning("Control plane event feed ended")

    async def handle(self, event: ControlPlaneEvent) -> None:
        """Dispatch one event; non-container events are ignored."""
        logger.debug("Event: %s %s %s", event.type, event.action, event.actor_id)
        if event.type != EVENT_TYPE_CONTAINER or not event.actor_id:
            return
        if event.action == EVENT_ACTION_START:
            logger.info("Workload started: %s", event.actor_id)
            self._registry.request_add(event.actor_id)
        elif event.action in self._STOP_ACTIONS:
            await self._registry.handle_stop_event(event.actor_id, event.action)
