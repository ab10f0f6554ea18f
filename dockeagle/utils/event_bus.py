"""Thread-safe publish/subscribe bus for registry notifications."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from dockeagle.constants.enums import RegistryEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[str], None]


class EventBus:
    """Fan out workload notifications to any number of subscribers.

    Subscribers are called synchronously, in subscription order, with the
    workload ID. A failing subscriber is logged and skipped; it never stops
    delivery to the others or breaks the publisher.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: dict[RegistryEvent, list[Subscriber]] = {
            kind: [] for kind in RegistryEvent
        }

    def subscribe(self, kind: RegistryEvent, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for ``kind`` and return an unsubscribe function."""
        with self._lock:
            self._subscribers[kind].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers[kind]:
                    self._subscribers[kind].remove(callback)

        return unsubscribe

    def subscriber_count(self, kind: RegistryEvent) -> int:
        with self._lock:
            return len(self._subscribers[kind])

    def publish(self, kind: RegistryEvent, workload_id: str) -> None:
        with self._lock:
            subscribers = list(self._subscribers[kind])
        for callback in subscribers:
            try:
                callback(workload_id)
            except Exception:
                logger.exception("Subscriber for %s failed on %s", kind.value, workload_id)


__all__ = ["EventBus", "Subscriber"]
