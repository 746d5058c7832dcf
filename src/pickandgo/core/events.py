"""Event bus for loosely coupled notifications.

The vehicle wizard publishes ``vehicle.added`` after a successful submission
so that owner listings can refresh without a direct dependency on the wizard.

Example:
    bus = get_event_bus()

    def on_vehicle_added(data):
        refresh_owner_listing(data["owner_id"])

    bus.subscribe("vehicle.added", on_vehicle_added)
"""

from __future__ import annotations

import traceback
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from pickandgo.core.logging import get_logger

_logger = get_logger(__name__)


class EventBus:
    """Simple synchronous pub/sub."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callable[[dict[str, Any]], None]]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[[dict[str, Any]], None]) -> None:
        self._subscribers[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[[dict[str, Any]], None]) -> None:
        if callback in self._subscribers.get(event, []):
            self._subscribers[event].remove(callback)

    def publish(self, event: str, data: dict[str, Any] | None = None) -> None:
        """Publish an event.

        Handler failures are logged and never propagate to the publisher.
        """
        data = data or {}

        for cb in list(self._subscribers.get(event, [])):
            try:
                cb(data)
            except Exception as e:
                tb = traceback.format_exc()
                _logger.error(
                    f"Error in event handler for '{event}' (callback={cb}): "
                    f"{type(e).__name__}: {e}\n{tb}"
                )

    def clear(self) -> None:
        self._subscribers.clear()


_global_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get global event bus instance."""
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus
