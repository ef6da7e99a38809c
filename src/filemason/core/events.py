"""Event bus for operation diagnostics.

Simple pub/sub: the file manager publishes operation.start / operation.end
envelopes here, and sinks (JSONL writer, tests, callers) subscribe.
"""

from __future__ import annotations

import traceback
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from filemason.core.logging import get_logger

_logger = get_logger(__name__)

EventHandler = Callable[[dict[str, Any]], None]
AllEventHandler = Callable[[str, dict[str, Any]], None]


class EventBus:
    """Simple event bus.

    Example:
        bus = EventBus()
        bus.subscribe("operation.end", lambda data: print(data["operation"]))
        bus.publish("operation.end", {"operation": "file_io.copy_file"})
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._all_subscribers: list[AllEventHandler] = []

    def subscribe(self, event: str, callback: EventHandler) -> None:
        """Subscribe to a single event name."""
        self._subscribers[event].append(callback)

    def unsubscribe(self, event: str, callback: EventHandler) -> None:
        """Remove a callback previously passed to subscribe()."""
        if callback in self._subscribers.get(event, []):
            self._subscribers[event].remove(callback)

    def subscribe_all(self, callback: AllEventHandler) -> None:
        """Subscribe to all published events (receives name and data)."""
        self._all_subscribers.append(callback)

    def unsubscribe_all(self, callback: AllEventHandler) -> None:
        if callback in self._all_subscribers:
            self._all_subscribers.remove(callback)

    def publish(self, event: str, data: dict[str, Any] | None = None) -> None:
        """Publish an event.

        Handler failures are logged and suppressed so that diagnostics can
        never break a file operation.
        """
        data = data or {}

        for cb_event in list(self._subscribers.get(event, [])):
            try:
                cb_event(data)
            except Exception as e:
                _logger.error(
                    f"Error in event handler for '{event}' (callback={cb_event}): "
                    f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
                )

        for cb_all in list(self._all_subscribers):
            try:
                cb_all(event, data)
            except Exception as e:
                _logger.error(
                    f"Error in all-event handler (event='{event}', callback={cb_all}): "
                    f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
                )

    def clear(self) -> None:
        """Clear all subscribers."""
        self._subscribers.clear()
        self._all_subscribers.clear()


_global_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get global event bus instance."""
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus
