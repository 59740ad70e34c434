"""Simple synchronous event bus for allocation-core events."""
from __future__ import annotations

from typing import Callable

from ralph_ultra.events.types import RalphEvent

Listener = Callable[[RalphEvent], None]


class EventBus:
    """Synchronous publish-subscribe event bus.

    Listeners can subscribe to specific event types or receive all events.
    Events are dispatched synchronously in registration order, typed
    listeners first. Every registration returns a callable that removes it.
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = {}
        self._global_listeners: list[Listener] = []

    def subscribe(self, event_type: type, callback: Listener) -> Callable[[], None]:
        """Register a callback for a specific event type."""
        self._listeners.setdefault(event_type, []).append(callback)
        return lambda: self._remove(self._listeners.get(event_type, []), callback)

    def on_all(self, callback: Listener) -> Callable[[], None]:
        """Register a callback that receives every event."""
        self._global_listeners.append(callback)
        return lambda: self._remove(self._global_listeners, callback)

    def unsubscribe(self, event_type: type, callback: Listener) -> None:
        """Remove a callback registered for *event_type*, if present."""
        self._remove(self._listeners.get(event_type, []), callback)

    def emit(self, event: RalphEvent) -> None:
        """Dispatch an event to all matching listeners."""
        for cb in list(self._listeners.get(type(event), [])):
            cb(event)
        for cb in list(self._global_listeners):
            cb(event)

    def clear(self) -> None:
        """Drop every registered listener."""
        self._listeners.clear()
        self._global_listeners.clear()

    @staticmethod
    def _remove(listeners: list[Listener], callback: Listener) -> None:
        if callback in listeners:
            listeners.remove(callback)
