"""
Flush event bus.

Observers subscribe to named events; the flush coordinator publishes to
them synchronously. A failing observer is logged and skipped, it never
aborts the flush.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List

from redis_flush.logs import get_component_logger

logger = get_component_logger("Events")

FLUSH_BEFORE_EVENT = "redis_flush_before"
FLUSH_AFTER_EVENT = "redis_flush_after"

Observer = Callable[[str, Dict[str, Any]], None]


class FlushEventBus:
    """Synchronous, exception-isolated observer list keyed by event name."""

    def __init__(self):
        self._observers: Dict[str, List[Observer]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: Observer) -> None:
        """
        Register callback for event_name

        The callback is called as ``callback(event_name, payload)``.
        """
        self._observers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: Observer) -> None:
        observers = self._observers.get(event_name, [])
        if callback in observers:
            observers.remove(callback)

    def observers(self, event_name: str) -> List[Observer]:
        return list(self._observers.get(event_name, []))

    def emit(self, event_name: str, payload: Dict[str, Any]) -> None:
        """Call every observer of event_name in subscription order."""
        for callback in self.observers(event_name):
            try:
                callback(event_name, payload)
            except Exception as e:
                logger.error(
                    f"Observer failed for {event_name}: {e}",
                    component="Events",
                    subcomponent="Emit",
                    observer=getattr(callback, "__name__", repr(callback)),
                    exc_info=True,
                )
