"""Synchronous in-process bus carrying schedule change notifications."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable


class EventBus:
    """Publish/subscribe bus for timetable change events.

    Handlers run synchronously, in registration order, on the publishing
    thread. A handler that raises propagates to the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable) -> Callable[[], None]:
        """Register *handler* and return a callable that removes it again."""
        self._subscribers[event_type].append(handler)

        def _unsubscribe() -> None:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    def publish(self, event: Any) -> None:
        for handler in list(self._subscribers.get(type(event), [])):
            handler(event)
