"""Ordered multi-subscriber event dispatch."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

EventHandler = Callable[..., None]


class EventDispatcher:
    """Invoke every handler registered for an event, in subscription order."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event: str, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler`` for ``event`` and return an unsubscribe callable."""

        self._handlers[event].append(handler)

        def _unsubscribe() -> None:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    def emit(self, event: str, *args: Any) -> int:
        """Dispatch ``event`` to its handlers and return how many ran."""

        handlers = list(self._handlers.get(event, ()))
        logger.debug("Dispatching %s to %d handler(s)", event, len(handlers))
        for handler in handlers:
            handler(*args)
        return len(handlers)


__all__ = ["EventDispatcher", "EventHandler"]
