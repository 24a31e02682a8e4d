import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class EventEmitter:
    """Synchronous in-process event bus; handlers run in subscription order."""

    def __init__(self):
        self._listeners: dict[str, list[Handler]] = {}

    def on(self, event: str, handler: Handler) -> None:
        logger.debug("on(%r) -> %r", event, handler)
        self._listeners.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Handler) -> None:
        logger.debug("off(%r) -> %r", event, handler)
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listeners(self, event: str) -> list[Handler]:
        return list(self._listeners.get(event, []))

    def emit(self, event: str, *args, **kwargs) -> None:
        # copy so a handler may unsubscribe while the event is dispatched
        for handler in self.listeners(event):
            logger.debug("emitting %r -> %r", event, handler)
            handler(*args, **kwargs)


__all__ = ["EventEmitter"]
