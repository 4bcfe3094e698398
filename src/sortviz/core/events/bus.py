from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Callable, TypeAlias

import structlog

from sortviz.core.events.base import Event

log = structlog.get_logger()

EventHandler: TypeAlias = Callable[[Event], None]


@dataclass(frozen=True)
class Subscription:
    """
    Handle returned by subscribe(); pass it back to unsubscribe().
    """

    event_type: str
    handler: EventHandler


class EventBus:
    """
    Synchronous in-process event bus.

    Handlers run on the publishing thread, in subscription order. For step,
    statistics and progress events that is the run's worker thread, so a
    slow handler slows the animation down with it.

    Subscriptions can change from any thread while a run is publishing. Each
    event type maps to an immutable tuple of handlers that is replaced on
    change, so a publish always sees one consistent set of handlers.

    A handler that raises aborts the publish and the exception reaches the
    publisher.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._handlers: dict[str, tuple[EventHandler, ...]] = {}

    def subscribe(self, *, event_type: str, handler: EventHandler) -> Subscription:
        if not event_type:
            raise ValueError("event_type must be non-empty")
        with self._lock:
            self._handlers[event_type] = self._handlers.get(event_type, ()) + (handler,)
        log.debug("bus.subscribed", event_type=event_type, handler=getattr(handler, "__qualname__", repr(handler)))
        return Subscription(event_type=event_type, handler=handler)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """
        Remove one registration of the handler; False if it was not subscribed.
        """
        with self._lock:
            current = self._handlers.get(subscription.event_type, ())
            for pos, handler in enumerate(current):
                if handler == subscription.handler:
                    self._handlers[subscription.event_type] = current[:pos] + current[pos + 1 :]
                    break
            else:
                return False
        log.debug("bus.unsubscribed", event_type=subscription.event_type)
        return True

    def publish(self, event: Event) -> None:
        handlers = self._handlers.get(event.event_type, ())
        log.debug(
            "bus.publish",
            event_type=event.event_type,
            sequence=event.sequence,
            handlers=len(handlers),
        )
        for handler in handlers:
            handler(event)

    def handlers_for(self, event_type: str) -> tuple[EventHandler, ...]:
        return self._handlers.get(event_type, ())
