from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Iterable, Protocol, Sequence

import structlog

from sortviz.core.events.bus import EventBus, EventHandler, Subscription

log = structlog.get_logger()


class EventComponent(Protocol):
    """
    Anything that observes a session: renderers, collectors in tests.
    """

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        """
        Return (event_type, handler) pairs, in the order they should be wired.
        """
        ...


@dataclass(frozen=True, slots=True)
class WiredSubscription:
    component: str
    subscription: Subscription


@dataclass(frozen=True, slots=True)
class RouterWiring:
    """
    Result of one register() call; hand it to unregister() to detach.
    """

    subscriptions: tuple[WiredSubscription, ...]

    def components(self) -> tuple[str, ...]:
        """
        Names of the components that subscribed to anything, in wiring order.
        """
        return tuple(dict.fromkeys(w.component for w in self.subscriptions))


class EngineRouter:
    """
    Wires components onto a bus.

    Components are wired in the order given, each in its own
    subscriptions() order. The same handler cannot be wired twice for one
    event type across all registrations of this router, which catches a
    renderer attached to the same session twice.
    """

    def __init__(self, *, bus: EventBus) -> None:
        self._bus = bus
        self._lock = Lock()
        self._wired: set[tuple[str, EventHandler]] = set()

    def register(self, components: Iterable[EventComponent]) -> RouterWiring:
        wired: list[WiredSubscription] = []

        with self._lock:
            for component in components:
                name = type(component).__name__

                subs = component.subscriptions()
                if not isinstance(subs, Sequence):
                    raise TypeError(f"{name}.subscriptions() must return a Sequence")

                for event_type, handler in subs:
                    if not event_type:
                        raise ValueError(f"{name} produced empty event_type")

                    # Bound methods compare equal per instance, so this also spots re-attaching
                    key = (event_type, handler)
                    if key in self._wired:
                        raise RuntimeError(f"duplicate subscription: component={name} event_type={event_type}")
                    self._wired.add(key)

                    sub = self._bus.subscribe(event_type=event_type, handler=handler)
                    wired.append(WiredSubscription(component=name, subscription=sub))

        wiring = RouterWiring(subscriptions=tuple(wired))
        log.debug("router.registered", components=list(wiring.components()), subscriptions=len(wired))
        return wiring

    def unregister(self, wiring: RouterWiring) -> None:
        with self._lock:
            for w in wiring.subscriptions:
                self._bus.unsubscribe(w.subscription)
                self._wired.discard((w.subscription.event_type, w.subscription.handler))
        log.debug("router.unregistered", components=list(wiring.components()))
