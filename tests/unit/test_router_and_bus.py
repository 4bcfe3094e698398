from __future__ import annotations

import pytest

from sortviz.core.engine.router import EngineRouter
from sortviz.core.engine.state import RunState
from sortviz.core.events.bus import EventBus
from sortviz.core.events.sorting import ProgressUpdated
from sortviz.renderers import NullRenderer


class Recorder:
    def __init__(self) -> None:
        self.labels: list[str] = []

    def subscriptions(self):
        return [("sort.progress", self._on_progress)]

    def _on_progress(self, e) -> None:
        self.labels.append(e.label)


class BadComponent:
    def subscriptions(self):
        return iter([("sort.progress", lambda e: None)])


def _progress(label: str, sequence: int) -> ProgressUpdated:
    return ProgressUpdated.create(run_id=None, percent=0.0, label=label, sequence=sequence)


def test_dispatch_follows_registration_order() -> None:
    bus = EventBus()
    order: list[str] = []
    bus.subscribe(event_type="sort.progress", handler=lambda e: order.append("first"))
    bus.subscribe(event_type="sort.progress", handler=lambda e: order.append("second"))

    bus.publish(_progress("x", 1))
    assert order == ["first", "second"]


def test_unsubscribe_stops_delivery() -> None:
    bus = EventBus()
    rec = Recorder()
    sub = bus.subscribe(event_type="sort.progress", handler=rec._on_progress)

    bus.publish(_progress("a", 1))
    bus.unsubscribe(sub)
    bus.publish(_progress("b", 2))
    assert rec.labels == ["a"]


def test_router_wires_components_and_reports_wiring() -> None:
    bus = EventBus()
    rec = Recorder()

    wiring = EngineRouter(bus=bus).register([NullRenderer(), rec])
    assert wiring.components() == ("Recorder",)

    bus.publish(_progress("hello", 1))
    assert rec.labels == ["hello"]


def test_router_rejects_double_wiring() -> None:
    bus = EventBus()
    rec = Recorder()
    router = EngineRouter(bus=bus)
    handler = rec._on_progress

    class Twice:
        def subscriptions(self):
            return [("sort.progress", handler), ("sort.progress", handler)]

    with pytest.raises(RuntimeError):
        router.register([Twice()])


def test_router_requires_a_sequence() -> None:
    with pytest.raises(TypeError):
        EngineRouter(bus=EventBus()).register([BadComponent()])


def test_run_state_guards_steps_outside_a_run() -> None:
    state = RunState()
    with pytest.raises(RuntimeError):
        state.next_step()

    state.begin("r1")
    assert state.next_step() == 1
    with pytest.raises(RuntimeError):
        state.begin("r2")

    state.end()
    state.begin("r2")
    assert state.next_step() == 1
    assert state.next_sequence() == 1


def test_unsubscribe_unknown_subscription_is_reported() -> None:
    bus = EventBus()
    sub = bus.subscribe(event_type="sort.progress", handler=lambda e: None)

    assert bus.unsubscribe(sub) is True
    assert bus.unsubscribe(sub) is False
    assert bus.handlers_for("sort.progress") == ()


def test_handlers_added_during_publish_see_only_later_events() -> None:
    bus = EventBus()
    late: list[str] = []

    def late_handler(e) -> None:
        late.append(e.label)

    def subscribe_late(e) -> None:
        if e.label == "a":
            bus.subscribe(event_type="sort.progress", handler=late_handler)

    bus.subscribe(event_type="sort.progress", handler=subscribe_late)
    bus.publish(_progress("a", 1))
    bus.publish(_progress("b", 2))
    assert late == ["b"]


def test_same_component_cannot_be_attached_twice_until_unregistered() -> None:
    bus = EventBus()
    rec = Recorder()
    router = EngineRouter(bus=bus)

    wiring = router.register([rec])
    with pytest.raises(RuntimeError):
        router.register([rec])

    router.unregister(wiring)
    bus.publish(_progress("dropped", 1))
    assert rec.labels == []

    router.register([rec])
    bus.publish(_progress("kept", 2))
    assert rec.labels == ["kept"]
