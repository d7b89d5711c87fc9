"""Tests for the event bus."""

import logging

import pytest

from shambler.events import (
    EventBus,
    LightExpiredEvent,
    PlayerDownedEvent,
    SimulationEvent,
)
from shambler.types import AgentId


class TestEventBus:
    """Tests for the EventBus class."""

    def test_handler_exception_does_not_crash_event_bus(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failing handler is logged and the remaining handlers still run."""
        bus = EventBus()
        handler_calls: list[str] = []

        def failing_handler(event: SimulationEvent) -> None:
            handler_calls.append("failing")
            raise ValueError("Handler failed!")

        def succeeding_handler(event: SimulationEvent) -> None:
            handler_calls.append("succeeding")

        bus.subscribe(PlayerDownedEvent, failing_handler)
        bus.subscribe(PlayerDownedEvent, succeeding_handler)

        with caplog.at_level(logging.ERROR):
            bus.publish(PlayerDownedEvent(agent_id=AgentId(1)))

        assert handler_calls == ["failing", "succeeding"]
        assert "Error handling event PlayerDownedEvent" in caplog.text
        assert "Traceback" in caplog.text

    def test_handlers_only_receive_their_event_type(self) -> None:
        bus = EventBus()
        received: list[SimulationEvent] = []
        bus.subscribe(LightExpiredEvent, received.append)

        bus.publish(PlayerDownedEvent(agent_id=AgentId(1)))
        expired = LightExpiredEvent(source_id="dynamic-0", position=(1.0, 1.0))
        bus.publish(expired)

        assert received == [expired]

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        received: list[SimulationEvent] = []
        bus.subscribe(PlayerDownedEvent, received.append)
        bus.unsubscribe(PlayerDownedEvent, received.append)
        # Unknown handlers are ignored.
        bus.unsubscribe(PlayerDownedEvent, received.append)

        bus.publish(PlayerDownedEvent(agent_id=AgentId(1)))

        assert received == []

    def test_subscribing_during_dispatch_is_safe(self) -> None:
        bus = EventBus()
        late_calls: list[SimulationEvent] = []

        def subscribe_late(event: SimulationEvent) -> None:
            bus.subscribe(PlayerDownedEvent, late_calls.append)

        bus.subscribe(PlayerDownedEvent, subscribe_late)
        bus.publish(PlayerDownedEvent(agent_id=AgentId(1)))

        assert late_calls == []
