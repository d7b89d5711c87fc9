"""Event bus for notifying collaborators about simulation happenings.

The simulation core has no rendering or UI of its own. Visual-effects,
audio and debug layers subscribe to these events to draw noise rings, fade
lights or update agent panels.

USE FOR:
- Noise rings and light lifecycle (spawn a ripple mesh, fade a helper)
- Agent state changes for debug panels and barks
- Player damage and downed notifications

DO NOT USE FOR:
- Core simulation mechanics (decay, ring sweep, state transitions)
- Anything that needs a return value or acknowledgment

The bus is fire-and-forget: publish an event without expecting return values
or confirmations. All handlers execute immediately (synchronously). Each
World owns its own bus instance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shambler.types import AgentId, StimulusId, WorldPos

if TYPE_CHECKING:
    from shambler.agents.agent import AgentState
    from shambler.stimuli.registry import LightSource, NoiseStimulus

logger = logging.getLogger(__name__)


@dataclass
class SimulationEvent:
    """Base class for all simulation events."""

    pass


@dataclass
class NoiseCreatedEvent(SimulationEvent):
    """A noise stimulus was emitted; its ring starts expanding next tick."""

    stimulus: NoiseStimulus


@dataclass
class LightPlacedEvent(SimulationEvent):
    """A light source entered the registry (fixture or player-placed)."""

    source: LightSource


@dataclass
class LightExpiredEvent(SimulationEvent):
    """A dynamic light ran out of time and left the registry."""

    source_id: StimulusId
    position: WorldPos


@dataclass
class AgentStateChangedEvent(SimulationEvent):
    """An agent entered a new decision state.

    Attributes:
        agent_id: The agent that changed state.
        previous: State before the transition.
        current: State after the transition. May equal ``previous`` when a
            state is re-entered (e.g. a fresh investigation).
        reason: Human-readable explanation shown in debug panels.
    """

    agent_id: AgentId
    previous: AgentState
    current: AgentState
    reason: str


@dataclass
class PlayerDamagedEvent(SimulationEvent):
    """An agent in contact with the player dealt damage this tick."""

    agent_id: AgentId
    amount: float
    remaining_health: float


@dataclass
class PlayerDownedEvent(SimulationEvent):
    """The player's health reached zero; the round is over."""

    agent_id: AgentId


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: SimulationEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        if event_type in self._handlers:
            # Copy the handler list to allow safe subscribe/unsubscribe during dispatch
            for handler in list(self._handlers[event_type]):
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error handling event {event_type.__name__}")
