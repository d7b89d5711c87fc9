from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Any

from shambler.agents.agent import Agent, BehaviorClass
from shambler.config import SimulationConfig
from shambler.events import SimulationEvent
from shambler.geometry import BoxObstacleGeometry
from shambler.player import Player
from shambler.types import DeltaTime, WorldPos, WorldRect
from shambler.world import World

TICK = DeltaTime(0.05)


def make_world(
    *,
    player_at: WorldPos | None = None,
    obstacles: Sequence[WorldRect] = (),
    seed: int | str = "test",
    max_health: float = 100.0,
    **config_overrides: Any,
) -> World:
    """A seeded world on open ground, optionally with a player."""
    config = dataclasses.replace(SimulationConfig(), **config_overrides)
    player = (
        Player(player_at, max_health=max_health) if player_at is not None else None
    )
    return World(
        config=config,
        geometry=BoxObstacleGeometry(obstacles=obstacles),
        player=player,
        seed=seed,
    )


def spawn_at(
    world: World,
    position: WorldPos,
    behavior: BehaviorClass = BehaviorClass.AGGRESSIVE,
    *,
    decision_timer: float | None = None,
) -> Agent:
    agent = world.spawn_agent(position, behavior)
    if decision_timer is not None:
        agent.decision_timer = decision_timer
    return agent


def run_for(world: World, seconds: float, step: DeltaTime = TICK) -> None:
    """Advance ``world`` by ``seconds`` in fixed steps."""
    ticks = round(seconds / step)
    for _ in range(ticks):
        world.advance(step)


class EventRecorder:
    """Collects every event of the given types published on a world's bus."""

    def __init__(self, world: World, *event_types: type[SimulationEvent]) -> None:
        self.events: list[Any] = []
        for event_type in event_types:
            world.events.subscribe(event_type, self.events.append)

    def of_type(self, event_type: type[SimulationEvent]) -> list[Any]:
        return [event for event in self.events if isinstance(event, event_type)]


class ScriptedRNG:
    """Deterministic stand-in for an RNG stream.

    ``chance`` pops answers from ``outcomes`` (or returns ``default``) and
    ``between`` returns the low end of its range.
    """

    def __init__(self, outcomes: Sequence[bool] = (), *, default: bool = False) -> None:
        self.outcomes = list(outcomes)
        self.default = default
        self.chance_calls: list[float] = []

    def chance(self, probability: float) -> bool:
        self.chance_calls.append(probability)
        if self.outcomes:
            return self.outcomes.pop(0)
        return self.default

    def between(self, bounds: tuple[float, float]) -> float:
        return bounds[0]

    def uniform(self, a: float, b: float) -> float:
        return a

    def random(self) -> float:
        return 0.0
