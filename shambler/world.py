"""
The simulation context.

A ``World`` owns everything one simulation needs: the stimulus registry, the
agents in spawn order, the optional player, the geometry collaborator, the
tunables, the random streams, the event bus and the live variables. Nothing
is global, so several worlds can run side by side (e.g. in tests).

The host drives it with ``advance(delta_time)``, normally through
``shambler.loop.FrameLoop`` which clamps the step.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace

from shambler.agents.agent import Agent, BehaviorClass
from shambler.agents.state_machine import park_docile, update_agent
from shambler.config import RANDOM_SEED, SimulationConfig
from shambler.constants import BehaviorConstants as Behavior
from shambler.events import EventBus, PlayerDamagedEvent, PlayerDownedEvent
from shambler.geometry import BoxObstacleGeometry, WorldGeometry, distance
from shambler.player import Player
from shambler.stimuli.propagation import advance_stimuli, clear_transient_stimuli
from shambler.stimuli.registry import StimulusRegistry
from shambler.stimuli.sources import emit_footstep
from shambler.types import AgentId, DeltaTime, RandomSeed, SimTime, WorldPos
from shambler.util.live_vars import LiveVariableRegistry, TimingMetric
from shambler.util.rng import RNGProvider

logger = logging.getLogger(__name__)

# Radius within which remove_nearest_agent finds its victim.
REMOVE_PICK_RADIUS = 2.5

STIMULUS_PASS_METRIC = "time.sim.stimuli_ms"
DECISION_PASS_METRIC = "time.sim.decisions_ms"

_METRICS = [
    TimingMetric(STIMULUS_PASS_METRIC, "Stimulus decay and ring sweep (ms)"),
    TimingMetric(DECISION_PASS_METRIC, "Agent decision updates (ms)"),
]


class World:
    """One running simulation.

    Args:
        config: Tunables. Defaults to ``SimulationConfig()``.
        geometry: Bounds and obstacles. Defaults to an empty
            ``BoxObstacleGeometry``.
        player: The agents' target. ``None`` runs the world without one.
        seed: Master seed for every random stream. ``None`` is
            non-deterministic.

    Attributes:
        time: Simulation seconds since creation or the last round reset.
            Memory cooldowns are measured against this clock.
        is_game_over: Set once the player goes down. Stimulus handling and
            contact damage stop until ``reset_round``.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        geometry: WorldGeometry | None = None,
        player: Player | None = None,
        *,
        seed: RandomSeed = RANDOM_SEED,
    ) -> None:
        self.config = config or SimulationConfig()
        self.geometry: WorldGeometry = geometry or BoxObstacleGeometry()
        self.player = player
        self.registry = StimulusRegistry()
        self.agents: list[Agent] = []
        self.time = SimTime(0.0)
        self.is_game_over = False

        self.rng = RNGProvider(seed)
        self.events = EventBus()
        self.live_vars = LiveVariableRegistry()
        self._agent_ids = itertools.count(1)
        self._register_live_variables()

    def __repr__(self) -> str:
        return (
            f"World(time={self.time:.2f}, agents={len(self.agents)}, "
            f"stimuli={len(self.registry)}, game_over={self.is_game_over})"
        )

    def _register_live_variables(self) -> None:
        self.live_vars.register(
            "behavior.chase_noise_override_chance",
            lambda: self.config.chase_noise_override_chance,
            self._set_chase_noise_override_chance,
            description="Chance a fresh noise interrupts a chase",
            value_range=(0.0, 1.0),
        )
        self.live_vars.register(
            "memory.noise_recall_cooldown",
            lambda: self.config.noise_recall_cooldown,
            lambda value: self._update_config(noise_recall_cooldown=float(value)),
            description="Seconds an agent ignores an emitter it already heard",
            value_range=(0.0, 60.0),
        )
        self.live_vars.register(
            "world.agent_count",
            lambda: len(self.agents),
            description="Agents currently in the world",
        )
        self.live_vars.register(
            "world.stimulus_count",
            lambda: len(self.registry),
            description="Live noise and light stimuli",
        )
        self.live_vars.register_metrics(_METRICS)

    def _set_chase_noise_override_chance(self, value: float) -> None:
        self._update_config(chase_noise_override_chance=float(value))

    def _update_config(self, **changes: float) -> None:
        self.config = replace(self.config, **changes)

    # -------------------------------------------------------------------------
    # Agents
    # -------------------------------------------------------------------------

    def spawn_agent(
        self,
        position: WorldPos | None = None,
        behavior: BehaviorClass = BehaviorClass.AGGRESSIVE,
    ) -> Agent:
        """Create an agent at (or near) ``position`` and add it to the world.

        The spawn point is moved to the nearest open spot if an obstacle
        covers it. ``None`` picks a random point in the world.
        """
        spawn_rng = self.rng.get("agents.spawn")
        if position is None:
            position = self.geometry.random_point(spawn_rng)
        position = self.geometry.find_open_position(
            position, Behavior.SPAWN_CLEARANCE, spawn_rng
        )
        decision_timer = (
            0.0
            if behavior is BehaviorClass.DOCILE
            else self.rng.get("agents.timers").between(Behavior.IDLE_DECISION_TIMER)
        )
        agent = Agent(
            AgentId(next(self._agent_ids)),
            position,
            behavior,
            decision_timer=decision_timer,
        )
        if agent.is_docile:
            park_docile(agent)
        self.agents.append(agent)
        logger.debug(f"Spawned {agent!r}")
        return agent

    def remove_agent(self, agent: Agent) -> bool:
        try:
            self.agents.remove(agent)
        except ValueError:
            return False
        logger.debug(f"Removed {agent!r}")
        return True

    def remove_all_agents(self) -> int:
        count = len(self.agents)
        self.agents.clear()
        return count

    def remove_nearest_agent(
        self, point: WorldPos, radius: float = REMOVE_PICK_RADIUS
    ) -> Agent | None:
        """Remove the agent closest to ``point``, if one is within ``radius``."""
        nearest: Agent | None = None
        nearest_distance = radius
        for agent in self.agents:
            dist = distance(agent.position, point)
            if dist <= nearest_distance:
                nearest = agent
                nearest_distance = dist
        if nearest is not None:
            self.remove_agent(nearest)
        return nearest

    def get_agent(self, agent_id: AgentId) -> Agent | None:
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None

    def clear_all_memories(self) -> None:
        for agent in self.agents:
            agent.memory.clear()

    # -------------------------------------------------------------------------
    # Player
    # -------------------------------------------------------------------------

    def set_player(self, player: Player | None) -> None:
        self.player = player

    def move_player(
        self,
        position: WorldPos,
        delta_time: DeltaTime,
        *,
        sprinting: bool = False,
    ) -> None:
        """Move the player and emit footstep noise while it keeps walking."""
        if self.player is None:
            return
        target = self.geometry.clamp(position)
        moving = target != self.player.position
        self.player.position = target
        if self.player.update_footsteps(delta_time, moving=moving, sprinting=sprinting):
            emit_footstep(self, target, sprinting=sprinting)

    def apply_contact_damage(self, agent: Agent, amount: float) -> float:
        """Route contact damage from ``agent`` to the player.

        Ends the round when the player goes down. Returns the damage taken.
        """
        if self.player is None or self.is_game_over:
            return 0.0
        applied = self.player.on_damage(amount)
        if applied <= 0:
            return 0.0
        self.events.publish(PlayerDamagedEvent(agent.id, applied, self.player.health))
        if self.player.is_down:
            self.is_game_over = True
            logger.info(f"Player downed by agent {agent.id} at t={self.time:.1f}s")
            self.events.publish(PlayerDownedEvent(agent.id))
        return applied

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def advance(self, delta_time: DeltaTime) -> None:
        """Run one tick: stimuli first, then every agent in spawn order."""
        if delta_time < 0:
            msg = f"delta_time must be non-negative, got {delta_time}"
            raise ValueError(msg)
        self.time = SimTime(self.time + delta_time)

        with self.live_vars.record_time(STIMULUS_PASS_METRIC):
            advance_stimuli(self, delta_time)

        with self.live_vars.record_time(DECISION_PASS_METRIC):
            for agent in list(self.agents):
                update_agent(self, agent, delta_time)

    def reset_round(self, seed: RandomSeed = None) -> None:
        """Start over: no agents, no transient stimuli, a healthy player.

        Passing ``seed`` also reseeds every random stream.
        """
        if seed is not None:
            self.rng.reset(seed)
        self.remove_all_agents()
        clear_transient_stimuli(self)
        if self.player is not None:
            self.player.reset()
        self.time = SimTime(0.0)
        self.is_game_over = False
        logger.info("Round reset")
