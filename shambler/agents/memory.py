"""Per-agent habituation memory.

Each agent keeps two independent ledgers keyed by stimulus or emitter id:

Light memory
    How curious the agent still is about a particular light. Every time the
    agent is tempted by a light it rolls against ``return_chance``; chasing a
    light or giving up on it both make the next roll less likely to succeed.
    The entry gate (``should_investigate_light``) and the outcome
    (``mark_light_investigation_outcome``) decay curiosity independently, so
    seeing a light from afar over and over habituates the agent differently
    than walking all the way to it.

Noise memory
    Binary suppression: after reacting to a noise from an emitter, the agent
    ignores that emitter until the cooldown runs out.

Ledgers hold ids, not stimulus objects. An entry may name a stimulus that no
longer exists; it simply never matches again and is pruned once stale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shambler.constants import MemoryConstants as Memory
from shambler.types import SimTime, StimulusId

if TYPE_CHECKING:
    from shambler.agents.agent import Agent
    from shambler.config import SimulationConfig
    from shambler.util.rng import RNGStream

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LightMemoryEntry:
    """Curiosity about one light.

    Attributes:
        cooldown_until: Before this time only a low-probability "peek" can
            draw the agent back.
        return_chance: Probability of pursuing the light when no cooldown is
            running.
        last_checked: Last time the agent considered this light.
    """

    cooldown_until: float = 0.0
    return_chance: float = Memory.DEFAULT_RETURN_CHANCE
    last_checked: float = 0.0


@dataclass(slots=True)
class NoiseMemoryEntry:
    """Suppression window for one noise emitter."""

    cooldown_until: float = 0.0
    last_heard: float = 0.0


@dataclass(slots=True)
class AgentMemory:
    """The two habituation ledgers of one agent."""

    lights: dict[StimulusId, LightMemoryEntry] = field(default_factory=dict)
    noises: dict[str, NoiseMemoryEntry] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.lights and not self.noises

    def clear(self) -> None:
        self.lights.clear()
        self.noises.clear()


def _clamp_chance(value: float, floor: float) -> float:
    return min(Memory.MAX_RETURN_CHANCE, max(value, floor, Memory.MIN_RETURN_CHANCE))


# =============================================================================
# LIGHT MEMORY
# =============================================================================


def should_investigate_light(
    memory: AgentMemory,
    stimulus_id: StimulusId | None,
    now: SimTime,
    rng: RNGStream,
    config: SimulationConfig,
) -> bool:
    """Decide whether the agent follows a light it just noticed.

    Outside a cooldown the agent rolls against ``return_chance``: success
    sets a long cooldown and shrinks the chance by 40%, failure sets a short
    cooldown and shrinks it gently. Inside a cooldown only a "peek" at half
    the chance (capped at 0.4) succeeds; a failed peek touches nothing but
    ``last_checked``.

    A light without an id cannot be remembered and is always followed.
    """
    if not stimulus_id:
        return True

    entry = memory.lights.get(stimulus_id)
    if entry is None:
        entry = LightMemoryEntry(return_chance=config.default_return_chance)
        memory.lights[stimulus_id] = entry
    entry.last_checked = now

    if now < entry.cooldown_until:
        peek_chance = min(
            entry.return_chance * Memory.PEEK_CHANCE_FACTOR, Memory.PEEK_CHANCE_CAP
        )
        if not rng.chance(peek_chance):
            return False
        entry.cooldown_until = now + Memory.PEEK_COOLDOWN_SECONDS
        entry.return_chance = _clamp_chance(
            entry.return_chance * Memory.PEEK_CHANCE_DECAY, Memory.PEEK_CHANCE_FLOOR
        )
        return True

    chance = entry.return_chance
    if rng.chance(chance):
        entry.cooldown_until = now + rng.between(Memory.PURSUE_COOLDOWN_SECONDS)
        entry.return_chance = _clamp_chance(
            chance * Memory.PURSUE_CHANCE_FACTOR, Memory.PURSUE_CHANCE_FLOOR
        )
        return True

    entry.cooldown_until = now + rng.between(Memory.IGNORE_COOLDOWN_SECONDS)
    entry.return_chance = _clamp_chance(
        chance * Memory.IGNORE_CHANCE_FACTOR, Memory.IGNORE_CHANCE_FLOOR
    )
    return False


def mark_light_investigation_outcome(
    agent: Agent, reached_target: bool, now: SimTime, config: SimulationConfig
) -> None:
    """Record how the agent's current light investigation ended.

    Reaching the light habituates harder (x0.4, 15 s) than giving up on it
    (x0.55, 10 s). No-op unless the agent has an active stimulus with a
    light memory entry.
    """
    stimulus_id = agent.active_stimulus_id
    if not stimulus_id:
        return
    entry = agent.memory.lights.get(stimulus_id)
    if entry is None:
        return

    entry.last_checked = now
    if reached_target:
        entry.cooldown_until = now + config.reached_light_cooldown
        factor = Memory.REACHED_CHANCE_FACTOR
    else:
        entry.cooldown_until = now + config.gave_up_light_cooldown
        factor = Memory.GAVE_UP_CHANCE_FACTOR
    entry.return_chance = _clamp_chance(
        entry.return_chance * factor, Memory.OUTCOME_CHANCE_FLOOR
    )
    logger.debug(
        f"Agent {agent.id} {'reached' if reached_target else 'gave up on'} "
        f"{stimulus_id}; return chance now {entry.return_chance:.2f}"
    )


def prune_light_memory(memory: AgentMemory, now: SimTime, stale_after: float) -> int:
    """Forget lights not considered for ``stale_after`` seconds."""
    stale = [
        key
        for key, entry in memory.lights.items()
        if now - entry.last_checked > stale_after
    ]
    for key in stale:
        del memory.lights[key]
    return len(stale)


# =============================================================================
# NOISE MEMORY
# =============================================================================


def is_noise_suppressed(memory: AgentMemory, key: str, now: SimTime) -> bool:
    """True while a recall cooldown for ``key`` is running."""
    entry = memory.noises.get(key)
    return entry is not None and now < entry.cooldown_until


def remember_noise(
    memory: AgentMemory, key: str, now: SimTime, cooldown: float
) -> NoiseMemoryEntry:
    """Start (or restart) the recall cooldown for a noise emitter."""
    entry = NoiseMemoryEntry(cooldown_until=now + cooldown, last_heard=now)
    memory.noises[key] = entry
    return entry


def prune_noise_memory(memory: AgentMemory, now: SimTime, stale_after: float) -> int:
    """Forget emitters not heard for ``stale_after`` seconds."""
    stale = [
        key
        for key, entry in memory.noises.items()
        if now - entry.last_heard > stale_after
    ]
    for key in stale:
        del memory.noises[key]
    return len(stale)
