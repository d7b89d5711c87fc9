"""
Stimulus propagation: creation, decay and the noise ring sweep.

Each tick ``advance_stimuli`` runs four passes in a fixed order:

1. Decay every stimulus. Strength falls linearly by ``fade_rate`` and the
   stimulus is dropped once its ttl runs out or its strength is spent.
   ``fade_rate`` is fixed at creation so both reach zero together.
2. Count down player-placed lights and drop expired ones.
3. Grow every surviving noise ring towards its visual radius.
4. Sweep each ring over the agents. An agent is resolved against a noise
   exactly once, at the moment the ring's leading edge passes it
   (``prev_radius < distance <= current_radius``, inclusive of the origin
   on the first growth). Resolution either suppresses the noise (the agent
   remembers the emitter) or sends the agent to investigate it.

The sweep is the only way noise reaches an agent. Perception never scores
noises, so a single noise cannot trigger repeated reactions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shambler.agents.agent import AgentState
from shambler.agents.memory import is_noise_suppressed, remember_noise
from shambler.agents.state_machine import NoiseHeard, dispatch
from shambler.constants import StimulusConstants as Stimuli
from shambler.events import LightExpiredEvent, LightPlacedEvent, NoiseCreatedEvent
from shambler.geometry import distance, lerp
from shambler.types import DeltaTime, EmitterId, WorldPos

from .registry import LightSource, LightStimulus, NoiseStimulus

if TYPE_CHECKING:
    from shambler.agents.agent import Agent
    from shambler.world import World

logger = logging.getLogger(__name__)


def _fade_rate(strength: float, ttl: float) -> float:
    return strength / max(ttl, Stimuli.MIN_FADE_TTL)


def _validate(strength: float, radius: float, ttl: float) -> None:
    if strength < 0:
        msg = f"Stimulus strength must be non-negative, got {strength}"
        raise ValueError(msg)
    if radius < 0:
        msg = f"Stimulus radius must be non-negative, got {radius}"
        raise ValueError(msg)
    if ttl < 0:
        msg = f"Stimulus ttl must be non-negative, got {ttl}"
        raise ValueError(msg)


# =============================================================================
# CREATION
# =============================================================================


def create_noise(
    world: World,
    position: WorldPos,
    strength: float,
    radius: float,
    ttl: float = Stimuli.DEFAULT_NOISE_TTL,
    *,
    speed: float | None = None,
    visual_radius: float | None = None,
    emitter_id: EmitterId | None = None,
) -> NoiseStimulus:
    """Emit a noise at ``position`` and register it.

    The ring reaches ``visual_radius`` (default: ``radius``) after
    ``ttl / speed`` seconds, where ``speed`` defaults to the configured
    ripple speed multiplier.
    """
    _validate(strength, radius, ttl)
    if speed is None:
        speed = world.config.noise_ripple_speed
    noise = NoiseStimulus(
        id=world.registry.next_id("noise"),
        position=position,
        strength=strength,
        radius=radius,
        ttl=ttl,
        fade_rate=_fade_rate(strength, ttl),
        visual_radius=radius if visual_radius is None else visual_radius,
        ring_ttl=ttl / max(speed, Stimuli.MIN_RIPPLE_SPEED),
        emitter_id=emitter_id,
    )
    world.registry.add_stimulus(noise)
    logger.debug(
        f"Noise {noise.id} at ({position[0]:.1f}, {position[1]:.1f}) "
        f"strength={strength:.1f} radius={radius:.1f} emitter={emitter_id}"
    )
    world.events.publish(NoiseCreatedEvent(noise))
    return noise


def create_light_stimulus(
    world: World,
    position: WorldPos,
    strength: float,
    radius: float,
    ttl: float,
    *,
    emitter_id: EmitterId | None = None,
) -> LightStimulus:
    """Register a decaying light-kind stimulus (a flare, a muzzle flash)."""
    _validate(strength, radius, ttl)
    light = LightStimulus(
        id=world.registry.next_id("light"),
        position=position,
        strength=strength,
        radius=radius,
        ttl=ttl,
        fade_rate=_fade_rate(strength, ttl),
        emitter_id=emitter_id,
    )
    world.registry.add_stimulus(light)
    logger.debug(f"Light stimulus {light.id} strength={strength:.1f} ttl={ttl:.1f}")
    return light


def add_light_source(
    world: World,
    position: WorldPos,
    strength: float,
    radius: float,
    *,
    is_world_light: bool = False,
) -> LightSource:
    """Register a static light source. Static lights never expire."""
    _validate(strength, radius, 0.0)
    source = LightSource(
        id=world.registry.next_static_light_id(),
        position=position,
        strength=strength,
        radius=radius,
        is_world_light=is_world_light,
    )
    world.registry.add_light_source(source)
    world.events.publish(LightPlacedEvent(source))
    return source


def place_light(
    world: World,
    position: WorldPos,
    *,
    intensity: float = Stimuli.PLACED_LIGHT_INTENSITY,
    radius: float = Stimuli.PLACED_LIGHT_RADIUS,
    ttl: float = Stimuli.PLACED_LIGHT_TTL,
) -> LightSource:
    """Register a dynamic light that burns out after ``ttl`` seconds."""
    strength = intensity * Stimuli.LIGHT_STRENGTH_PER_INTENSITY
    _validate(strength, radius, ttl)
    source = LightSource(
        id=world.registry.next_id("dynamic"),
        position=position,
        strength=strength,
        radius=radius,
        dynamic=True,
        ttl=ttl,
        initial_ttl=ttl,
    )
    world.registry.add_light_source(source)
    logger.debug(f"Placed light {source.id} for {ttl:.1f}s")
    world.events.publish(LightPlacedEvent(source))
    return source


def clear_transient_stimuli(world: World) -> None:
    """Remove every stimulus and dynamic light. Fixtures stay."""
    removed = world.registry.clear_transient()
    for source in removed:
        world.events.publish(LightExpiredEvent(source.id, source.position))
    logger.debug(f"Cleared transient stimuli ({len(removed)} dynamic lights)")


# =============================================================================
# PER-TICK ADVANCE
# =============================================================================


def advance_stimuli(world: World, delta_time: DeltaTime) -> None:
    """Decay, expire, grow and sweep. See the module docstring."""
    registry = world.registry
    min_strength = world.config.min_stimulus_strength

    survivors = []
    for stimulus in registry.stimuli:
        stimulus.ttl -= delta_time
        faded = stimulus.strength - stimulus.fade_rate * delta_time
        stimulus.strength = max(0.0, faded)
        if stimulus.ttl <= 0 or stimulus.strength <= min_strength:
            continue
        survivors.append(stimulus)
    registry.stimuli = survivors

    _expire_dynamic_lights(world, delta_time)

    for noise in registry.noises():
        if _grow_ring(noise, delta_time):
            _sweep_ring(world, noise)


def _expire_dynamic_lights(world: World, delta_time: DeltaTime) -> None:
    for source in world.registry.dynamic_lights():
        assert source.ttl is not None
        source.ttl -= delta_time
        if source.ttl <= 0:
            world.registry.remove_light_source(source.id)
            logger.debug(f"Light {source.id} burned out")
            world.events.publish(LightExpiredEvent(source.id, source.position))


def _grow_ring(noise: NoiseStimulus, delta_time: DeltaTime) -> bool:
    """Advance the ring. Returns True if its radius grew."""
    noise.ring_life = min(noise.ring_ttl, noise.ring_life + delta_time)
    ratio = 1.0 if noise.ring_ttl <= 0 else noise.ring_life / noise.ring_ttl
    noise.prev_radius = noise.current_radius
    noise.current_radius = lerp(0.0, noise.visual_radius, ratio)
    return noise.current_radius > noise.prev_radius


def _sweep_ring(world: World, noise: NoiseStimulus) -> None:
    if world.is_game_over:
        return
    for agent in world.agents:
        if agent.is_docile or agent.id in noise.hit:
            continue
        dist = distance(agent.position, noise.position)
        # The first growth also covers agents standing on the origin.
        crossed = noise.prev_radius < dist or (
            noise.prev_radius == 0.0 and dist == 0.0
        )
        if crossed and dist <= noise.current_radius:
            resolve_noise_hit(world, agent, noise)


def resolve_noise_hit(world: World, agent: Agent, noise: NoiseStimulus) -> None:
    """Resolve one agent against one noise ring. Marks the agent as hit."""
    key = noise.memory_key
    noise.hit.add(agent.id)
    if is_noise_suppressed(agent.memory, key, world.time):
        return
    if agent.state is not AgentState.CHASING:
        dispatch(world, agent, NoiseHeard(noise))
    remember_noise(agent.memory, key, world.time, world.config.noise_recall_cooldown)
