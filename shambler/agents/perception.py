"""Perception arbitration: which light, if any, catches an agent's eye.

Each tick every candidate light within range is scored and the single best
one is returned. Noise is deliberately absent from this scan: noises reach
agents only through the ring sweep in ``shambler.stimuli.propagation``, which
guarantees at most one reaction per ring pass.

Score for a candidate at ``distance``::

    strength * light_weight * flicker / (1 + distance * falloff)

``flicker`` is a fresh random draw in [0.9, 1.15] per candidate per tick,
and falloff is 0.35 for light stimuli and 0.32 for standing light sources.
Nothing persists between ticks, so a stronger or closer light can pre-empt
an ongoing investigation (subject to the memory gate).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shambler.geometry import distance
from shambler.stimuli.registry import LightStimulus

if TYPE_CHECKING:
    from shambler.agents.agent import Agent
    from shambler.config import SimulationConfig
    from shambler.stimuli.registry import StimulusRegistry
    from shambler.util.rng import RNGStream


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """A light that passed the range check, with its score this tick."""

    stimulus: LightStimulus
    distance: float
    score: float


def score_candidates(
    agent: Agent,
    registry: StimulusRegistry,
    rng: RNGStream,
    config: SimulationConfig,
) -> list[ScoredCandidate]:
    """Score every eligible light for ``agent``, in registry order.

    Eligible: light-kind stimuli and light sources that are not world
    fixtures, with the agent strictly inside their radius or on its edge.
    """
    scored: list[ScoredCandidate] = []

    for light in registry.lights():
        dist = distance(agent.position, light.position)
        if dist > light.radius:
            continue
        flicker = rng.between(config.flicker_range)
        score = (
            light.strength
            * config.light_weight
            * flicker
            / (1 + dist * config.stimulus_falloff)
        )
        scored.append(ScoredCandidate(light, dist, score))

    for source in registry.light_sources:
        if source.is_world_light:
            continue
        dist = distance(agent.position, source.position)
        if dist > source.radius:
            continue
        flicker = rng.between(config.flicker_range)
        score = (
            source.strength
            * config.light_weight
            * flicker
            / (1 + dist * config.light_source_falloff)
        )
        # Perception sees a standing light as a light stimulus carrying the
        # source's id, so memory can track it.
        view = LightStimulus(
            id=source.id,
            position=source.position,
            strength=source.strength,
            radius=source.radius,
        )
        scored.append(ScoredCandidate(view, dist, score))

    return scored


def find_stimulus_for_agent(
    agent: Agent,
    registry: StimulusRegistry,
    rng: RNGStream,
    config: SimulationConfig,
) -> LightStimulus | None:
    """Return the highest-scoring light for ``agent``, or ``None``."""
    best: LightStimulus | None = None
    best_score = 0.0
    for candidate in score_candidates(agent, registry, rng, config):
        if candidate.score > best_score:
            best_score = candidate.score
            best = candidate.stimulus
    return best
