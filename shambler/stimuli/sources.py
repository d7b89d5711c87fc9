"""Stimulus presets for the things that make noise and light in a level."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shambler.constants import StimulusConstants as Stimuli
from shambler.types import EmitterId, WorldPos

from .propagation import add_light_source, create_noise, place_light

if TYPE_CHECKING:
    from shambler.world import World

    from .registry import LightSource, NoiseStimulus


def footstep_emitter_id(position: WorldPos) -> EmitterId:
    """Footsteps within one grid cell share an emitter.

    Pacing back and forth inside a cell therefore counts as one noise source
    for agents that already heard it.
    """
    cell = Stimuli.FOOTSTEP_NOISE_CELL_SIZE
    return f"player-footsteps:{round(position[0] / cell)}:{round(position[1] / cell)}"


def emit_footstep(
    world: World, position: WorldPos, *, sprinting: bool = False
) -> NoiseStimulus:
    intensity = Stimuli.SPRINT_FOOTSTEP_INTENSITY if sprinting else 1.0
    return create_noise(
        world,
        position,
        Stimuli.FOOTSTEP_BASE_STRENGTH * intensity,
        Stimuli.FOOTSTEP_BASE_RADIUS
        + Stimuli.FOOTSTEP_RADIUS_PER_INTENSITY * intensity,
        Stimuli.FOOTSTEP_TTL,
        emitter_id=footstep_emitter_id(position),
    )


def emit_click_noise(world: World, position: WorldPos) -> NoiseStimulus:
    """A loud one-off noise, e.g. a thrown object landing."""
    return create_noise(
        world,
        position,
        Stimuli.CLICK_NOISE_STRENGTH,
        Stimuli.CLICK_NOISE_RADIUS,
        Stimuli.CLICK_NOISE_TTL,
        visual_radius=Stimuli.CLICK_NOISE_VISUAL_RADIUS,
    )


def place_player_light(world: World, position: WorldPos) -> LightSource:
    return place_light(world, position)


def add_world_fixture(
    world: World, position: WorldPos, intensity: float, light_distance: float
) -> LightSource:
    """Register an ambient level light.

    Fixtures are lit for the renderer only; perception ignores them.
    """
    return add_light_source(
        world,
        position,
        intensity * Stimuli.LIGHT_STRENGTH_PER_INTENSITY,
        light_distance * Stimuli.FIXTURE_RADIUS_FRACTION,
        is_world_light=True,
    )
