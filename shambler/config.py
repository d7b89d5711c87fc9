"""
Configuration for a simulation run.

Centralizes the tunable numbers used by the stimulus, memory and behavior
systems. Defaults come from the constants classes; a world can override any
field by passing its own ``SimulationConfig``:

    config = dataclasses.replace(SimulationConfig(), noise_recall_cooldown=4.0)
    world = World(config=config)
"""

from __future__ import annotations

from dataclasses import dataclass

from shambler.constants import BehaviorConstants as Behavior
from shambler.constants import MemoryConstants as Memory
from shambler.constants import StimulusConstants as Stimuli
from shambler.types import FloatRange, RandomSeed

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = "zombie1"
RANDOM_SEED: RandomSeed = None

# Square world, centered on the origin, side length in world units.
DEFAULT_WORLD_SIZE = 44.0

# Agents and the player are kept this far inside the world edge.
WORLD_EDGE_MARGIN = 1.0

# Random world points (fresh wander targets) are drawn this far inside.
WORLD_SPAWN_MARGIN = 2.0


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Tunables for one World. Every field has a documented default."""

    # --- Stimuli ---
    noise_ripple_speed: float = Stimuli.NOISE_RIPPLE_SPEED_MULTIPLIER
    min_stimulus_strength: float = Stimuli.MIN_STRENGTH
    light_weight: float = Stimuli.LIGHT_WEIGHT
    stimulus_falloff: float = Stimuli.STIMULUS_FALLOFF
    light_source_falloff: float = Stimuli.LIGHT_SOURCE_FALLOFF
    flicker_range: FloatRange = (Stimuli.FLICKER_MIN, Stimuli.FLICKER_MAX)

    # --- Memory ---
    light_memory_stale: float = Memory.LIGHT_MEMORY_STALE_SECONDS
    noise_memory_stale: float = Memory.NOISE_MEMORY_STALE_SECONDS
    noise_recall_cooldown: float = Memory.NOISE_RECALL_COOLDOWN_SECONDS
    default_return_chance: float = Memory.DEFAULT_RETURN_CHANCE
    reached_light_cooldown: float = Memory.REACHED_COOLDOWN_SECONDS
    gave_up_light_cooldown: float = Memory.GAVE_UP_COOLDOWN_SECONDS

    # --- Behavior ---
    chase_loss_range_factor: float = Behavior.CHASE_LOSS_RANGE_FACTOR
    retarget_distance: float = Behavior.RETARGET_DISTANCE
    chase_noise_override_chance: float = Behavior.CHASE_NOISE_OVERRIDE_CHANCE
    chase_noise_override_range_factor: float = (
        Behavior.CHASE_NOISE_OVERRIDE_RANGE_FACTOR
    )
    arrival_distance: float = Behavior.ARRIVAL_DISTANCE
    wander_arrival_distance: float = Behavior.WANDER_ARRIVAL_DISTANCE
    wander_radius: float = Behavior.WANDER_RADIUS
    light_linger: FloatRange = Behavior.LIGHT_LINGER
    noise_linger: FloatRange = Behavior.NOISE_LINGER
    lost_sight_linger: FloatRange = Behavior.LOST_SIGHT_LINGER
    linger_at_light: FloatRange = Behavior.LIGHT_LINGER_AT_SOURCE

    def __post_init__(self) -> None:
        if not 0.0 <= self.chase_noise_override_chance <= 1.0:
            msg = "chase_noise_override_chance must be in [0.0, 1.0]"
            raise ValueError(msg)
        if self.noise_ripple_speed <= 0:
            msg = "noise_ripple_speed must be positive"
            raise ValueError(msg)
        low, high = Memory.MIN_RETURN_CHANCE, Memory.MAX_RETURN_CHANCE
        if not low <= self.default_return_chance <= high:
            msg = f"default_return_chance must be in [{low}, {high}]"
            raise ValueError(msg)
