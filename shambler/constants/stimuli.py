"""Constants for stimulus creation, decay and arbitration."""


class StimulusConstants:
    """Constants for noise rings, lights and perception scoring."""

    # --- Decay ---
    # A stimulus is dropped once its strength falls to this level.
    MIN_STRENGTH = 0.1
    # Lower bound on ttl when deriving fade_rate = strength / ttl.
    MIN_FADE_TTL = 0.1

    # --- Noise ring ---
    # The detection ring reaches full radius this many times faster than the
    # stimulus itself decays, so agents hear it well before it expires.
    NOISE_RIPPLE_SPEED_MULTIPLIER = 8.0
    MIN_RIPPLE_SPEED = 0.001
    DEFAULT_NOISE_TTL = 2.0

    # --- Presets ---
    # Player footsteps share an emitter id per grid cell of this size.
    FOOTSTEP_NOISE_CELL_SIZE = 1.5
    FOOTSTEP_BASE_STRENGTH = 10.0
    FOOTSTEP_BASE_RADIUS = 8.0
    FOOTSTEP_RADIUS_PER_INTENSITY = 2.0
    FOOTSTEP_TTL = 2.4
    SPRINT_FOOTSTEP_INTENSITY = 1.4
    WALK_FOOTSTEP_COOLDOWN = 0.52
    SPRINT_FOOTSTEP_COOLDOWN = 0.32

    CLICK_NOISE_STRENGTH = 18.0
    CLICK_NOISE_RADIUS = 14.0
    CLICK_NOISE_TTL = 6.0
    CLICK_NOISE_VISUAL_RADIUS = 3.0

    PLACED_LIGHT_TTL = 14.0
    PLACED_LIGHT_INTENSITY = 1.8
    PLACED_LIGHT_RADIUS = 12.0
    # Light strength as seen by perception = renderer intensity * this.
    LIGHT_STRENGTH_PER_INTENSITY = 10.0
    # Fixture lights perceive out to this fraction of their render distance.
    FIXTURE_RADIUS_FRACTION = 0.75

    # --- Perception scoring ---
    LIGHT_WEIGHT = 1.6
    STIMULUS_FALLOFF = 0.35
    LIGHT_SOURCE_FALLOFF = 0.32
    FLICKER_MIN = 0.9
    FLICKER_MAX = 1.15
