"""Constants for per-agent habituation memory.

All windows are in simulation seconds. Keeping the light and noise numbers
side by side avoids the two ledgers drifting apart.
"""


class MemoryConstants:
    """Cooldowns, return-chance factors and staleness windows."""

    # --- Staleness (pruned once per agent per tick) ---
    LIGHT_MEMORY_STALE_SECONDS = 30.0
    NOISE_MEMORY_STALE_SECONDS = 30.0

    # --- Noise recall ---
    NOISE_RECALL_COOLDOWN_SECONDS = 10.0

    # --- Light entry gate ---
    DEFAULT_RETURN_CHANCE = 0.75
    # First sighting outside any cooldown, pursued.
    PURSUE_COOLDOWN_SECONDS = (12.0, 16.0)
    PURSUE_CHANCE_FACTOR = 0.6
    PURSUE_CHANCE_FLOOR = 0.2
    # First sighting outside any cooldown, ignored.
    IGNORE_COOLDOWN_SECONDS = (5.5, 10.0)
    IGNORE_CHANCE_FACTOR = 0.85
    IGNORE_CHANCE_FLOOR = 0.25
    # "Peek" while a cooldown is still running.
    PEEK_CHANCE_FACTOR = 0.5
    PEEK_CHANCE_CAP = 0.4
    PEEK_COOLDOWN_SECONDS = 10.0
    PEEK_CHANCE_DECAY = 0.7
    PEEK_CHANCE_FLOOR = 0.2

    # --- Investigation outcome ---
    REACHED_COOLDOWN_SECONDS = 15.0
    GAVE_UP_COOLDOWN_SECONDS = 10.0
    REACHED_CHANCE_FACTOR = 0.4
    GAVE_UP_CHANCE_FACTOR = 0.55
    OUTCOME_CHANCE_FLOOR = 0.15

    # Bounds return_chance is kept within.
    MIN_RETURN_CHANCE = 0.15
    MAX_RETURN_CHANCE = 0.9
