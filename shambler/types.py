from __future__ import annotations

from enum import Enum
from typing import NewType, TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

# World coordinates are continuous. The simulation runs on the ground plane,
# so a position is (x, y) where y maps to the renderer's depth axis.
WorldCoord: TypeAlias = float
WorldPos: TypeAlias = tuple[WorldCoord, WorldCoord]  # Example: (3.5, -2.25)

# Continuous direction vector, not necessarily normalized.
Heading: TypeAlias = tuple[float, float]  # Example: (1.0, 0.3)

# Axis-aligned rectangle on the ground plane: (min_x, min_y, max_x, max_y).
WorldRect: TypeAlias = tuple[float, float, float, float]

# Integer tile position for grid-backed geometry.
TilePos: TypeAlias = tuple[int, int]

# =============================================================================
# TIME-RELATED TYPES
# =============================================================================

# Simulation time elapsed between two frames, in seconds. Clamped upstream
# by the frame loop so a hitch never produces a huge step.
DeltaTime = NewType("DeltaTime", float)

# Absolute simulation time in seconds since the world was created. Memory
# cooldowns and staleness windows are expressed against this clock.
SimTime = NewType("SimTime", float)

# =============================================================================
# SIMULATION IDENTIFIERS
# =============================================================================

# Unique identifier for an agent. Assigned sequentially by the World.
AgentId = NewType("AgentId", int)

# Unique identifier for a stimulus or light source ("noise-3", "static-0").
StimulusId: TypeAlias = str

# Groups repeated emissions from one source, e.g. footsteps in a grid cell.
EmitterId: TypeAlias = str

# Random seed for deterministic runs. Can be an int or a descriptive string.
RandomSeed: TypeAlias = int | str | None

# =============================================================================
# UTILITY TYPES
# =============================================================================

# Generic min/max float range (e.g. linger durations, cooldown windows)
FloatRange: TypeAlias = tuple[float, float]


class StimulusKind(Enum):
    """What an agent is currently reacting to."""

    VISION = "vision"
    LIGHT = "light"
    NOISE = "noise"
    UNKNOWN = "unknown"
