"""World geometry: bounds, obstacles and line-of-sight.

The decision core never owns scene geometry. It talks to a ``WorldGeometry``
collaborator through a handful of predicates. Two implementations ship here:

BoxObstacleGeometry
    Open ground with axis-aligned box obstacles (walls, crates). Obstacles
    are stored as an ``(N, 4)`` numpy array so occupancy and ray tests run
    over every obstacle at once.

TileGeometry
    A walkable/transparent tile grid. Line-of-sight follows a Bresenham ray
    over the transparency grid, the same way the roguelike map does it.

Both share ``WorldBounds`` for clamping and random point generation.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

import numpy as np
import tcod.los

from shambler.config import DEFAULT_WORLD_SIZE, WORLD_EDGE_MARGIN, WORLD_SPAWN_MARGIN
from shambler.types import Heading, TilePos, WorldPos, WorldRect

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shambler.util.rng import RNG

# Obstacles are inflated by this much for line-of-sight rays.
_LOS_OBSTACLE_PADDING = 0.15
# A ray hit this close to the target does not block (target hugging a wall).
_LOS_TARGET_TOLERANCE = 0.25
# Half the side of an agent's square footprint.
AGENT_HALF_EXTENT = 0.5
# Random placement retries before falling back to the origin.
_OPEN_POSITION_ATTEMPTS = 24


# =============================================================================
# VECTOR HELPERS
# =============================================================================


def distance(a: WorldPos, b: WorldPos) -> float:
    """Euclidean distance between two ground-plane points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation from ``start`` to ``end``."""
    return start + (end - start) * t


def direction_to(origin: WorldPos, target: WorldPos) -> tuple[Heading, float]:
    """Return the unit heading from ``origin`` to ``target`` and the distance.

    A zero-length vector has no direction; it falls back to the +x axis so
    callers never divide by zero.
    """
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    length = math.hypot(dx, dy)
    if length == 0.0:
        return (1.0, 0.0), 0.0
    return (dx / length, dy / length), length


# =============================================================================
# COLLABORATOR PROTOCOL
# =============================================================================


class WorldGeometry(Protocol):
    """Everything the simulation needs to know about the static world."""

    def clamp(self, position: WorldPos) -> WorldPos: ...

    def random_point(self, rng: RNG) -> WorldPos: ...

    def random_point_near(
        self, origin: WorldPos, radius: float, rng: RNG
    ) -> WorldPos: ...

    def has_line_of_sight(self, start: WorldPos, end: WorldPos) -> bool: ...

    def is_obstructed(self, position: WorldPos, radius: float = ...) -> bool: ...

    def find_open_position(
        self, preferred: WorldPos, radius: float, rng: RNG
    ) -> WorldPos: ...


class WorldBounds:
    """Square world centered on the origin.

    Attributes:
        half_extent: Distance from the origin to each edge.
        edge_margin: Clamped positions stay this far inside the edge.
        spawn_margin: Random world points stay this far inside the edge.
    """

    def __init__(
        self,
        size: float = DEFAULT_WORLD_SIZE,
        *,
        edge_margin: float = WORLD_EDGE_MARGIN,
        spawn_margin: float = WORLD_SPAWN_MARGIN,
    ) -> None:
        if size <= 2 * max(edge_margin, spawn_margin):
            msg = "world size must exceed twice the edge margins"
            raise ValueError(msg)
        self.half_extent = size / 2
        self.edge_margin = edge_margin
        self.spawn_margin = spawn_margin

    def clamp(self, position: WorldPos) -> WorldPos:
        limit = self.half_extent - self.edge_margin
        return (
            max(-limit, min(limit, position[0])),
            max(-limit, min(limit, position[1])),
        )

    def contains(self, position: WorldPos) -> bool:
        limit = self.half_extent - self.edge_margin
        return abs(position[0]) <= limit and abs(position[1]) <= limit

    def random_point(self, rng: RNG) -> WorldPos:
        limit = self.half_extent - self.spawn_margin
        return (rng.uniform(-limit, limit), rng.uniform(-limit, limit))

    def random_point_near(self, origin: WorldPos, radius: float, rng: RNG) -> WorldPos:
        angle = rng.random() * math.tau
        reach = rng.random() * radius
        return self.clamp(
            (origin[0] + math.cos(angle) * reach, origin[1] + math.sin(angle) * reach)
        )


# =============================================================================
# BOX OBSTACLES
# =============================================================================


class BoxObstacleGeometry:
    """Open ground with axis-aligned box obstacles.

    Args:
        bounds: World extent used for clamping and random points.
        obstacles: Obstacle footprints as ``(min_x, min_y, max_x, max_y)``.
            May be empty.
    """

    def __init__(
        self,
        bounds: WorldBounds | None = None,
        obstacles: Sequence[WorldRect] = (),
    ) -> None:
        self.bounds = bounds or WorldBounds()
        self._boxes = np.zeros((0, 4), dtype=np.float64)
        for rect in obstacles:
            self.add_obstacle(rect)

    @property
    def obstacles(self) -> np.ndarray:
        """Read-only view of the obstacle array."""
        view = self._boxes.view()
        view.flags.writeable = False
        return view

    def add_obstacle(self, rect: WorldRect) -> None:
        min_x, min_y, max_x, max_y = rect
        if min_x > max_x or min_y > max_y:
            msg = f"Obstacle rect has inverted extents: {rect}"
            raise ValueError(msg)
        self._boxes = np.vstack([self._boxes, np.asarray(rect, dtype=np.float64)])

    def clamp(self, position: WorldPos) -> WorldPos:
        return self.bounds.clamp(position)

    def random_point(self, rng: RNG) -> WorldPos:
        return self.bounds.random_point(rng)

    def random_point_near(self, origin: WorldPos, radius: float, rng: RNG) -> WorldPos:
        return self.bounds.random_point_near(origin, radius, rng)

    def is_obstructed(
        self, position: WorldPos, radius: float = AGENT_HALF_EXTENT
    ) -> bool:
        """True if ``position`` lies inside any obstacle grown by ``radius``."""
        if len(self._boxes) == 0:
            return False
        x, y = position
        boxes = self._boxes
        inside = (
            (x >= boxes[:, 0] - radius)
            & (x <= boxes[:, 2] + radius)
            & (y >= boxes[:, 1] - radius)
            & (y <= boxes[:, 3] + radius)
        )
        return bool(inside.any())

    def has_line_of_sight(self, start: WorldPos, end: WorldPos) -> bool:
        """Slab test of the ray ``start -> end`` against every padded obstacle."""
        heading, length = direction_to(start, end)
        if length <= 0.001 or len(self._boxes) == 0:
            return True

        lo = self._boxes[:, :2] - _LOS_OBSTACLE_PADDING
        hi = self._boxes[:, 2:] + _LOS_OBSTACLE_PADDING
        count = len(self._boxes)
        t_near = np.zeros(count)
        t_far = np.full(count, np.inf)

        for axis in (0, 1):
            origin = start[axis]
            step = heading[axis]
            if abs(step) < 1e-12:
                # Parallel to this slab: blocked only if the origin is inside it.
                outside = (origin < lo[:, axis]) | (origin > hi[:, axis])
                t_near = np.where(outside, np.inf, t_near)
                continue
            t1 = (lo[:, axis] - origin) / step
            t2 = (hi[:, axis] - origin) / step
            t_near = np.maximum(t_near, np.minimum(t1, t2))
            t_far = np.minimum(t_far, np.maximum(t1, t2))

        blocked = (t_near <= t_far) & (t_near < length - _LOS_TARGET_TOLERANCE)
        return not bool(blocked.any())

    def find_open_position(
        self, preferred: WorldPos, radius: float, rng: RNG
    ) -> WorldPos:
        return _find_open_position(self, preferred, radius, rng)


# =============================================================================
# TILE GRID
# =============================================================================


class TileGeometry:
    """Tile-grid world backed by numpy walkable/transparent arrays.

    Args:
        transparent: Boolean array of shape ``(width, height)``; ``True``
            where sight passes.
        walkable: Boolean array of the same shape; ``True`` where agents may
            stand. Defaults to ``transparent``.
        tile_size: World units per tile.
        bounds: World extent. Defaults to the grid's own extent.

    Tile ``(0, 0)`` covers the world's minimum corner.
    """

    def __init__(
        self,
        transparent: np.ndarray,
        walkable: np.ndarray | None = None,
        *,
        tile_size: float = 1.0,
        bounds: WorldBounds | None = None,
    ) -> None:
        if transparent.ndim != 2:
            msg = "transparent must be a 2D array"
            raise ValueError(msg)
        if walkable is not None and walkable.shape != transparent.shape:
            msg = "walkable and transparent must have the same shape"
            raise ValueError(msg)
        self.transparent = transparent.astype(bool, copy=False)
        self.walkable = (
            self.transparent if walkable is None else walkable.astype(bool, copy=False)
        )
        self.tile_size = tile_size
        width, height = self.transparent.shape
        self.bounds = bounds or WorldBounds(max(width, height) * tile_size)
        self._origin = (-self.bounds.half_extent, -self.bounds.half_extent)

    def to_tile(self, position: WorldPos) -> TilePos:
        width, height = self.transparent.shape
        tx = math.floor((position[0] - self._origin[0]) / self.tile_size)
        ty = math.floor((position[1] - self._origin[1]) / self.tile_size)
        return (max(0, min(width - 1, tx)), max(0, min(height - 1, ty)))

    def clamp(self, position: WorldPos) -> WorldPos:
        return self.bounds.clamp(position)

    def random_point(self, rng: RNG) -> WorldPos:
        return self.bounds.random_point(rng)

    def random_point_near(self, origin: WorldPos, radius: float, rng: RNG) -> WorldPos:
        return self.bounds.random_point_near(origin, radius, rng)

    def is_obstructed(
        self, position: WorldPos, radius: float = AGENT_HALF_EXTENT
    ) -> bool:
        """True if any tile under the footprint of half-size ``radius`` is blocked."""
        min_x, min_y = self.to_tile((position[0] - radius, position[1] - radius))
        max_x, max_y = self.to_tile((position[0] + radius, position[1] + radius))
        return not bool(self.walkable[min_x : max_x + 1, min_y : max_y + 1].all())

    def has_line_of_sight(self, start: WorldPos, end: WorldPos) -> bool:
        """Check the Bresenham line between the two tiles for transparency."""
        start_tile = self.to_tile(start)
        end_tile = self.to_tile(end)
        line = tcod.los.bresenham(start_tile, end_tile)
        # Endpoints are where the viewer and target stand; only what lies
        # between them can block.
        inner = line[1:-1]
        if len(inner) == 0:
            return True
        return bool(self.transparent[inner[:, 0], inner[:, 1]].all())

    def find_open_position(
        self, preferred: WorldPos, radius: float, rng: RNG
    ) -> WorldPos:
        return _find_open_position(self, preferred, radius, rng)


def _find_open_position(
    geometry: WorldGeometry, preferred: WorldPos, radius: float, rng: RNG
) -> WorldPos:
    """Find a free spot near ``preferred``, falling back to the world origin.

    If nothing nearby or at the origin is free, the clamped preferred
    position is returned unchanged.
    """
    candidate = geometry.clamp(preferred)
    if not geometry.is_obstructed(candidate, radius):
        return candidate

    for _ in range(_OPEN_POSITION_ATTEMPTS):
        angle = rng.random() * math.tau
        reach = radius + 0.6 + rng.random() * 4
        nearby = geometry.clamp(
            (
                preferred[0] + math.cos(angle) * reach,
                preferred[1] + math.sin(angle) * reach,
            )
        )
        if not geometry.is_obstructed(nearby, radius):
            return nearby

    if not geometry.is_obstructed((0.0, 0.0), radius):
        return (0.0, 0.0)
    return candidate
