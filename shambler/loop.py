"""Frame timing and the caller-side driver loop."""

from __future__ import annotations

import time

from shambler.constants import BehaviorConstants as Behavior
from shambler.types import DeltaTime
from shambler.world import World


class Clock:
    """Measure the wall-clock time between frames."""

    def __init__(self) -> None:
        self.last_time = time.perf_counter()

    def tick(self) -> DeltaTime:
        current_time = time.perf_counter()
        delta_time = DeltaTime(max(0.0, current_time - self.last_time))
        self.last_time = current_time
        return delta_time


class FrameLoop:
    """Advance a ``World`` once per rendered frame.

    A long frame (window drag, breakpoint) is clamped to ``max_step`` so agents
    never teleport past a noise ring or through a wall.
    """

    def __init__(
        self,
        world: World,
        *,
        clock: Clock | None = None,
        max_step: float = Behavior.MAX_FRAME_STEP,
    ) -> None:
        if max_step <= 0:
            msg = "max_step must be positive"
            raise ValueError(msg)
        self.world = world
        self.clock = clock or Clock()
        self.max_step = max_step
        self.frame_count = 0

    def clamp_delta(self, delta_time: float) -> DeltaTime:
        return DeltaTime(min(max(delta_time, 0.0), self.max_step))

    def step(self, delta_time: float) -> DeltaTime:
        """Advance the world by ``delta_time`` (clamped). Returns the step used."""
        step = self.clamp_delta(delta_time)
        self.world.advance(step)
        self.frame_count += 1
        return step

    def tick(self) -> DeltaTime:
        """Measure the real frame time with the clock and advance by it."""
        return self.step(self.clock.tick())
