"""The player as seen by the zombies: a position, health and a damage hook.

Input handling and locomotion belong to the host game. It moves the player by
assigning ``position`` and calls ``update_footsteps`` so walking produces
noise. The agents only read ``position`` and call ``on_damage``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from shambler.constants import StimulusConstants as Stimuli
from shambler.types import DeltaTime, WorldPos

logger = logging.getLogger(__name__)

DEFAULT_MAX_HEALTH = 100.0


class Player:
    """Target of every aggressive agent.

    Attributes:
        position: Current ground-plane position, written by the host game.
        health: Remaining health; the player is down at zero.
        footstep_cooldown: Seconds until the next footstep can make noise.
        damage_listener: Optional callback invoked with each applied amount,
            e.g. to refresh a health label.
    """

    def __init__(
        self,
        position: WorldPos = (0.0, 0.0),
        *,
        max_health: float = DEFAULT_MAX_HEALTH,
        damage_listener: Callable[[float], None] | None = None,
    ) -> None:
        if max_health <= 0:
            msg = "max_health must be positive"
            raise ValueError(msg)
        self.position: WorldPos = position
        self.max_health = max_health
        self.health = max_health
        self.footstep_cooldown = 0.0
        self.damage_listener = damage_listener

    @property
    def is_down(self) -> bool:
        return self.health <= 0

    def on_damage(self, amount: float) -> float:
        """Apply damage and return the amount actually taken."""
        if amount <= 0 or self.is_down:
            return 0.0
        applied = min(amount, self.health)
        self.health = max(self.health - amount, 0.0)
        if self.damage_listener is not None:
            self.damage_listener(applied)
        if self.is_down:
            logger.info("Player is down")
        return applied

    def reset(self) -> None:
        self.health = self.max_health
        self.footstep_cooldown = 0.0

    def update_footsteps(
        self, delta_time: DeltaTime, *, moving: bool, sprinting: bool = False
    ) -> bool:
        """Advance the footstep timer.

        Returns ``True`` when a footstep lands this frame and should be turned
        into a noise stimulus (see ``shambler.stimuli.sources.emit_footstep``).
        """
        if not moving:
            self.footstep_cooldown = max(self.footstep_cooldown - delta_time, 0.0)
            return False

        self.footstep_cooldown -= delta_time
        if self.footstep_cooldown > 0:
            return False
        self.footstep_cooldown = (
            Stimuli.SPRINT_FOOTSTEP_COOLDOWN
            if sprinting
            else Stimuli.WALK_FOOTSTEP_COOLDOWN
        )
        return True
