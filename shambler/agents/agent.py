"""The zombie agent record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shambler.constants import BehaviorConstants as Behavior
from shambler.types import AgentId, StimulusId, StimulusKind, WorldPos

from .memory import AgentMemory


class AgentState(Enum):
    """Decision states, from least to most engaged."""

    IDLE = "idle"
    WANDERING = "wandering"
    INVESTIGATING = "investigating"
    CHASING = "chasing"


class BehaviorClass(Enum):
    """Aggressive agents hunt; docile agents are inert test fixtures."""

    AGGRESSIVE = "aggressive"
    DOCILE = "docile"


@dataclass(frozen=True, slots=True)
class MovementProfile:
    """Speeds and ranges for one behavior class."""

    wander_speed: float
    investigate_speed: float
    chase_speed: float
    detect_range: float
    attack_radius: float
    damage: float


AGGRESSIVE_PROFILE = MovementProfile(
    wander_speed=Behavior.WANDER_SPEED,
    investigate_speed=Behavior.INVESTIGATE_SPEED,
    chase_speed=Behavior.CHASE_SPEED,
    detect_range=Behavior.DETECT_RANGE,
    attack_radius=Behavior.ATTACK_RADIUS,
    damage=Behavior.DAMAGE_PER_SECOND,
)

DOCILE_PROFILE = MovementProfile(
    wander_speed=0.0,
    investigate_speed=0.0,
    chase_speed=0.0,
    detect_range=0.0,
    attack_radius=0.0,
    damage=0.0,
)

DOCILE_REASON = "Docile testing dummy"


class Agent:
    """A zombie driven by the decision state machine.

    Position is owned here and written back each tick after collision
    resolution. ``target`` (investigation point) and ``wander_target`` are
    never both set: entering a state clears the other one.

    Attributes:
        decision_timer: Cooldown before the idle/wander choice is revisited.
        investigate_timer: Time left in the current investigation (or the
            linger at a reached light).
        lingering: The agent reached a light and is idling beside it.
        current_stimulus: What the agent is reacting to right now.
        last_stimulus_type: Kind of the most recently accepted stimulus.
        active_stimulus_id: Stimulus under investigation, used to record the
            investigation outcome in light memory.
        reason: Free-text diagnostic shown in debug panels.
        debug_target: Short label for what ``target`` points at.
    """

    def __init__(
        self,
        agent_id: AgentId,
        position: WorldPos,
        behavior: BehaviorClass = BehaviorClass.AGGRESSIVE,
        profile: MovementProfile | None = None,
        decision_timer: float = 0.0,
    ) -> None:
        self.id = agent_id
        self.position: WorldPos = position
        self.behavior = behavior
        if profile is None:
            profile = DOCILE_PROFILE if self.is_docile else AGGRESSIVE_PROFILE
        self.wander_speed = profile.wander_speed
        self.investigate_speed = profile.investigate_speed
        self.chase_speed = profile.chase_speed
        self.detect_range = profile.detect_range
        self.attack_radius = profile.attack_radius
        self.damage = profile.damage

        self.state = AgentState.IDLE
        self.decision_timer = 0.0 if self.is_docile else decision_timer
        self.investigate_timer = 0.0
        self.lingering = False
        self.target: WorldPos | None = None
        self.wander_target: WorldPos | None = None

        self.current_stimulus: StimulusKind | None = None
        self.last_stimulus_type: StimulusKind | None = None
        self.active_stimulus_id: StimulusId | None = None
        self.reason = DOCILE_REASON if self.is_docile else "Standing by"
        self.debug_target = "None"

        self.memory = AgentMemory()

    def __repr__(self) -> str:
        x, y = self.position
        return (
            f"Agent(id={self.id}, state={self.state.value}, "
            f"behavior={self.behavior.value}, pos=({x:.2f}, {y:.2f}))"
        )

    @property
    def is_docile(self) -> bool:
        return self.behavior is BehaviorClass.DOCILE

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]
