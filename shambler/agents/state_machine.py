"""
Decision state machine for aggressive agents.

States: idle -> wandering -> investigating -> chasing. Every tick runs the
same fixed-priority pipeline for each agent:

1. Vision. A visible player forces ``chasing``. A chasing agent that loses
   sight starts ``investigating`` the player's last known position.
2. Stimulus. Perception offers its best light (or, in principle, noise).
   The agent takes it if it is not locked onto a visible player, the
   candidate is a genuinely new target, and light memory agrees.
3. State-local behavior: movement, investigation timers, lingering at a
   reached light, wander retargeting, idle cooldown.
4. Movement, world clamp, collision rollback and contact damage.

The order is load-bearing: vision pre-empts stimuli, and a chase only
partially resists noise. Do not reorder.

State changes are expressed as an explicit transition function:
``transition(world, agent, event)`` maps a ``DecisionEvent`` to a
``Transition`` describing the new state and its side effects, and
``apply_transition`` performs them. Ring-swept noises from the propagation
engine enter through the same ``dispatch`` entry point.

Docile agents bypass all of this.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, TypeAlias

from shambler.constants import BehaviorConstants as Behavior
from shambler.events import AgentStateChangedEvent
from shambler.geometry import distance, direction_to
from shambler.stimuli.registry import LightStimulus, NoiseStimulus
from shambler.types import (
    DeltaTime,
    FloatRange,
    Heading,
    StimulusId,
    StimulusKind,
    WorldPos,
)

from .agent import DOCILE_REASON, Agent, AgentState
from .memory import (
    mark_light_investigation_outcome,
    prune_light_memory,
    prune_noise_memory,
    should_investigate_light,
)
from .perception import find_stimulus_for_agent

if TYPE_CHECKING:
    from shambler.player import Player
    from shambler.stimuli.registry import Stimulus
    from shambler.world import World

logger = logging.getLogger(__name__)


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True, slots=True)
class PlayerSighted:
    """The player is in range with a clear line of sight."""

    distance: float


@dataclass(frozen=True, slots=True)
class SightLost:
    """A chasing agent can no longer see the player."""

    last_known: WorldPos
    player_present: bool


@dataclass(frozen=True, slots=True)
class StimulusAccepted:
    """Perception offered a stimulus and the agent decided to follow it."""

    stimulus: Stimulus


@dataclass(frozen=True, slots=True)
class NoiseHeard:
    """A noise ring swept over the agent."""

    stimulus: NoiseStimulus


@dataclass(frozen=True, slots=True)
class PlayerMissing:
    """A chasing agent has no player to pursue."""


@dataclass(frozen=True, slots=True)
class InvestigationExpired:
    """The investigation lost its target or ran out of time."""


@dataclass(frozen=True, slots=True)
class InvestigationComplete:
    """The agent arrived and there is nothing to linger over."""


@dataclass(frozen=True, slots=True)
class DecisionTimerExpired:
    """An idle agent's cooldown ran out."""


DecisionEvent: TypeAlias = (
    PlayerSighted
    | SightLost
    | StimulusAccepted
    | NoiseHeard
    | PlayerMissing
    | InvestigationExpired
    | InvestigationComplete
    | DecisionTimerExpired
)


class LightOutcome(Enum):
    """How a light investigation ended, for light memory."""

    REACHED = auto()
    GAVE_UP = auto()


@dataclass(frozen=True, slots=True)
class Transition:
    """Result of the transition function.

    Attributes:
        state: State to enter.
        reason: Diagnostic text; empty keeps the agent's current reason.
        target: Investigation or wander point for the new state.
        timer: Investigation linger (investigating) or decision cooldown
            (idle, wandering). ``None`` draws the state's default.
        stimulus_id: Stimulus being investigated, for outcome bookkeeping.
        stimulus_kind: What the agent reacts to in the new state.
        debug_target: Label for ``target`` in debug panels.
        outcome: Light outcome to record before leaving the current state.
        enter: ``False`` refreshes diagnostics without re-entering the
            state (continuing a chase keeps its timers).
    """

    state: AgentState
    reason: str = ""
    target: WorldPos | None = None
    timer: float | None = None
    stimulus_id: StimulusId | None = None
    stimulus_kind: StimulusKind | None = None
    debug_target: str | None = None
    outcome: LightOutcome | None = None
    enter: bool = True


def _draw(world: World, bounds: FloatRange) -> float:
    return world.rng.get("agents.timers").between(bounds)


def _investigating_light(agent: Agent) -> bool:
    return agent.current_stimulus is StimulusKind.LIGHT and bool(
        agent.active_stimulus_id
    )


def transition(world: World, agent: Agent, event: DecisionEvent) -> Transition | None:
    """Map ``event`` to the transition ``agent`` should take, if any."""
    config = world.config
    match event:
        case PlayerSighted(distance=dist):
            if agent.state is AgentState.CHASING:
                return Transition(
                    AgentState.CHASING,
                    reason=f"Chasing player ({dist:.1f}m)",
                    stimulus_kind=StimulusKind.VISION,
                    debug_target="Player",
                    enter=False,
                )
            return Transition(
                AgentState.CHASING,
                reason=f"Player detected ({dist:.1f}m)",
                stimulus_kind=StimulusKind.VISION,
                debug_target="Player",
            )

        case SightLost(last_known=last_known, player_present=present):
            return Transition(
                AgentState.INVESTIGATING,
                reason="Lost sight of player" if present else "Player not present",
                target=last_known,
                timer=_draw(world, config.lost_sight_linger),
                stimulus_kind=StimulusKind.VISION,
                debug_target=(
                    "Last known player position" if present else "Own position"
                ),
            )

        case StimulusAccepted(stimulus=stimulus):
            if isinstance(stimulus, LightStimulus):
                return Transition(
                    AgentState.INVESTIGATING,
                    reason="Drawn to warm light",
                    target=stimulus.position,
                    timer=_draw(world, config.light_linger),
                    stimulus_id=stimulus.id,
                    stimulus_kind=StimulusKind.LIGHT,
                    debug_target="Light source",
                )
            return Transition(
                AgentState.INVESTIGATING,
                reason="Responding to noise pulse",
                target=stimulus.position,
                timer=_draw(world, config.noise_linger),
                stimulus_id=stimulus.id,
                stimulus_kind=StimulusKind.NOISE,
                debug_target="Noise origin",
            )

        case NoiseHeard(stimulus=stimulus):
            if agent.state is AgentState.CHASING:
                return None
            return Transition(
                AgentState.INVESTIGATING,
                reason="Heard expanding noise ring",
                target=stimulus.position,
                timer=_draw(world, config.noise_linger),
                stimulus_id=stimulus.id,
                stimulus_kind=StimulusKind.NOISE,
                debug_target="Noise origin",
            )

        case PlayerMissing():
            return Transition(
                AgentState.IDLE,
                reason="No player to pursue",
                timer=_draw(world, Behavior.NO_PLAYER_IDLE),
            )

        case InvestigationExpired():
            return Transition(
                AgentState.IDLE,
                reason="Investigation window expired",
                timer=_draw(world, Behavior.INVESTIGATION_EXPIRED_IDLE),
                outcome=LightOutcome.GAVE_UP if _investigating_light(agent) else None,
            )

        case InvestigationComplete():
            return Transition(
                AgentState.IDLE,
                reason="Investigation complete",
                timer=_draw(world, Behavior.INVESTIGATION_COMPLETE_IDLE),
                outcome=LightOutcome.REACHED if _investigating_light(agent) else None,
            )

        case DecisionTimerExpired():
            if agent.state is not AgentState.IDLE:
                return None
            return Transition(
                AgentState.WANDERING,
                reason="Decided to roam",
                timer=_draw(world, Behavior.WANDER_DECISION_TIMER),
            )

    return None


def apply_transition(world: World, agent: Agent, change: Transition) -> None:
    """Perform the side effects of ``change`` on ``agent``.

    Entering a state resets its timers and clears whichever of ``target`` /
    ``wander_target`` the new state does not use.
    """
    if change.outcome is not None:
        reached = change.outcome is LightOutcome.REACHED
        record_light_outcome(world, agent, reached=reached)

    if not change.enter:
        if change.reason:
            agent.reason = change.reason
        if change.stimulus_kind is not None:
            agent.current_stimulus = change.stimulus_kind
            agent.last_stimulus_type = change.stimulus_kind
        if change.debug_target is not None:
            agent.debug_target = change.debug_target
        return

    previous = agent.state
    agent.state = change.state
    agent.reason = change.reason or agent.reason or "Standing by"
    agent.active_stimulus_id = change.stimulus_id
    agent.lingering = False

    match change.state:
        case AgentState.CHASING:
            agent.target = None
            agent.wander_target = None
            agent.investigate_timer = 0.0
            agent.decision_timer = _draw(world, Behavior.CHASE_DECISION_TIMER)
            agent.current_stimulus = StimulusKind.VISION
            agent.debug_target = "Player"

        case AgentState.INVESTIGATING:
            agent.target = change.target
            agent.wander_target = None
            agent.investigate_timer = (
                change.timer
                if change.timer is not None
                else _draw(world, Behavior.INVESTIGATE_DEFAULT_TIMER)
            )
            agent.decision_timer = _draw(world, Behavior.INVESTIGATE_DECISION_TIMER)
            if change.stimulus_kind is not None:
                agent.current_stimulus = change.stimulus_kind
            elif agent.current_stimulus is None:
                agent.current_stimulus = StimulusKind.UNKNOWN
            if change.debug_target is not None:
                agent.debug_target = change.debug_target
            elif agent.debug_target in ("", "None"):
                agent.debug_target = "Point of interest"

        case AgentState.WANDERING:
            agent.wander_target = change.target or world.geometry.random_point(
                world.rng.get("agents.wander")
            )
            agent.target = None
            agent.investigate_timer = 0.0
            agent.decision_timer = (
                change.timer
                if change.timer is not None
                else _draw(world, Behavior.WANDER_DECISION_TIMER)
            )
            agent.current_stimulus = None
            agent.debug_target = "Wander point"

        case AgentState.IDLE:
            agent.target = None
            agent.wander_target = None
            agent.investigate_timer = 0.0
            agent.decision_timer = (
                change.timer
                if change.timer is not None
                else _draw(world, Behavior.IDLE_DECISION_TIMER)
            )
            agent.current_stimulus = None
            agent.debug_target = "None"

    if change.stimulus_kind is not None and change.state is not AgentState.IDLE:
        agent.last_stimulus_type = change.stimulus_kind

    logger.debug(
        f"Agent {agent.id}: {previous.value} -> {agent.state.value} ({agent.reason})"
    )
    world.events.publish(
        AgentStateChangedEvent(
            agent_id=agent.id,
            previous=previous,
            current=agent.state,
            reason=agent.reason,
        )
    )


def dispatch(world: World, agent: Agent, event: DecisionEvent) -> bool:
    """Run ``event`` through the transition function. Returns True if applied."""
    change = transition(world, agent, event)
    if change is None:
        return False
    apply_transition(world, agent, change)
    return True


def record_light_outcome(world: World, agent: Agent, *, reached: bool) -> None:
    """Mark the active light investigation in memory and release it."""
    if not agent.active_stimulus_id:
        return
    mark_light_investigation_outcome(agent, reached, world.time, world.config)
    agent.active_stimulus_id = None


# =============================================================================
# PER-TICK UPDATE
# =============================================================================


def park_docile(agent: Agent) -> None:
    """Hold a docile agent in idle with its diagnostics cleared."""
    agent.state = AgentState.IDLE
    agent.reason = DOCILE_REASON
    agent.current_stimulus = None
    agent.last_stimulus_type = None
    agent.debug_target = "None"
    agent.target = None
    agent.wander_target = None


def update_agent(world: World, agent: Agent, delta_time: DeltaTime) -> None:
    """Advance one agent by one tick."""
    if agent.is_docile:
        park_docile(agent)
        return

    config = world.config
    previous_position = agent.position
    prune_light_memory(agent.memory, world.time, config.light_memory_stale)
    prune_noise_memory(agent.memory, world.time, config.noise_memory_stale)

    player = world.player
    distance_to_player = (
        distance(agent.position, player.position) if player is not None else math.inf
    )
    # A chase holds on past detect_range, out to the loss range.
    has_line_of_sight = (
        player is not None
        and distance_to_player <= agent.detect_range * config.chase_loss_range_factor
        and world.geometry.has_line_of_sight(agent.position, player.position)
    )
    player_in_sight = (
        has_line_of_sight
        and not world.is_game_over
        and distance_to_player < agent.detect_range
    )

    # 1. Vision
    if player_in_sight:
        dispatch(world, agent, PlayerSighted(distance_to_player))
    elif agent.state is AgentState.CHASING and (
        world.is_game_over or not has_line_of_sight
    ):
        last_known = player.position if player is not None else agent.position
        dispatch(world, agent, SightLost(last_known, player is not None))

    # 2. Stimulus
    if not world.is_game_over:
        candidate = find_stimulus_for_agent(
            agent, world.registry, world.rng.get("perception.flicker"), config
        )
        if candidate is not None:
            _consider_stimulus(
                world, agent, candidate, player, distance_to_player, has_line_of_sight
            )

    # 3. State-local behavior
    agent.decision_timer -= delta_time
    heading, speed = _run_state(world, agent, delta_time, player)

    # 4. Movement, bounds, collisions, contact damage
    if heading is not None and speed > 0:
        agent.position = (
            agent.position[0] + heading[0] * speed * delta_time,
            agent.position[1] + heading[1] * speed * delta_time,
        )
    agent.position = world.geometry.clamp(agent.position)
    if world.geometry.is_obstructed(agent.position):
        agent.position = previous_position

    if player is not None and not world.is_game_over:
        contact_distance = distance(agent.position, player.position)
        if contact_distance < agent.attack_radius:
            world.apply_contact_damage(agent, agent.damage * delta_time)
            agent.reason = f"Feeding ({contact_distance:.2f}m)"


def _noise_overrides_chase(
    world: World, agent: Agent, player: Player | None, distance_to_player: float
) -> bool:
    """Roll whether a fresh noise may interrupt a chase.

    Only rolled when feeding is not imminent. The chance is a tuning knob,
    not a behavioral guarantee.
    """
    if player is None:
        return True
    config = world.config
    feeding_range = agent.attack_radius * config.chase_noise_override_range_factor
    if distance_to_player <= feeding_range:
        return False
    return world.rng.get("agents.chase_override").chance(
        config.chase_noise_override_chance
    )


def _consider_stimulus(
    world: World,
    agent: Agent,
    candidate: Stimulus,
    player: Player | None,
    distance_to_player: float,
    view_unbroken: bool,
) -> None:
    # A chase inside the loss range still counts as an unbroken view.
    can_react = (
        agent.state is not AgentState.CHASING
        or not view_unbroken
        or (
            isinstance(candidate, NoiseStimulus)
            and _noise_overrides_chase(world, agent, player, distance_to_player)
        )
    )
    if not can_react:
        return

    is_new_target = (
        agent.state is not AgentState.INVESTIGATING
        or agent.target is None
        or distance(agent.target, candidate.position) > world.config.retarget_distance
    )
    if not is_new_target:
        return

    if isinstance(candidate, LightStimulus) and not should_investigate_light(
        agent.memory,
        candidate.id,
        world.time,
        world.rng.get("memory.light"),
        world.config,
    ):
        agent.reason = "Ignoring familiar light"
        return

    dispatch(world, agent, StimulusAccepted(candidate))


def _run_state(
    world: World, agent: Agent, delta_time: DeltaTime, player: Player | None
) -> tuple[Heading | None, float]:
    """State-local behavior. Returns the movement heading and speed."""
    match agent.state:
        case AgentState.CHASING:
            if player is None:
                dispatch(world, agent, PlayerMissing())
                return None, 0.0
            heading, length = direction_to(agent.position, player.position)
            if length * length <= Behavior.MIN_MOVE_LENGTH_SQ:
                return None, 0.0
            return heading, agent.chase_speed

        case AgentState.INVESTIGATING:
            return _run_investigation(world, agent, delta_time)

        case AgentState.WANDERING:
            return _run_wander(world, agent)

        case AgentState.IDLE:
            agent.reason = agent.reason or "Idle"
            if agent.decision_timer <= 0:
                dispatch(world, agent, DecisionTimerExpired())
            return None, 0.0

    return None, 0.0


def _run_investigation(
    world: World, agent: Agent, delta_time: DeltaTime
) -> tuple[Heading | None, float]:
    agent.investigate_timer -= delta_time
    if agent.target is None or agent.investigate_timer <= 0:
        dispatch(world, agent, InvestigationExpired())
        return None, 0.0

    if agent.lingering:
        return None, 0.0

    heading, remaining = direction_to(agent.position, agent.target)
    if remaining < world.config.arrival_distance:
        investigating_light = agent.current_stimulus is StimulusKind.LIGHT
        if investigating_light and not world.is_game_over:
            record_light_outcome(world, agent, reached=True)
            # Stay beside the light for a moment, once.
            agent.investigate_timer = _draw(world, world.config.linger_at_light)
            agent.lingering = True
            agent.reason = "Lingering at light source"
            agent.last_stimulus_type = None
        else:
            dispatch(world, agent, InvestigationComplete())
        return None, 0.0

    match agent.last_stimulus_type:
        case StimulusKind.LIGHT:
            agent.reason = f"Heading to light ({remaining:.1f}m)"
        case StimulusKind.VISION:
            agent.reason = f"Searching last known position ({remaining:.1f}m)"
        case _:
            agent.reason = f"Tracing noise ({remaining:.1f}m)"
    return heading, agent.investigate_speed


def _run_wander(world: World, agent: Agent) -> tuple[Heading | None, float]:
    config = world.config
    if (
        agent.wander_target is None
        or distance(agent.position, agent.wander_target)
        < config.wander_arrival_distance
        or agent.decision_timer <= 0
    ):
        agent.wander_target = world.geometry.random_point_near(
            agent.position, config.wander_radius, world.rng.get("agents.wander")
        )
        agent.decision_timer = _draw(world, Behavior.WANDER_RETARGET_TIMER)
        agent.reason = "Picked new wander point"

    heading, remaining = direction_to(agent.position, agent.wander_target)
    if remaining * remaining <= Behavior.MIN_MOVE_LENGTH_SQ:
        return None, 0.0
    agent.reason = f"Wandering ({remaining:.1f}m remaining)"
    return heading, agent.wander_speed
