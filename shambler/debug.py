"""Read-only diagnostics for debug panels and the sandbox status bar."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shambler.types import AgentId, WorldPos

if TYPE_CHECKING:
    from shambler.agents.agent import Agent
    from shambler.world import World


@dataclass(frozen=True, slots=True)
class AgentDebugSnapshot:
    """What a debug panel shows for one agent."""

    agent_id: AgentId
    state: str
    reason: str
    current_stimulus: str
    debug_target: str
    position: WorldPos
    target: WorldPos | None
    docile: bool

    def as_lines(self) -> list[str]:
        return [
            f"Zombie {self.agent_id}",
            f"State: {self.state}",
            f"Stimulus: {self.current_stimulus}",
            f"Target: {self.debug_target}",
            f"Reason: {self.reason}",
        ]


def snapshot_agent(agent: Agent) -> AgentDebugSnapshot:
    return AgentDebugSnapshot(
        agent_id=agent.id,
        state=agent.state.value,
        reason=agent.reason,
        current_stimulus=(
            agent.current_stimulus.value if agent.current_stimulus else "none"
        ),
        debug_target=agent.debug_target,
        position=agent.position,
        target=agent.target or agent.wander_target,
        docile=agent.is_docile,
    )


def snapshot_agents(world: World) -> list[AgentDebugSnapshot]:
    """Snapshots in spawn order."""
    return [snapshot_agent(agent) for agent in world.agents]


def status_line(world: World) -> str:
    """One-line summary of the sandbox, e.g. for a toolbar label."""
    player_status = "present" if world.player is not None else "none"
    docile = sum(1 for agent in world.agents if agent.is_docile)
    noises = sum(1 for _ in world.registry.noises())
    return (
        f"Player: {player_status} | Zombies: {len(world.agents) - docile} | "
        f"Docile: {docile} | Noise: {noises} | "
        f"Lights: {len(world.registry.dynamic_lights())} | Time: {world.time:.1f}s"
    )
