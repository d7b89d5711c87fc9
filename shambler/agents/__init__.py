"""
Zombie agents and their sensory decision making.

Package structure:
    agent          - Agent record, AgentState, BehaviorClass, movement profiles.
    memory         - Light habituation and noise recall ledgers.
    perception     - Light arbitration: the best candidate for one agent.
    state_machine  - Transition function and the per-tick update pipeline.
"""

from .agent import (
    AGGRESSIVE_PROFILE,
    DOCILE_PROFILE,
    Agent,
    AgentState,
    BehaviorClass,
    MovementProfile,
)
from .memory import AgentMemory, LightMemoryEntry, NoiseMemoryEntry
from .perception import find_stimulus_for_agent
from .state_machine import Transition, dispatch, transition, update_agent

__all__ = [
    "AGGRESSIVE_PROFILE",
    "DOCILE_PROFILE",
    "Agent",
    "AgentMemory",
    "AgentState",
    "BehaviorClass",
    "LightMemoryEntry",
    "MovementProfile",
    "NoiseMemoryEntry",
    "Transition",
    "dispatch",
    "find_stimulus_for_agent",
    "transition",
    "update_agent",
]
