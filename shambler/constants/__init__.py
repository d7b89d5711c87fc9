"""Constants packages for implementation details.

These are the defaults behind ``SimulationConfig`` in config.py. A world can
override any of them; the names here document what each number means.
"""

from .behavior import BehaviorConstants
from .memory import MemoryConstants
from .stimuli import StimulusConstants

__all__ = [
    "BehaviorConstants",
    "MemoryConstants",
    "StimulusConstants",
]
