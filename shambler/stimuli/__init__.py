"""
Noise and light stimuli.

Package structure:
    registry     - Stimulus and LightSource records, StimulusRegistry.
    propagation  - Creation, per-tick decay, light expiry and the ring sweep.
    sources      - Presets: footsteps, click noise, placed lights, fixtures.

Only the data records are re-exported here. ``propagation`` drives agents
through the decision state machine, so import it by module path.
"""

from .registry import (
    LightSource,
    LightStimulus,
    NoiseStimulus,
    Stimulus,
    StimulusRegistry,
)

__all__ = [
    "LightSource",
    "LightStimulus",
    "NoiseStimulus",
    "Stimulus",
    "StimulusRegistry",
]
