"""Stimulus and light source records, and the registry that owns them.

A stimulus is a decaying event an agent can notice. There are exactly two
kinds, modeled as separate dataclasses so code that handles one kind can
never read the other kind's fields by accident:

NoiseStimulus
    Heard through an expanding detection ring. Carries the ring state and
    the set of agents already resolved against it.

LightStimulus
    Seen as a point of curiosity. Light sources are offered to perception
    through this same shape.

Light sources are standing emitters, distinct from light stimuli: fixtures
never expire, player-placed lights carry a ttl.

The registry is a plain container. Creation, decay and ring sweeping live in
``shambler.stimuli.propagation``.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar, Literal, TypeAlias

from shambler.types import AgentId, EmitterId, StimulusId, WorldPos


@dataclass(slots=True)
class NoiseStimulus:
    """A noise event and its expanding detection ring.

    Attributes:
        id: Unique id assigned by the registry ("noise-4").
        position: Where the noise originated.
        strength: Current intensity; decays by ``fade_rate`` per second.
        radius: Detection radius.
        ttl: Seconds until the stimulus expires.
        fade_rate: Strength lost per second, fixed at creation so strength
            and ttl reach zero together.
        emitter_id: Groups repeated emissions from one source. Noise memory
            is keyed by this when present, otherwise by ``id``.
        visual_radius: Radius the ring grows to.
        ring_ttl: Seconds the ring takes to reach ``visual_radius``.
        ring_life: Seconds the ring has been growing, capped at ``ring_ttl``.
        prev_radius: Ring radius before the latest advance.
        current_radius: Ring radius after the latest advance.
        hit: Agents already resolved against this stimulus.
    """

    kind: ClassVar[Literal["noise"]] = "noise"

    id: StimulusId
    position: WorldPos
    strength: float
    radius: float
    ttl: float
    fade_rate: float
    visual_radius: float
    ring_ttl: float
    emitter_id: EmitterId | None = None
    ring_life: float = 0.0
    prev_radius: float = 0.0
    current_radius: float = 0.0
    hit: set[AgentId] = field(default_factory=set)

    @property
    def memory_key(self) -> str:
        """Key under which agents remember having heard this noise."""
        return self.emitter_id or self.id


@dataclass(slots=True)
class LightStimulus:
    """A light an agent may be drawn towards.

    ``ttl`` and ``fade_rate`` are zero for the transient views perception
    builds from standing light sources.
    """

    kind: ClassVar[Literal["light"]] = "light"

    id: StimulusId
    position: WorldPos
    strength: float
    radius: float
    ttl: float = 0.0
    fade_rate: float = 0.0
    emitter_id: EmitterId | None = None


Stimulus: TypeAlias = NoiseStimulus | LightStimulus


@dataclass(slots=True)
class LightSource:
    """A standing illumination emitter.

    Attributes:
        id: Unique id ("static-0", "dynamic-3").
        position: Ground-plane position under the light.
        strength: Perceived strength (renderer intensity x 10).
        radius: Perception radius.
        dynamic: Player-placed light with a limited lifetime.
        is_world_light: Ambient fixture; excluded from perception scoring.
        ttl: Remaining lifetime for dynamic lights, ``None`` for fixtures.
        initial_ttl: Lifetime at placement, for fade-out rendering.
    """

    id: StimulusId
    position: WorldPos
    strength: float
    radius: float
    dynamic: bool = False
    is_world_light: bool = False
    ttl: float | None = None
    initial_ttl: float | None = None

    @property
    def remaining_fraction(self) -> float:
        """Fraction of lifetime left, 1.0 for lights that never expire."""
        if self.ttl is None or not self.initial_ttl:
            return 1.0
        return max(0.0, self.ttl / self.initial_ttl)


class StimulusRegistry:
    """Owns the live stimuli and light sources of one world.

    Iteration order is creation order. Ids are generated monotonically per
    prefix; supplying a duplicate id by hand is a caller error.
    """

    def __init__(self) -> None:
        self.stimuli: list[Stimulus] = []
        self.light_sources: list[LightSource] = []
        self._counter = itertools.count()
        self._static_light_count = 0

    def __len__(self) -> int:
        return len(self.stimuli)

    def next_id(self, prefix: str) -> StimulusId:
        return f"{prefix}-{next(self._counter)}"

    def next_static_light_id(self) -> StimulusId:
        light_id = f"static-{self._static_light_count}"
        self._static_light_count += 1
        return light_id

    def add_stimulus(self, stimulus: Stimulus) -> None:
        self.stimuli.append(stimulus)

    def add_light_source(self, source: LightSource) -> None:
        self.light_sources.append(source)

    def get_stimulus(self, stimulus_id: StimulusId) -> Stimulus | None:
        for stimulus in self.stimuli:
            if stimulus.id == stimulus_id:
                return stimulus
        return None

    def get_light_source(self, source_id: StimulusId) -> LightSource | None:
        for source in self.light_sources:
            if source.id == source_id:
                return source
        return None

    def noises(self) -> Iterator[NoiseStimulus]:
        for stimulus in self.stimuli:
            if isinstance(stimulus, NoiseStimulus):
                yield stimulus

    def lights(self) -> Iterator[LightStimulus]:
        for stimulus in self.stimuli:
            if isinstance(stimulus, LightStimulus):
                yield stimulus

    def dynamic_lights(self) -> list[LightSource]:
        return [source for source in self.light_sources if source.dynamic]

    def remove_light_source(self, source_id: StimulusId) -> LightSource | None:
        for index, source in enumerate(self.light_sources):
            if source.id == source_id:
                return self.light_sources.pop(index)
        return None

    def clear_transient(self) -> list[LightSource]:
        """Drop every stimulus and dynamic light. Returns the removed lights."""
        self.stimuli.clear()
        removed = self.dynamic_lights()
        self.light_sources = [s for s in self.light_sources if not s.dynamic]
        return removed
