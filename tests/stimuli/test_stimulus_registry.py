from __future__ import annotations

from shambler.stimuli.registry import (
    LightSource,
    LightStimulus,
    NoiseStimulus,
    StimulusRegistry,
)


def _noise(registry: StimulusRegistry, emitter_id: str | None = None) -> NoiseStimulus:
    return NoiseStimulus(
        id=registry.next_id("noise"),
        position=(0.0, 0.0),
        strength=10.0,
        radius=8.0,
        ttl=2.0,
        fade_rate=5.0,
        visual_radius=8.0,
        ring_ttl=0.25,
        emitter_id=emitter_id,
    )


def test_ids_are_unique_and_monotonic() -> None:
    registry = StimulusRegistry()
    ids = [registry.next_id("noise") for _ in range(3)] + [registry.next_id("light")]
    assert ids == ["noise-0", "noise-1", "noise-2", "light-3"]
    assert registry.next_static_light_id() == "static-0"
    assert registry.next_static_light_id() == "static-1"


def test_kind_views_preserve_creation_order() -> None:
    registry = StimulusRegistry()
    first = _noise(registry)
    light = LightStimulus(
        id=registry.next_id("light"), position=(1, 1), strength=5, radius=4
    )
    second = _noise(registry)
    for stimulus in (first, light, second):
        registry.add_stimulus(stimulus)

    assert list(registry.noises()) == [first, second]
    assert list(registry.lights()) == [light]
    assert len(registry) == 3
    assert registry.get_stimulus(light.id) is light
    assert registry.get_stimulus("missing") is None


def test_memory_key_prefers_emitter_id() -> None:
    registry = StimulusRegistry()
    assert _noise(registry, emitter_id="door").memory_key == "door"
    anonymous = _noise(registry)
    assert anonymous.memory_key == anonymous.id


def test_kind_discriminator() -> None:
    registry = StimulusRegistry()
    assert _noise(registry).kind == "noise"
    assert LightStimulus(id="l", position=(0, 0), strength=1, radius=1).kind == "light"


def test_clear_transient_keeps_static_lights() -> None:
    registry = StimulusRegistry()
    registry.add_stimulus(_noise(registry))
    fixture = LightSource(id="static-0", position=(0, 0), strength=10, radius=5)
    placed = LightSource(
        id="dynamic-1", position=(2, 2), strength=18, radius=12, dynamic=True, ttl=14.0
    )
    registry.add_light_source(fixture)
    registry.add_light_source(placed)

    removed = registry.clear_transient()

    assert removed == [placed]
    assert registry.stimuli == []
    assert registry.light_sources == [fixture]


def test_remove_light_source() -> None:
    registry = StimulusRegistry()
    source = LightSource(id="static-0", position=(0, 0), strength=10, radius=5)
    registry.add_light_source(source)
    assert registry.get_light_source("static-0") is source
    assert registry.remove_light_source("static-0") is source
    assert registry.remove_light_source("static-0") is None


def test_remaining_fraction() -> None:
    fixture = LightSource(id="static-0", position=(0, 0), strength=10, radius=5)
    placed = LightSource(
        id="dynamic-0",
        position=(0, 0),
        strength=18,
        radius=12,
        dynamic=True,
        ttl=7.0,
        initial_ttl=14.0,
    )
    assert fixture.remaining_fraction == 1.0
    assert placed.remaining_fraction == 0.5
