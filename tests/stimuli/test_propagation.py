from __future__ import annotations

import pytest

from shambler.agents.agent import AgentState, BehaviorClass
from shambler.events import (
    AgentStateChangedEvent,
    LightExpiredEvent,
    LightPlacedEvent,
    NoiseCreatedEvent,
)
from shambler.stimuli.propagation import (
    add_light_source,
    advance_stimuli,
    clear_transient_stimuli,
    create_light_stimulus,
    create_noise,
    place_light,
)
from shambler.stimuli.registry import NoiseStimulus
from shambler.types import DeltaTime, SimTime, StimulusKind
from shambler.world import World
from tests.helpers import TICK, EventRecorder, spawn_at


def _sweep_until_hit(world: World, noise: NoiseStimulus, agent_id: int) -> None:
    for _ in range(40):
        advance_stimuli(world, TICK)
        if agent_id in noise.hit:
            return
    pytest.fail("ring never reached the agent")


class TestCreation:
    def test_noise_fields(self, world: World) -> None:
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)

        assert noise.fade_rate == pytest.approx(3.0)
        assert noise.visual_radius == 14.0
        assert noise.ring_ttl == pytest.approx(0.75)
        assert noise.current_radius == 0.0
        assert noise.hit == set()
        assert world.registry.stimuli == [noise]

    def test_zero_ttl_uses_minimum_for_fade_rate(self, world: World) -> None:
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 0.0)
        assert noise.fade_rate == pytest.approx(180.0)
        assert noise.ring_ttl == 0.0

    def test_invalid_arguments_raise(self, world: World) -> None:
        with pytest.raises(ValueError):
            create_noise(world, (0.0, 0.0), 10.0, -1.0)
        with pytest.raises(ValueError):
            create_light_stimulus(world, (0.0, 0.0), 10.0, 5.0, -2.0)

    def test_create_noise_publishes_event(self, world: World) -> None:
        recorder = EventRecorder(world, NoiseCreatedEvent)
        noise = create_noise(world, (1.0, 2.0), 10.0, 8.0, emitter_id="door")
        assert [event.stimulus for event in recorder.events] == [noise]

    def test_light_sources(self, world: World) -> None:
        recorder = EventRecorder(world, LightPlacedEvent)
        fixture = add_light_source(world, (0.0, 0.0), 12.0, 9.0, is_world_light=True)
        placed = place_light(world, (3.0, 3.0))

        assert fixture.id == "static-0"
        assert not fixture.dynamic
        assert fixture.ttl is None
        assert placed.dynamic
        assert placed.strength == pytest.approx(18.0)
        assert placed.ttl == placed.initial_ttl == 14.0
        assert len(recorder.events) == 2


class TestDecay:
    def test_strength_and_ttl_fall_together(self, world: World) -> None:
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)
        advance_stimuli(world, DeltaTime(3.0))

        assert noise.ttl == pytest.approx(3.0)
        assert noise.strength == pytest.approx(9.0)
        assert noise in world.registry.stimuli

    def test_removed_when_strength_is_spent(self, world: World) -> None:
        light = create_light_stimulus(world, (0.0, 0.0), 1.0, 5.0, 10.0)
        advance_stimuli(world, DeltaTime(9.5))

        assert light.ttl > 0
        assert world.registry.stimuli == []

    def test_removed_when_ttl_runs_out(self, world: World) -> None:
        create_light_stimulus(world, (0.0, 0.0), 100.0, 5.0, 1.0)
        advance_stimuli(world, DeltaTime(1.0))
        assert world.registry.stimuli == []

    def test_dynamic_light_expires(self, world: World) -> None:
        recorder = EventRecorder(world, LightExpiredEvent)
        source = place_light(world, (3.0, 3.0))

        advance_stimuli(world, DeltaTime(13.9))
        assert world.registry.get_light_source(source.id) is source
        assert recorder.events == []

        advance_stimuli(world, DeltaTime(0.2))
        assert world.registry.get_light_source(source.id) is None
        assert [event.source_id for event in recorder.events] == [source.id]

    def test_static_light_never_expires(self, world: World) -> None:
        source = add_light_source(world, (0.0, 0.0), 10.0, 5.0)
        advance_stimuli(world, DeltaTime(1000.0))
        assert world.registry.light_sources == [source]

    def test_clear_transient(self, world: World) -> None:
        recorder = EventRecorder(world, LightExpiredEvent)
        fixture = add_light_source(world, (0.0, 0.0), 10.0, 5.0, is_world_light=True)
        place_light(world, (3.0, 3.0))
        create_noise(world, (0.0, 0.0), 10.0, 8.0)

        clear_transient_stimuli(world)

        assert world.registry.stimuli == []
        assert world.registry.light_sources == [fixture]
        assert len(recorder.events) == 1


class TestRing:
    def test_ring_grows_monotonically_to_visual_radius(self, world: World) -> None:
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)
        radii = []
        for _ in range(20):
            advance_stimuli(world, TICK)
            radii.append(noise.current_radius)

        assert radii == sorted(radii)
        assert radii[4] == pytest.approx(14.0 * 0.25 / 0.75)
        assert radii[-1] == pytest.approx(14.0)
        assert noise.prev_radius == noise.current_radius

    def test_sweep_sends_idle_agent_to_investigate(self, world: World) -> None:
        agent = spawn_at(world, (5.0, 0.0))
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)

        _sweep_until_hit(world, noise, agent.id)

        assert agent.state is AgentState.INVESTIGATING
        assert agent.target == (0.0, 0.0)
        assert agent.wander_target is None
        assert agent.current_stimulus is StimulusKind.NOISE
        assert agent.reason == "Heard expanding noise ring"
        assert 2.5 <= agent.investigate_timer <= 4.5
        assert agent.memory.noises[noise.id].cooldown_until == pytest.approx(10.0)

    def test_noise_at_agent_position_is_heard(self, world: World) -> None:
        agent = spawn_at(world, (0.0, 0.0), decision_timer=100.0)
        noise = create_noise(world, agent.position, 18.0, 14.0, 6.0)

        advance_stimuli(world, TICK)

        assert noise.hit == {agent.id}
        assert agent.state is AgentState.INVESTIGATING
        assert agent.current_stimulus is StimulusKind.NOISE
        assert agent.target == agent.position

    def test_each_agent_is_resolved_once(self, world: World) -> None:
        recorder = EventRecorder(world, AgentStateChangedEvent)
        agent = spawn_at(world, (5.0, 0.0))
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)

        for _ in range(30):
            advance_stimuli(world, TICK)

        assert noise.hit == {agent.id}
        assert len(recorder.events) == 1

    def test_agents_outside_visual_radius_are_not_hit(self, world: World) -> None:
        far = spawn_at(world, (10.0, 0.0))
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0, visual_radius=3.0)

        for _ in range(30):
            advance_stimuli(world, TICK)

        assert far.id not in noise.hit
        assert far.state is AgentState.IDLE

    def test_emitter_cooldown_suppresses_repeats(self, world: World) -> None:
        recorder = EventRecorder(world, AgentStateChangedEvent)
        agent = spawn_at(world, (5.0, 0.0))
        first = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0, emitter_id="door")
        _sweep_until_hit(world, first, agent.id)

        second = create_noise(world, (0.0, 2.0), 18.0, 14.0, 6.0, emitter_id="door")
        _sweep_until_hit(world, second, agent.id)

        assert agent.target == (0.0, 0.0)
        assert len(recorder.events) == 1
        assert agent.memory.noises["door"].cooldown_until == pytest.approx(10.0)

        # Once the cooldown has run out the emitter is interesting again.
        world.time = SimTime(11.0)
        third = create_noise(world, (0.0, -2.0), 18.0, 14.0, 6.0, emitter_id="door")
        _sweep_until_hit(world, third, agent.id)

        assert agent.target == (0.0, -2.0)
        assert len(recorder.events) == 2

    def test_chasing_agent_remembers_but_keeps_chasing(self, world: World) -> None:
        agent = spawn_at(world, (5.0, 0.0))
        agent.state = AgentState.CHASING
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)

        _sweep_until_hit(world, noise, agent.id)

        assert agent.state is AgentState.CHASING
        assert agent.target is None
        assert noise.id in agent.memory.noises

    def test_docile_agents_are_skipped(self, world: World) -> None:
        dummy = spawn_at(world, (5.0, 0.0), BehaviorClass.DOCILE)
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)

        for _ in range(30):
            advance_stimuli(world, TICK)

        assert dummy.id not in noise.hit
        assert dummy.memory.is_empty()

    def test_no_sweep_once_round_is_over(self, world: World) -> None:
        agent = spawn_at(world, (5.0, 0.0))
        world.is_game_over = True
        noise = create_noise(world, (0.0, 0.0), 18.0, 14.0, 6.0)

        for _ in range(30):
            advance_stimuli(world, TICK)

        assert noise.hit == set()
        assert agent.state is AgentState.IDLE
