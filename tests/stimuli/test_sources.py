from __future__ import annotations

import pytest

from shambler.stimuli.sources import (
    add_world_fixture,
    emit_click_noise,
    emit_footstep,
    footstep_emitter_id,
    place_player_light,
)
from shambler.world import World


def test_footstep_emitter_id_buckets_positions() -> None:
    assert footstep_emitter_id((3.0, -1.6)) == "player-footsteps:2:-1"
    # Both positions fall into the same 1.5-unit cell.
    assert footstep_emitter_id((2.9, 0.2)) == footstep_emitter_id((3.1, -0.2))
    assert footstep_emitter_id((0.0, 0.0)) != footstep_emitter_id((6.0, 0.0))


@pytest.mark.parametrize(
    ("sprinting", "strength", "radius"),
    [(False, 10.0, 10.0), (True, 14.0, 10.8)],
)
def test_footstep_noise(
    world: World, sprinting: bool, strength: float, radius: float
) -> None:
    noise = emit_footstep(world, (3.0, -1.6), sprinting=sprinting)

    assert noise.strength == pytest.approx(strength)
    assert noise.radius == pytest.approx(radius)
    assert noise.ttl == pytest.approx(2.4)
    assert noise.emitter_id == "player-footsteps:2:-1"


def test_click_noise(world: World) -> None:
    noise = emit_click_noise(world, (1.0, 1.0))

    assert (noise.strength, noise.radius, noise.ttl) == (18.0, 14.0, 6.0)
    assert noise.visual_radius == 3.0
    assert noise.emitter_id is None


def test_placed_player_light(world: World) -> None:
    light = place_player_light(world, (4.0, 4.0))

    assert light.dynamic
    assert light.strength == pytest.approx(18.0)
    assert light.radius == 12.0
    assert light.ttl == 14.0


def test_world_fixture_is_excluded_from_perception(world: World) -> None:
    fixture = add_world_fixture(world, (0.0, 0.0), 1.2, 20.0)

    assert fixture.is_world_light
    assert fixture.strength == pytest.approx(12.0)
    assert fixture.radius == pytest.approx(15.0)
