from __future__ import annotations

import dataclasses

import pytest

from shambler.config import SimulationConfig


def test_defaults() -> None:
    config = SimulationConfig()
    assert config.noise_ripple_speed == 8.0
    assert config.noise_recall_cooldown == 10.0
    assert config.default_return_chance == 0.75
    assert config.chase_noise_override_chance == 0.45
    assert config.flicker_range == (0.9, 1.15)


def test_replace_overrides_one_field() -> None:
    config = dataclasses.replace(SimulationConfig(), noise_recall_cooldown=4.0)
    assert config.noise_recall_cooldown == 4.0
    assert config.light_memory_stale == 30.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"chase_noise_override_chance": 1.5},
        {"noise_ripple_speed": 0.0},
        {"default_return_chance": 0.0},
        {"default_return_chance": 0.95},
    ],
)
def test_invalid_values_are_rejected(overrides: dict[str, float]) -> None:
    with pytest.raises(ValueError):
        SimulationConfig(**overrides)
