from __future__ import annotations

import pytest

from shambler.world import World
from tests.helpers import make_world


@pytest.fixture
def world() -> World:
    """A seeded, obstacle-free world without a player."""
    return make_world()

