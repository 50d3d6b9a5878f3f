"""
Pytest fixtures for belt_sim tests.
"""
import pytest

from belt_sim.engine import place_or_toggle_belt
from belt_sim.models import Direction, World


@pytest.fixture
def world():
    """An empty world at tick 0."""
    return World()


@pytest.fixture
def make_chain():
    """Build a straight East-facing chain of n belts starting at (0, 0).

    Every lane starts empty except the first belt's seeded Out item.
    """
    def _make(n):
        w = World()
        for x in range(n):
            place_or_toggle_belt(w, (x, 0), Direction.EAST)
        for x in range(1, n):
            w.entities[(x, 0)].lanes.out.clear()
        return w
    return _make
