"""
Tests for the Vec2 geometry primitive.
"""
import dataclasses
import math

import pytest

from belt_sim.errors import DegenerateVector
from belt_sim.models import Direction
from belt_sim.vec2 import Vec2


class TestVec2:
    """Tests for Vec2 arithmetic."""

    def test_add_sub(self):
        a = Vec2(1, 2)
        b = Vec2(3, -4)
        assert a.add(b) == Vec2(4, -2)
        assert a.sub(b) == Vec2(-2, 6)
        assert a + b == Vec2(4, -2)
        assert a - b == Vec2(-2, 6)

    def test_scale(self):
        v = Vec2(2, -3)
        assert v.mul(2) == Vec2(4, -6)
        assert v * 0.5 == Vec2(1, -1.5)
        assert v.div(2) == Vec2(1, -1.5)

    def test_len(self):
        assert Vec2(3, 4).len() == 5
        assert Vec2.ZERO.len() == 0
        assert Vec2(0, 0).len() == 0

    def test_norm(self):
        n = Vec2(3, 4).norm()
        assert n.x == pytest.approx(0.6)
        assert n.y == pytest.approx(0.8)
        assert n.len() == pytest.approx(1.0)

    def test_norm_zero_raises(self):
        """Zero-length vectors cannot be normalized."""
        with pytest.raises(DegenerateVector):
            Vec2.ZERO.norm()
        with pytest.raises(ValueError):
            Vec2(0.0, 0.0).norm()

    def test_immutable(self):
        v = Vec2(1, 1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.x = 5

    def test_to_cell(self):
        assert Vec2(1.0, -1.0).to_cell() == (1, -1)
        assert Vec2(2.9999999, 0.0000001).to_cell() == (3, 0)


class TestDirectionVectors:
    """Direction unit vectors (y grows southwards)."""

    def test_vectors(self):
        assert Direction.NORTH.vector == Vec2(0, -1)
        assert Direction.SOUTH.vector == Vec2(0, 1)
        assert Direction.EAST.vector == Vec2(1, 0)
        assert Direction.WEST.vector == Vec2(-1, 0)

    def test_vectors_are_unit(self):
        for d in Direction:
            assert math.isclose(d.vector.len(), 1.0)

    def test_opposite(self):
        for d in Direction:
            assert d.opposite.opposite is d
            assert d.vector.add(d.opposite.vector) == Vec2.ZERO

    def test_parse(self):
        assert Direction.parse("East") is Direction.EAST
        assert Direction.parse("north") is Direction.NORTH
        assert Direction.parse("WEST") is Direction.WEST
        with pytest.raises(ValueError):
            Direction.parse("Up")
