"""
Tests for the BeltSystem host facade.
"""
import logging
import os

import pytest

from belt_sim.config import Config, SimConfig
from belt_sim.errors import InvariantViolation, SimulationHalted
from belt_sim.models import BeltOutput, Direction, LaneType, World
from belt_sim.sim import BeltSystem

EXAMPLE_CONFIG = os.path.join(os.path.dirname(__file__), "..", "example_config.yaml")


def _fast_config(**kwargs):
    # belt_speed 1.0 at 4 Hz: step = dt = 0.25, both exact.
    return Config(sim=SimConfig(belt_speed=1.0, tick_hz=4, **kwargs))


class TestConstruction:
    """Building a BeltSystem."""

    def test_default_world(self):
        system = BeltSystem()
        assert system.tick == 0
        assert len(system.world) == 0

    def test_existing_world_is_resolved(self):
        world = World()
        system = BeltSystem(world=world)
        system.place((0, 0), Direction.EAST)
        system.place((1, 0), Direction.EAST)
        assert world.entities[(0, 0)].output == BeltOutput((1, 0), LaneType.IN_STRAIGHT)

    def test_from_yaml_example(self):
        system = BeltSystem.from_yaml(EXAMPLE_CONFIG)
        assert len(system.world) == 13
        # The west feeder and the ring's last belt both merge into (0, 0).
        assert system.world.entities[(-1, 0)].output == BeltOutput((0, 0), LaneType.IN_STRAIGHT)
        assert system.world.entities[(0, 1)].output == BeltOutput((0, 0), LaneType.IN_RIGHT)
        assert system.world.entities[(5, 2)].output is None

    def test_example_runs_clean(self):
        system = BeltSystem.from_yaml(EXAMPLE_CONFIG)
        system.run(1200)
        snap = system.snapshot()
        assert snap.tick == 1200
        # The feeder item joins the ten ring items for good; the spur items fall off.
        assert snap.item_count == 11

    def test_invalid_config_rejected(self):
        with pytest.raises(ValueError):
            BeltSystem(config=Config(sim=SimConfig(belt_speed=100.0)))


class TestStepping:
    """step / run / advance."""

    def test_step_returns_tick(self):
        system = BeltSystem(config=_fast_config())
        assert system.step() == 1
        assert system.run(3) == 4

    def test_remove(self):
        system = BeltSystem(config=_fast_config())
        system.place((0, 0), Direction.EAST)
        system.place((1, 0), Direction.EAST)
        system.remove((1, 0))
        assert system.world.entities[(0, 0)].output is None

    def test_advance_accumulates(self):
        system = BeltSystem(config=_fast_config())
        assert system.advance(0.5) == 2
        assert system.advance(0.125) == 0
        assert system.advance(0.125) == 1
        assert system.tick == 3

    def test_advance_caps_catchup(self, caplog):
        system = BeltSystem(config=_fast_config(max_catchup_ticks=3))
        with caplog.at_level(logging.WARNING, logger="belt_sim.sim"):
            assert system.advance(10.0) == 3
        assert "dropping" in caplog.text
        # Dropped time is not backfilled later.
        assert system.advance(0.0) == 0
        assert system.tick == 3

    def test_advance_limit(self):
        """Ticks held back by the limit run on a later call."""
        system = BeltSystem(config=_fast_config())
        assert system.advance(0.75, limit=2) == 2
        assert system.tick == 2
        assert system.advance(0.0) == 1
        assert system.advance(0.5, limit=0) == 0
        assert system.tick == 3

    def test_advance_negative(self):
        system = BeltSystem(config=_fast_config())
        with pytest.raises(ValueError):
            system.advance(-0.1)

    def test_items_move_at_configured_step(self):
        system = BeltSystem(config=_fast_config())
        system.place((0, 0), Direction.EAST)
        system.step()
        assert system.world.entities[(0, 0)].lanes.out == [0.25]


class TestHalting:
    """The first engine failure halts the system."""

    def test_halts_on_violation(self, caplog):
        system = BeltSystem(config=_fast_config())
        system.place((0, 0), Direction.EAST)
        system.world.entities[(0, 0)].lanes.out[:] = [0.9]

        with caplog.at_level(logging.ERROR, logger="belt_sim.sim"):
            with pytest.raises(InvariantViolation):
                system.step()
        assert "halted" in caplog.text
        assert isinstance(system.halted, InvariantViolation)

        with pytest.raises(SimulationHalted) as exc:
            system.step()
        assert exc.value.cause is system.halted
        assert system.tick == 0


class TestSnapshot:
    """Read-only views for renderers."""

    def test_snapshot_contents(self):
        system = BeltSystem(config=_fast_config())
        system.place((0, 0), Direction.EAST)
        system.place((1, 0), Direction.SOUTH)
        system.step()

        snap = system.snapshot()
        assert snap.tick == 1
        assert snap.item_count == 2
        view = snap.belts[(0, 0)]
        assert view.direction is Direction.EAST
        assert view.output == BeltOutput((1, 0), LaneType.IN_RIGHT)
        assert view.lanes[LaneType.OUT] == (0.25,)
        assert view.lanes[LaneType.IN_LEFT] == ()

    def test_snapshot_is_detached(self):
        system = BeltSystem(config=_fast_config())
        system.place((0, 0), Direction.EAST)
        snap = system.snapshot()
        system.step()
        assert snap.belts[(0, 0)].lanes[LaneType.OUT] == (0.0,)
        assert snap.tick == 0
