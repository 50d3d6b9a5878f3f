"""Belt network (conveyor) tick-based simulator.

Public entrypoints:
- BeltSystem (from belt_sim.sim)
- place_or_toggle_belt, tick (from belt_sim.engine)
- resolve_outputs (from belt_sim.resolver)
"""
from .sim import BeltSystem
from .engine import place_or_toggle_belt, remove_belt, tick
from .resolver import resolve_outputs
from .models import Belt, BeltOutput, Direction, LaneType, World
from .errors import BeltSimError, DegenerateVector, InvariantViolation, MissingNeighborLane, SimulationHalted
