from __future__ import annotations

from typing import Dict, List, Optional, Tuple
import logging

from .models import Belt, BeltOutput, Coord, Direction, LaneType, World

log = logging.getLogger(__name__)

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST

# (feeding belt direction, receiving belt direction) -> entry lane on the receiver.
# Opposing pairs are absent: a belt pointing head-on into another has no entry lane.
TURN_TABLE: Dict[Tuple[Direction, Direction], LaneType] = {
    (N, N): LaneType.IN_STRAIGHT,
    (N, E): LaneType.IN_RIGHT,
    (N, W): LaneType.IN_LEFT,
    (S, S): LaneType.IN_STRAIGHT,
    (S, E): LaneType.IN_LEFT,
    (S, W): LaneType.IN_RIGHT,
    (E, N): LaneType.IN_LEFT,
    (E, S): LaneType.IN_RIGHT,
    (E, E): LaneType.IN_STRAIGHT,
    (W, N): LaneType.IN_RIGHT,
    (W, S): LaneType.IN_LEFT,
    (W, W): LaneType.IN_STRAIGHT,
}


def classify_turn(entity_dir: Direction, neighbor_dir: Direction) -> Optional[LaneType]:
    return TURN_TABLE.get((entity_dir, neighbor_dir))


def resolve_output(world: World, belt: Belt) -> Optional[BeltOutput]:
    nb = world.get(belt.downstream())
    if nb is None:
        return None
    lane_type = classify_turn(belt.direction, nb.direction)
    if lane_type is None:
        return None
    return BeltOutput(neighbor=nb.position, lane_type=lane_type)


def resolve_outputs(world: World) -> None:
    """Recompute every belt's output link from scratch.

    Must run after any placement, removal or rotation: one change can alter
    the classification of every belt that points at the changed cell.
    """
    for belt in world.entities.values():
        belt.output = None
    linked = 0
    for belt in world.entities.values():
        belt.output = resolve_output(world, belt)
        if belt.output is not None:
            linked += 1
    log.debug("resolved outputs: %d belts, %d links", len(world.entities), linked)


def upstream_of(world: World, position: Coord) -> List[Belt]:
    """Belts whose output link points at `position`."""
    return [
        b for b in world.entities.values()
        if b.output is not None and b.output.neighbor == position
    ]
