from __future__ import annotations

from typing import List
import logging

from .config import DEFAULT_BELT_SPEED, DEFAULT_TICK_HZ
from .errors import InvariantViolation, MissingNeighborLane
from .models import INPUT_LANES, Belt, Coord, Direction, Lane, LaneType, World, as_coord
from .resolver import resolve_outputs

log = logging.getLogger(__name__)

# Progress at which an item leaves a lane. Input lanes carry an item from the
# tile edge to its center, the Out lane from the center to the far edge.
HANDOFF = 0.5

DEFAULT_STEP = DEFAULT_BELT_SPEED / DEFAULT_TICK_HZ


# ---------------------------
# Topology mutation
# ---------------------------

def place_or_toggle_belt(world: World, position: Coord, direction: Direction) -> None:
    """Create, remove or rotate the belt at `position`.

    - empty cell: a new belt is created
    - same direction: the belt is removed
    - other direction: the belt is rotated in place, lanes untouched
    """
    if not isinstance(direction, Direction):
        raise TypeError(f"direction must be a Direction, got {direction!r}")
    position = as_coord(position)

    existing = world.get(position)
    if existing is None:
        world.entities[position] = Belt(position=position, direction=direction)
        log.debug("placed belt %s facing %s", position, direction.value)
    elif existing.direction is direction:
        del world.entities[position]
        log.debug("removed belt %s", position)
    else:
        log.debug("rotated belt %s %s -> %s", position, existing.direction.value, direction.value)
        existing.direction = direction

    resolve_outputs(world)


def remove_belt(world: World, position: Coord) -> None:
    position = as_coord(position)
    if world.entities.pop(position, None) is not None:
        log.debug("removed belt %s", position)
        resolve_outputs(world)


# ---------------------------
# Fixed-step transport
# ---------------------------

def tick(world: World, step: float = DEFAULT_STEP) -> None:
    """Advance every item by `step` and carry out all lane handoffs.

    Raises InvariantViolation or MissingNeighborLane when the world reaches a
    state the transport model does not allow. The world is left as it was at
    the point of failure.
    """
    if not (0.0 < step < HANDOFF):
        raise ValueError(f"step must be in (0, {HANDOFF}), got {step}")

    # 1) advance
    for belt in world.entities.values():
        for _, lane in belt.lanes.items():
            for i in range(len(lane)):
                lane[i] += step

    for belt in world.entities.values():
        # 2) input lanes -> pending
        pending: List[float] = []
        for lane_type in INPUT_LANES:
            lane = belt.lanes.get(lane_type)
            pending.extend(_drain(lane, belt, lane_type))
            _check_input_lane(lane, belt, lane_type)

        # 3) pending -> Out
        _merge_into_out(belt, pending)

        # 4) Out -> neighbor
        for excess in _drain(belt.lanes.out, belt, LaneType.OUT):
            _hand_off(world, belt, excess)
        _check_out_lane(belt)

    # 5) counter
    world.tick += 1


def item_count(world: World) -> int:
    return sum(b.lanes.count() for b in world.entities.values())


def _drain(lane: Lane, belt: Belt, lane_type: LaneType) -> List[float]:
    """Pop every ready item from the oldest end; returns excesses, oldest first."""
    drained: List[float] = []
    while lane and lane[-1] >= HANDOFF:
        value = lane.pop()
        excess = value - HANDOFF
        if not (0.0 <= excess < HANDOFF):
            raise InvariantViolation(
                "excess-out-of-range",
                f"belt {belt.position} lane {lane_type.value} value={value}",
            )
        drained.append(excess)
    return drained


def _check_input_lane(lane: Lane, belt: Belt, lane_type: LaneType) -> None:
    # The oldest remaining item is below the handoff, so nothing newer may be past it.
    for value in lane:
        if value >= HANDOFF:
            raise InvariantViolation(
                "input-lane-overtake",
                f"belt {belt.position} lane {lane_type.value} holds ready item {value} "
                f"behind waiting item {lane[-1]}",
            )


def _merge_into_out(belt: Belt, pending: List[float]) -> None:
    out = belt.lanes.out
    for excess in sorted(pending, reverse=True):
        if out and out[0] < excess:
            raise InvariantViolation(
                "out-lane-overtake",
                f"belt {belt.position} out front={out[0]} incoming={excess}",
            )
        out.insert(0, excess)


def _check_out_lane(belt: Belt) -> None:
    out = belt.lanes.out
    for value in out:
        if value >= HANDOFF:
            raise InvariantViolation(
                "out-lane-overtake",
                f"belt {belt.position} out holds ready item {value} behind waiting item {out[-1]}",
            )


def _hand_off(world: World, belt: Belt, excess: float) -> None:
    link = belt.output
    if link is None:
        log.debug("item discarded at dead end %s", belt.position)
        return
    nb = world.get(link.neighbor)
    if nb is None or link.lane_type is LaneType.OUT:
        raise MissingNeighborLane(
            f"belt {belt.position} outputs to {link.neighbor} lane {link.lane_type.value}, "
            "which does not exist"
        )
    target = nb.lanes.get(link.lane_type)
    if target and target[0] < excess:
        raise InvariantViolation(
            "neighbor-lane-overtake",
            f"belt {belt.position} -> {nb.position} lane {link.lane_type.value} "
            f"front={target[0]} incoming={excess}",
        )
    target.insert(0, excess)
