from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .vec2 import Vec2

Coord = Tuple[int, int]  # (x, y), y grows downwards (south)

Lane = List[float]  # index 0 = newest item, index -1 = oldest item


class Direction(Enum):
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"

    @property
    def vector(self) -> Vec2:
        return _DIR_VECTORS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]

    @staticmethod
    def parse(name: str) -> "Direction":
        for d in Direction:
            if d.value.lower() == str(name).lower() or d.name.lower() == str(name).lower():
                return d
        raise ValueError(f"Unknown direction '{name}'")


_DIR_VECTORS = {
    Direction.NORTH: Vec2(0, -1),
    Direction.SOUTH: Vec2(0, 1),
    Direction.EAST: Vec2(1, 0),
    Direction.WEST: Vec2(-1, 0),
}
_OPPOSITE = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}


class LaneType(Enum):
    OUT = "Out"
    IN_STRAIGHT = "InStraight"
    IN_LEFT = "InLeft"
    IN_RIGHT = "InRight"


INPUT_LANES: Tuple[LaneType, ...] = (LaneType.IN_STRAIGHT, LaneType.IN_LEFT, LaneType.IN_RIGHT)


def entity_key(position: Coord) -> str:
    """Textual id of a grid position, e.g. (1, 0) -> '1.0'."""
    x, y = position
    return f"{x}.{y}"


def parse_entity_key(key: str) -> Coord:
    parts = str(key).split(".")
    if len(parts) != 2:
        raise ValueError(f"Malformed entity id '{key}'")
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError as e:
        raise ValueError(f"Malformed entity id '{key}'") from e


def as_coord(position) -> Coord:
    """(x, y) of integral numbers -> Coord; anything else raises ValueError."""
    try:
        x, y = position
    except (TypeError, ValueError) as e:
        raise ValueError(f"Position must be a pair (x, y), got {position!r}") from e
    for v in (x, y):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"Position coordinates must be integers, got {position!r}")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError(f"Position coordinates must be integral, got {position!r}")
    return (int(x), int(y))


# =========================
# Domain entities
# =========================

@dataclass
class Lanes:
    out: Lane = field(default_factory=lambda: [0.0])
    in_straight: Lane = field(default_factory=list)
    in_left: Lane = field(default_factory=list)
    in_right: Lane = field(default_factory=list)

    def get(self, lane_type: LaneType) -> Lane:
        if lane_type is LaneType.OUT:
            return self.out
        if lane_type is LaneType.IN_STRAIGHT:
            return self.in_straight
        if lane_type is LaneType.IN_LEFT:
            return self.in_left
        if lane_type is LaneType.IN_RIGHT:
            return self.in_right
        raise ValueError(f"Unknown lane type {lane_type!r}")

    def items(self) -> List[Tuple[LaneType, Lane]]:
        return [(lt, self.get(lt)) for lt in LaneType]

    def count(self) -> int:
        return len(self.out) + len(self.in_straight) + len(self.in_left) + len(self.in_right)


@dataclass(frozen=True)
class BeltOutput:
    neighbor: Coord
    lane_type: LaneType


@dataclass
class Belt:
    position: Coord
    direction: Direction
    output: Optional[BeltOutput] = None
    lanes: Lanes = field(default_factory=Lanes)

    @property
    def id(self) -> Coord:
        return self.position

    @property
    def key(self) -> str:
        return entity_key(self.position)

    def downstream(self) -> Coord:
        """Grid cell this belt feeds into."""
        return Vec2(*self.position).add(self.direction.vector).to_cell()


@dataclass
class World:
    tick: int = 0
    entities: Dict[Coord, Belt] = field(default_factory=dict)

    def get(self, position: Coord) -> Optional[Belt]:
        return self.entities.get(position)

    def __contains__(self, position: Coord) -> bool:
        return position in self.entities

    def __len__(self) -> int:
        return len(self.entities)


# =========================
# Snapshot views (renderers use)
# =========================

@dataclass(frozen=True)
class BeltView:
    position: Coord
    direction: Direction
    output: Optional[BeltOutput]
    lanes: Dict[LaneType, Tuple[float, ...]]


@dataclass(frozen=True)
class Snapshot:
    tick: int
    belts: Dict[Coord, BeltView]
    item_count: int
