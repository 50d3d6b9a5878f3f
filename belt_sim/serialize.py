"""Plain structural (de)serialization of a World.

Wire shape (keys follow the editor's naming):

    tick: 12
    entities:
      "0.0":
        type: Belt
        id: "0.0"
        position: {x: 0, y: 0}
        direction: East
        output: {id: "1.0", laneType: InStraight}   # or null
        lanes: {Out: [0.25], InStraight: [], InLeft: [], InRight: []}

Incoming data is checked against the pydantic models below; anything they
reject surfaces as ValueError from world_from_dict.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional
import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator, model_validator

from .models import Belt, BeltOutput, Direction, LaneType, Lanes, World, entity_key, parse_entity_key

# A lane item's progress, 0 at lane entry.
LaneValue = Annotated[float, Field(strict=True, ge=0.0, lt=1.0)]


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class PositionModel(_WireModel):
    x: StrictInt
    y: StrictInt


class OutputModel(_WireModel):
    id: str
    lane_type: LaneType = Field(alias="laneType")

    @field_validator("lane_type")
    @classmethod
    def _entry_lane(cls, v: LaneType) -> LaneType:
        if v is LaneType.OUT:
            raise ValueError("output cannot target an Out lane")
        return v


class LanesModel(_WireModel):
    out: List[LaneValue] = Field(alias="Out")
    in_straight: List[LaneValue] = Field(alias="InStraight")
    in_left: List[LaneValue] = Field(alias="InLeft")
    in_right: List[LaneValue] = Field(alias="InRight")

    @field_validator("out", "in_straight", "in_left", "in_right")
    @classmethod
    def _newest_first(cls, v: List[float]) -> List[float]:
        # index 0 is the newest item, so progress never decreases along a lane
        if v != sorted(v):
            raise ValueError(f"lane must be ordered newest (smallest) first, got {v}")
        return v


class BeltModel(_WireModel):
    type: Literal["Belt"]
    id: str
    position: PositionModel
    direction: Direction
    output: Optional[OutputModel]
    lanes: LanesModel

    @model_validator(mode="after")
    def _id_matches_position(self) -> "BeltModel":
        expected = entity_key((self.position.x, self.position.y))
        if self.id != expected:
            raise ValueError(f"id {self.id!r} does not match position (expected {expected!r})")
        return self


class WorldModel(_WireModel):
    tick: StrictInt = Field(0, ge=0)
    entities: Dict[str, BeltModel] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _consistent_entities(self) -> "WorldModel":
        # Keys are canonical "x.y" ids, so no two entries can share a position.
        for key, belt in self.entities.items():
            if key != belt.id:
                raise ValueError(f"entity key {key!r} does not match id {belt.id!r}")
        for key, belt in self.entities.items():
            if belt.output is not None and belt.output.id not in self.entities:
                raise ValueError(f"belt {key} outputs to missing belt {belt.output.id!r}")
        return self


def world_to_dict(world: World) -> Dict[str, Any]:
    entities: Dict[str, Any] = {}
    for belt in world.entities.values():
        out = None
        if belt.output is not None:
            out = {"id": entity_key(belt.output.neighbor), "laneType": belt.output.lane_type.value}
        entities[belt.key] = {
            "type": "Belt",
            "id": belt.key,
            "position": {"x": belt.position[0], "y": belt.position[1]},
            "direction": belt.direction.value,
            "output": out,
            "lanes": {lt.value: list(lane) for lt, lane in belt.lanes.items()},
        }
    return {"tick": world.tick, "entities": entities}


def world_from_dict(data: Any) -> World:
    try:
        model = WorldModel.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid world data: {e}") from e

    world = World(tick=model.tick)
    for m in model.entities.values():
        position = (m.position.x, m.position.y)
        output = None
        if m.output is not None:
            output = BeltOutput(neighbor=parse_entity_key(m.output.id), lane_type=m.output.lane_type)
        lanes = Lanes(
            out=[float(v) for v in m.lanes.out],
            in_straight=[float(v) for v in m.lanes.in_straight],
            in_left=[float(v) for v in m.lanes.in_left],
            in_right=[float(v) for v in m.lanes.in_right],
        )
        world.entities[position] = Belt(position=position, direction=m.direction, output=output, lanes=lanes)
    return world


def save_world(world: World, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(world_to_dict(world), f, sort_keys=False)


def load_world(path: str) -> World:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return world_from_dict(data)
