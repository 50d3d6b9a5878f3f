from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set
import yaml

from .models import Coord, Direction, as_coord

DEFAULT_BELT_SPEED = 1.0  # tiles per time unit
DEFAULT_TICK_HZ = 60
DEFAULT_MAX_CATCHUP_TICKS = 5


@dataclass
class SimConfig:
    belt_speed: float = DEFAULT_BELT_SPEED
    tick_hz: int = DEFAULT_TICK_HZ
    max_catchup_ticks: int = DEFAULT_MAX_CATCHUP_TICKS

    @property
    def dt(self) -> float:
        return 1.0 / self.tick_hz

    @property
    def step(self) -> float:
        """Lane progress per tick."""
        return self.belt_speed * self.dt

    def validate(self) -> None:
        if self.tick_hz <= 0:
            raise ValueError(f"tick_hz must be positive, got {self.tick_hz}")
        if self.max_catchup_ticks < 1:
            raise ValueError(f"max_catchup_ticks must be >= 1, got {self.max_catchup_ticks}")
        # An item may not cross more than half a tile in one tick.
        if not (0.0 < self.step < 0.5):
            raise ValueError(
                f"belt_speed/tick_hz must be in (0, 0.5); got {self.belt_speed}/{self.tick_hz}={self.step}"
            )


@dataclass
class BeltConfig:
    pos: Coord
    direction: Direction


@dataclass
class NetworkConfig:
    belts: List[BeltConfig] = field(default_factory=list)


@dataclass
class Config:
    sim: SimConfig = field(default_factory=SimConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Config":
        data = data or {}

        sim_data = data.get("simulation", {}) or {}
        sim = SimConfig(
            belt_speed=float(sim_data.get("belt_speed", DEFAULT_BELT_SPEED)),
            tick_hz=int(sim_data.get("tick_hz", DEFAULT_TICK_HZ)),
            max_catchup_ticks=int(sim_data.get("max_catchup_ticks", DEFAULT_MAX_CATCHUP_TICKS)),
        )
        sim.validate()

        belts: List[BeltConfig] = []
        seen: Set[Coord] = set()
        for b in (data.get("network", {}) or {}).get("belts", []):
            if "pos" not in b or "dir" not in b:
                raise ValueError(f"Belt entry needs 'pos' and 'dir': {b}")
            pos = as_coord(b["pos"])
            if pos in seen:
                raise ValueError(f"Duplicate belt position in network: {pos}")
            seen.add(pos)
            belts.append(BeltConfig(pos=pos, direction=Direction.parse(b["dir"])))

        return Config(sim=sim, network=NetworkConfig(belts=belts))

    @staticmethod
    def from_yaml(path: str) -> "Config":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return Config.from_dict(data)
