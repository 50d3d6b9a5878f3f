from __future__ import annotations

from typing import Dict, Optional
import logging

from .config import Config
from .engine import item_count, place_or_toggle_belt, remove_belt, tick
from .errors import BeltSimError, SimulationHalted
from .models import BeltView, Coord, Direction, Snapshot, World
from .resolver import resolve_outputs

log = logging.getLogger(__name__)


class BeltSystem:
    """Single-owner host facade around a World.

    - Topology changes (place/remove) and ticks run on the caller's thread,
      one at a time; nothing here locks.
    - step() runs exactly one tick. advance() converts elapsed real time into
      whole ticks for realtime hosts; ticks that do not fit the catch-up cap
      are dropped, not backfilled later.
    - The first engine error halts the system. It is logged and re-raised,
      and every later step() raises SimulationHalted.
    """

    def __init__(self, world: Optional[World] = None, config: Optional[Config] = None) -> None:
        self.config = config or Config()
        self.config.sim.validate()
        self.world = world if world is not None else World()
        resolve_outputs(self.world)

        self.halted: Optional[BaseException] = None
        self._accum: float = 0.0

    # ---------------------------
    # Construction
    # ---------------------------

    @staticmethod
    def from_config(cfg: Config) -> "BeltSystem":
        world = World()
        system = BeltSystem(world=world, config=cfg)
        for b in cfg.network.belts:
            place_or_toggle_belt(world, b.pos, b.direction)
        log.info("built network: %d belts", len(world))
        return system

    @staticmethod
    def from_yaml(path: str) -> "BeltSystem":
        return BeltSystem.from_config(Config.from_yaml(path))

    # ---------------------------
    # Public API
    # ---------------------------

    @property
    def tick(self) -> int:
        return self.world.tick

    def place(self, position: Coord, direction: Direction) -> None:
        place_or_toggle_belt(self.world, position, direction)

    def remove(self, position: Coord) -> None:
        remove_belt(self.world, position)

    def step(self) -> int:
        if self.halted is not None:
            raise SimulationHalted(self.halted)
        try:
            tick(self.world, self.config.sim.step)
        except BeltSimError as e:
            self.halted = e
            log.error("tick %d failed, simulation halted: %s", self.world.tick, e)
            raise
        return self.world.tick

    def run(self, ticks: int) -> int:
        for _ in range(ticks):
            self.step()
        return self.world.tick

    def advance(self, elapsed: float, limit: Optional[int] = None) -> int:
        """Run the whole ticks covered by `elapsed` seconds; returns ticks run.

        `limit` caps the ticks run by this call; time for ticks held back stays
        in the accumulator.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed must be >= 0, got {elapsed}")
        dt = self.config.sim.dt
        cap = self.config.sim.max_catchup_ticks
        self._accum += elapsed

        due = int(self._accum / dt)
        if due > cap:
            log.warning("running %d ticks behind; dropping %d", due, due - cap)
            self._accum = 0.0
            due = cap
        else:
            self._accum -= due * dt
        if limit is not None and due > limit:
            held = due - max(limit, 0)
            self._accum += held * dt
            due -= held

        for _ in range(due):
            self.step()
        return due

    def snapshot(self) -> Snapshot:
        belts: Dict[Coord, BeltView] = {
            pos: BeltView(
                position=b.position,
                direction=b.direction,
                output=b.output,
                lanes={lt: tuple(lane) for lt, lane in b.lanes.items()},
            )
            for pos, b in self.world.entities.items()
        }
        return Snapshot(tick=self.world.tick, belts=belts, item_count=item_count(self.world))
