"""pygame based realtime viewer.

The viewer is a host of the engine, nothing more:

- `BeltSystem` owns the world and all tick progression.
- The viewer paces ticks with `BeltSystem.advance()` and renders `snapshot()`.
- An engine failure freezes the view and shows the error; it is not recovered.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Deque, Optional, Tuple
from collections import deque
import logging
import time

from .errors import BeltSimError
from .models import Coord, Direction, LaneType, Snapshot
from .sim import BeltSystem
from .vec2 import Vec2

log = logging.getLogger(__name__)


@dataclass
class PygameVizConfig:
    cell_size: int = 48
    margin: int = 40
    log_height: int = 90
    min_cells: int = 8


def _right_of(direction: Direction) -> Vec2:
    # Screen y grows downwards, so rotating (x, y) -> (-y, x) turns clockwise.
    v = direction.vector
    return Vec2(-v.y, v.x)


def lane_entry(direction: Direction, lane_type: LaneType) -> Vec2:
    """Where items of a lane start, relative to the tile center (tile units)."""
    if lane_type is LaneType.OUT:
        return Vec2.ZERO
    if lane_type is LaneType.IN_STRAIGHT:
        return direction.vector.mul(-0.5)
    if lane_type is LaneType.IN_RIGHT:
        return _right_of(direction).mul(0.5)
    return _right_of(direction).mul(-0.5)


def item_offset(direction: Direction, lane_type: LaneType, value: float) -> Vec2:
    """Item position relative to the tile center (tile units).

    Input lanes run from their entry edge to the center, the Out lane from the
    center to the exit edge.
    """
    if lane_type is LaneType.OUT:
        return direction.vector.mul(value)
    entry = lane_entry(direction, lane_type)
    return entry.add(Vec2.ZERO.sub(entry).norm().mul(value))


def view_bounds(snap: Snapshot, min_cells: int = 8) -> Tuple[Coord, Coord]:
    """(min_x, min_y), (max_x, max_y) covering every belt, at least min_cells wide."""
    if not snap.belts:
        return (0, 0), (min_cells - 1, min_cells - 1)
    xs = [p[0] for p in snap.belts]
    ys = [p[1] for p in snap.belts]
    x0, y0 = min(xs) - 1, min(ys) - 1
    x1 = max(max(xs) + 1, x0 + min_cells - 1)
    y1 = max(max(ys) + 1, y0 + min_cells - 1)
    return (x0, y0), (x1, y1)


def run_visualization_pygame(
    system: BeltSystem,
    *,
    max_ticks: int = 3600,
    fps: int = 60,
    cfg: Optional[PygameVizConfig] = None,
    window_title: str = "Belt Simulator (pygame)",
) -> None:
    """Run a realtime pygame window.

    Parameters
    ----------
    system:
        The simulator instance.
    max_ticks:
        Stop after this many ticks (close window earlier to stop).
    fps:
        Target frames-per-second for rendering.
    cfg:
        Visual config (cell size, margins, ...).

    Keys: SPACE pause/resume, N single step while paused, ESC quit.
    """

    try:
        import pygame  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError(
            "pygame is required for the pygame visualization. "
            "Install it with: pip install pygame"
        ) from e

    cfg = cfg or PygameVizConfig()
    cell = cfg.cell_size
    margin = cfg.margin
    log_h = cfg.log_height

    (bx0, by0), (bx1, by1) = view_bounds(system.snapshot(), cfg.min_cells)

    pygame.init()
    screen_w = (bx1 - bx0 + 1) * cell + margin * 2
    screen_h = (by1 - by0 + 1) * cell + margin * 2 + log_h
    screen = pygame.display.set_mode((screen_w, screen_h))
    pygame.display.set_caption(window_title)

    clock = pygame.time.Clock()
    font = pygame.font.SysFont("Arial", 14)
    font_small = pygame.font.SysFont("Arial", 12)

    messages: Deque[str] = deque(maxlen=4)
    paused = False
    failure: Optional[BeltSimError] = None
    last_time = time.time()

    def _tile_center_px(x: float, y: float) -> Tuple[float, float]:
        return (
            margin + (x - bx0) * cell + cell / 2.0,
            margin + (y - by0) * cell + cell / 2.0,
        )

    def _step_guarded(fn, *args) -> None:
        nonlocal failure
        try:
            fn(*args)
        except BeltSimError as e:
            failure = e
            messages.append(f"[tick {system.tick}] HALTED: {e}")

    running = True
    while running:
        now = time.time()
        dt_frame = now - last_time
        last_time = now

        # ---- events ----
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key == pygame.K_n and paused and failure is None and system.tick < max_ticks:
                    _step_guarded(system.step)

        # ---- tick update ----
        if not paused and failure is None:
            if system.tick >= max_ticks:
                running = False
                continue
            _step_guarded(system.advance, dt_frame, max_ticks - system.tick)

        snap = system.snapshot()

        # ---- render ----
        screen.fill((30, 30, 30))

        for gy in range(by0, by1 + 1):
            for gx in range(bx0, bx1 + 1):
                rect = pygame.Rect(margin + (gx - bx0) * cell, margin + (gy - by0) * cell, cell, cell)
                pygame.draw.rect(screen, (50, 50, 50), rect, 1)

        for pos, bv in snap.belts.items():
            cx, cy = _tile_center_px(*pos)
            rect = pygame.Rect(0, 0, cell - 6, cell - 6)
            rect.center = (int(cx), int(cy))
            linked = bv.output is not None
            pygame.draw.rect(screen, (90, 90, 110) if linked else (110, 80, 80), rect, 2)

            d = bv.direction.vector
            end = (cx + d.x * cell * 0.4, cy + d.y * cell * 0.4)
            pygame.draw.line(screen, (140, 140, 140), (int(cx), int(cy)), (int(end[0]), int(end[1])), 2)

            for lane_type, lane in bv.lanes.items():
                color = (255, 200, 80) if lane_type is LaneType.OUT else (80, 220, 255)
                for value in lane:
                    off = item_offset(bv.direction, lane_type, min(value, 0.5))
                    px, py = _tile_center_px(pos[0] + off.x, pos[1] + off.y)
                    pygame.draw.circle(screen, color, (int(px), int(py)), 5)

        # UI text
        info = f"Tick: {snap.tick} | Belts: {len(snap.belts)} | Items: {snap.item_count}"
        if failure is not None:
            info += " | HALTED"
        elif paused:
            info += " | PAUSED (SPACE resume, N step)"
        screen.blit(font.render(info, True, (255, 255, 255)), (10, screen_h - log_h + 10))

        y0 = screen_h - log_h + 32
        for i, line in enumerate(messages):
            surf = font_small.render(line, True, (220, 120, 120))
            screen.blit(surf, (10, y0 + i * 16))

        pygame.display.flip()
        clock.tick(max(1, fps))

    pygame.quit()
    log.info("viewer closed at tick %d", system.tick)
