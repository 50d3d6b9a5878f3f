from __future__ import annotations

import argparse
import logging

from belt_sim.errors import BeltSimError
from belt_sim.logging_setup import setup_logging
from belt_sim.serialize import save_world
from belt_sim.sim import BeltSystem

log = logging.getLogger("run_demo")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", type=str, default="example_config.yaml")
    ap.add_argument("--max-ticks", type=int, default=600)
    ap.add_argument(
        "--fps",
        type=int,
        default=60,
        help="(pygame only) Target FPS for rendering.",
    )
    ap.add_argument("--no-viz", action="store_true")
    ap.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    ap.add_argument("--log-file", type=str, default=None)
    ap.add_argument("--save", type=str, default=None, help="Write the final world to this YAML file.")
    args = ap.parse_args()

    setup_logging(getattr(logging, args.log_level), log_file=args.log_file)

    system = BeltSystem.from_yaml(args.config)

    if args.no_viz:
        try:
            system.run(args.max_ticks)
        except BeltSimError as e:
            # Log-and-freeze: keep the world as it was at the failing tick.
            log.error("stopped at tick %d: %s", system.tick, e)
        snap = system.snapshot()
        print("\n=== DONE ===")
        print(f"tick={snap.tick}")
        print(f"belts={len(snap.belts)} items_in_flight={snap.item_count}")
    else:
        # Import lazily so headless users don't need pygame installed.
        from belt_sim.viz_pygame import run_visualization_pygame

        run_visualization_pygame(
            system,
            max_ticks=args.max_ticks,
            fps=args.fps,
            window_title="Belt Simulator (pygame)",
        )

    if args.save:
        save_world(system.world, args.save)
        log.info("saved world to %s", args.save)


if __name__ == "__main__":
    main()
