"""Command line launcher for Grid Snake."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Grid Snake simulation runner and config tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- run ---
    run_p = sub.add_parser("run", help="Run a game in the terminal.")
    run_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    run_p.add_argument("--width", type=int, default=None)
    run_p.add_argument("--height", type=int, default=None)
    run_p.add_argument("--food", type=int, default=None)
    run_p.add_argument("--interval-ms", type=int, default=None)
    run_p.add_argument("--seed", type=int, default=None)
    run_p.add_argument(
        "--variant", type=str, default=None,
        choices=["standard", "random_growth", "restless"],
        help="Variant applied to every configured snake.",
    )
    run_p.add_argument(
        "--keys", type=str, default="",
        help='Scripted key presses, e.g. "3:ArrowUp,7:ArrowLeft".',
    )
    run_p.add_argument("--max-ticks", type=int, default=None)
    run_p.add_argument(
        "--scale", type=int, default=None,
        help="Pixels per cell; only affects the image written by --save-frame.",
    )
    run_p.add_argument(
        "--save-frame", type=str, default=None,
        help="Write the last rendered frame, scaled to pixels, as a .npy array.",
    )
    run_p.add_argument(
        "--quiet", action="store_true", help="Do not print frames.",
    )

    # --- dump-config ---
    dump_p = sub.add_parser(
        "dump-config", help="Write the default configuration as JSON.",
    )
    dump_p.add_argument(
        "output", nargs="?", default=None,
        help="Destination file (prints to stdout when omitted).",
    )

    return parser


def _load_config(args: argparse.Namespace):
    from grid_snake.config import SimulationConfig
    from grid_snake.policies import AgentVariant

    config = (
        SimulationConfig.load(args.config)
        if args.config else SimulationConfig()
    )

    overrides: dict = {}
    flag_map = {
        "width": "width",
        "height": "height",
        "food": "food_count",
        "interval_ms": "tick_interval_ms",
        "seed": "seed",
        "scale": "scale",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val

    if args.variant is not None:
        variant = AgentVariant(args.variant)
        overrides["agents"] = tuple(
            dataclasses.replace(a, variant=variant) for a in config.agents
        )

    if overrides:
        config = dataclasses.replace(config, **overrides)
    return config


def _run_game(args: argparse.Namespace) -> int:
    from grid_snake.controls import KeyInput, parse_key_script
    from grid_snake.engine import Simulation
    from grid_snake.render import FrameRenderer
    from grid_snake.scheduler import IntervalScheduler

    config = _load_config(args)
    key_schedule = parse_key_script(args.keys)

    renderer = FrameRenderer(config.width, config.height, scale=config.scale)
    simulation = Simulation(config, renderer=renderer)
    keys = KeyInput()
    keys.attach(simulation)

    def press_scheduled(sim: Simulation) -> None:
        for key in key_schedule.get(sim.tick_count, []):
            keys.press(key)

    def on_tick(sim: Simulation) -> None:
        if not args.quiet:
            print(renderer.to_text(), end="\n\n")  # noqa: T201
        press_scheduled(sim)

    press_scheduled(simulation)
    scheduler = IntervalScheduler(
        simulation, on_tick=on_tick, max_ticks=args.max_ticks,
    )
    asyncio.run(scheduler.run())

    if args.save_frame:
        import numpy as np

        np.save(args.save_frame, renderer.to_pixels())
        logger.info("Saved final frame to %s", args.save_frame)

    print(  # noqa: T201
        f"Finished after {simulation.tick_count} ticks "
        f"({simulation.state.value})."
    )
    return 0


def _run_dump_config(args: argparse.Namespace) -> int:
    import json

    from grid_snake.config import SimulationConfig

    config = SimulationConfig()
    if args.output:
        config.save(args.output)
    else:
        print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "run": _run_game,
        "dump-config": _run_dump_config,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
