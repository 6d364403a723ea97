from __future__ import annotations

import argparse
import importlib
import logging
import random
import sys

from idleprogress.clock import ManualClock
from idleprogress.definition import GameDefinition
from idleprogress.formatting import format_status
from idleprogress.runtime import ProgressRuntime
from idleprogress.store import JsonSaveStore, MemorySaveStore, SaveStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idleprogress",
        description="idleprogress: headless progression sessions",
    )
    sub = parser.add_subparsers(dest="command")

    sim = sub.add_parser("simulate", help="Run a headless session")
    sim.add_argument("game_module", help="Python module with define_game()")
    sim.add_argument(
        "--seconds", type=float, default=600, help="Simulated session length (s)"
    )
    sim.add_argument(
        "--tick-resolution", type=float, default=None, help="Seconds per tick"
    )
    sim.add_argument("--seed", type=int, default=None, help="Random seed")
    sim.add_argument(
        "--boost-every",
        type=float,
        default=None,
        help="Try to activate the boost every N seconds",
    )
    sim.add_argument(
        "--save-dir", default=None, help="Persist save.json/missions.json here"
    )
    sim.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    return parser


def load_game(module_path: str) -> GameDefinition:
    """Import module and call define_game()."""
    mod = importlib.import_module(module_path)
    if not hasattr(mod, "define_game"):
        print(f"Error: module {module_path!r} has no define_game() function")
        sys.exit(1)
    return mod.define_game()


def build_store(save_dir: str | None) -> SaveStore:
    if save_dir:
        return JsonSaveStore(save_dir)
    return MemorySaveStore()


def run_session(
    runtime: ProgressRuntime,
    seconds: float,
    tick_resolution: float | None = None,
    boost_every: float | None = None,
) -> None:
    """Drive a started runtime for *seconds* of simulated time."""
    step = tick_resolution or 1.0 / runtime.definition.config.tick_rate
    elapsed = 0.0
    next_boost = 0.0 if boost_every else None

    while seconds - elapsed > 1e-9:
        if next_boost is not None and elapsed >= next_boost:
            runtime.activate_boost()
            next_boost += boost_every
        dt = min(step, seconds - elapsed)
        runtime.advance(dt, step=dt)
        elapsed += dt


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "simulate":
        logging.basicConfig(
            level=getattr(logging, args.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        if args.seconds < 0:
            parser.error("--seconds must not be negative")
        if args.tick_resolution is not None and args.tick_resolution <= 0:
            parser.error("--tick-resolution must be positive")
        if args.boost_every is not None and args.boost_every <= 0:
            parser.error("--boost-every must be positive")

        definition = load_game(args.game_module)
        try:
            runtime = ProgressRuntime(
                definition,
                store=build_store(args.save_dir),
                clock=ManualClock(),
                rng=random.Random(args.seed),
            )
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)

        runtime.start()
        run_session(runtime, args.seconds, args.tick_resolution, args.boost_every)
        runtime.shutdown()
        print(format_status(runtime))
