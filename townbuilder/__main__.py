"""
Headless Townbuilder runner.

Starts (or loads) a session, optionally places buildings, advances it on a
simulated clock and prints a resource and goal summary.

Usage:
    python -m townbuilder --seed 42 --ticks 600 --place house:15:10 --show-map
"""

import argparse
from typing import List, Optional, Sequence, Tuple

from .config import Config
from .environment import render_ascii
from .logging_utils import Color, colored, log_error, log_info
from .orchestrator import Orchestrator
from .persistence import JsonFileSaveStore
from .schemas import BuildingType, GoalTier


def parse_placement(value: str) -> Tuple[BuildingType, int, int]:
    """Parse ``KIND:X:Y`` (e.g. ``house:15:10``)."""
    try:
        kind, x, y = value.split(":")
        return BuildingType(kind.lower()), int(x), int(y)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid placement {value!r}; expected KIND:X:Y with KIND one of "
            f"{', '.join(kind.value for kind in BuildingType)}"
        ) from exc


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Townbuilder settlement simulation")
    parser.add_argument(
        "--tier",
        choices=[tier.value for tier in GoalTier],
        default=GoalTier.BRONZE.value,
        help="Goal tier for a new game",
    )
    parser.add_argument("--seed", type=int, help="Map seed for reproducibility")
    parser.add_argument("--ticks", type=int, default=100, help="Number of ticks to simulate")
    parser.add_argument("--step-ms", type=float, default=100.0, help="Simulated milliseconds per tick")
    parser.add_argument("--save-dir", type=str, help=f"Save directory (default: {Config.SAVE_DIR})")
    parser.add_argument("--load", action="store_true", help="Resume the saved game instead of starting a new one")
    parser.add_argument("--save", action="store_true", help="Save the game after the run")
    parser.add_argument("--show-map", action="store_true", help="Print the map after the run")
    parser.add_argument(
        "--place",
        type=parse_placement,
        action="append",
        default=[],
        metavar="KIND:X:Y",
        help="Place a building before running (repeatable)",
    )
    return parser.parse_args(argv)


def print_summary(game: Orchestrator) -> None:
    state = game.get_game_state()
    print(colored(f"\n=== {state.mode.value.upper()} | {game.formatted_game_time()} | seed {state.seed} ===", Color.CYAN, bold=True))
    print(f"  Resources: {game.resource_summary()}")
    print(f"  Population: {state.population.current:.2f}/{state.population.capacity:.0f}")
    print(f"  Buildings: {len(state.buildings)}")
    for goal in state.goals:
        marker = colored("[x]", Color.GREEN) if goal.completed else "[ ]"
        print(f"  {marker} {goal.title}: {goal.description}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    Config.validate()

    store = JsonFileSaveStore(args.save_dir) if args.save_dir else JsonFileSaveStore()
    game = Orchestrator(store=store, clock=lambda: 0.0)

    if args.load:
        if not game.load_game():
            return 1
    else:
        game.start_new_game(GoalTier(args.tier), args.seed)

    placements: List[Tuple[BuildingType, int, int]] = args.place
    for kind, x, y in placements:
        if game.place_building(kind, x, y):
            log_info(f"Placed {kind.value} at ({x}, {y})")
        else:
            log_error(f"Could not place {kind.value} at ({x}, {y})")

    ticks = game.run(args.ticks, args.step_ms)
    log_info(f"Ran {ticks} tick(s) of {args.step_ms:g}ms")

    print_summary(game)
    if args.show_map:
        print()
        print(render_ascii(game.grid))

    if args.save and not game.save_game():
        log_error("Nothing saved: the game is not in playing mode")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
