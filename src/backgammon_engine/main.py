"""Command-line entrypoint for backgammon-engine.

Sets up a game from the command-line rule flags and prints it, optionally
after the opening roll. Useful for eyeballing rule settings and the board
rendering.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from backgammon_engine import __version__
from backgammon_engine.core.board import board_to_string
from backgammon_engine.core.dice import new_rng
from backgammon_engine.core.errors import BackgammonError
from backgammon_engine.core.game import Game
from backgammon_engine.core.rules import Rules


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="backgammon-engine",
        description="Backgammon rules engine",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"backgammon-engine {__version__}",
    )
    parser.add_argument("--points", type=int, default=7, help="Points to win the match")
    parser.add_argument(
        "--crawford",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Apply the Crawford rule",
    )
    parser.add_argument("--holland", action="store_true", help="Apply the Holland rule")
    parser.add_argument(
        "--murphy",
        type=int,
        metavar="LIMIT",
        default=None,
        help="Apply automatic doubles (0 = no limit)",
    )
    parser.add_argument("--jacoby", action="store_true", help="Apply the Jacoby rule")
    parser.add_argument("--beaver", action="store_true", help="Allow beavers")
    parser.add_argument("--raccoon", action="store_true", help="Allow raccoons (implies --beaver)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the dice")
    parser.add_argument("--opening", action="store_true", help="Roll the opening")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level",
    )
    return parser


def rules_from_args(args: argparse.Namespace) -> Rules:
    """Translate parsed flags into Rules."""
    rules = Rules(crawford=args.crawford).with_points(args.points)
    if args.holland:
        rules = rules.with_holland()
    if args.murphy is not None:
        rules = rules.with_murphy(args.murphy)
    if args.jacoby:
        rules = rules.with_jacoby()
    if args.beaver:
        rules = rules.with_beaver()
    if args.raccoon:
        rules = rules.with_raccoon()
    return rules


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint used by the `backgammon-engine` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        game = Game(rules_from_args(args), rng=new_rng(args.seed))
        if args.opening:
            game.start()
    except BackgammonError as e:
        parser.error(str(e))

    print(game)
    print(board_to_string(game.board))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
