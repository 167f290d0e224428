"""Core game logic and data structures."""

from backgammon_engine.core.types import (
    BAR,
    OFF,
    Player,
    Point,
    MoveStep,
    BoardDisplay,
    GameOutcome,
    GamePhase,
    EndReason,
)
from backgammon_engine.core.rules import Rules
from backgammon_engine.core.dice import Dices, roll_dice, new_rng
from backgammon_engine.core.cube import Cube, doubling_allowed
from backgammon_engine.core.board import Board, mirror
from backgammon_engine.core.game import Game

__all__ = [
    "BAR",
    "OFF",
    "Player",
    "Point",
    "MoveStep",
    "BoardDisplay",
    "GameOutcome",
    "GamePhase",
    "EndReason",
    "Rules",
    "Dices",
    "roll_dice",
    "new_rng",
    "Cube",
    "doubling_allowed",
    "Board",
    "mirror",
    "Game",
]
