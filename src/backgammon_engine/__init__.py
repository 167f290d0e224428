"""
Backgammon Engine - rules engine for a single game of backgammon.
"""

__version__ = "0.1.0"

# Core exports
from backgammon_engine.core.types import (
    Player,
    MoveStep,
    BoardDisplay,
    GameOutcome,
    GamePhase,
)
from backgammon_engine.core.rules import Rules
from backgammon_engine.core.dice import Dices
from backgammon_engine.core.cube import Cube
from backgammon_engine.core.board import Board
from backgammon_engine.core.game import Game
from backgammon_engine.core.errors import BackgammonError

__all__ = [
    "Player",
    "MoveStep",
    "BoardDisplay",
    "GameOutcome",
    "GamePhase",
    "Rules",
    "Dices",
    "Cube",
    "Board",
    "Game",
    "BackgammonError",
]
