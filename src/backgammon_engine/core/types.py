"""Core type definitions for the backgammon rules engine.

This module defines the small value types shared by the board, dice, cube
and game modules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


# ==============================================================================
# BOARD CONSTANTS
# ==============================================================================

# Type aliases
Point = int  # 0-23, from the moving player's own perspective
CheckerCount = int  # 0-15

NUM_POINTS = 24
NUM_CHECKERS = 15
HOME_POINTS = 6  # points 0-5 are a player's home board

BAR = 24  # source index for a checker entering from the bar
OFF = -1  # destination index for a checker borne off


class Player(Enum):
    """The two sides, plus NOBODY for "no one yet" / "unowned"."""
    NOBODY = "nobody"
    PLAYER0 = "player0"
    PLAYER1 = "player1"

    def other(self) -> "Player":
        """Return the opponent. NOBODY maps to itself."""
        if self == Player.PLAYER0:
            return Player.PLAYER1
        if self == Player.PLAYER1:
            return Player.PLAYER0
        return Player.NOBODY

    @property
    def index(self) -> int:
        """Row of this player in per-player arrays (0 or 1)."""
        if self == Player.NOBODY:
            raise ValueError("Player.NOBODY has no board side")
        return 0 if self == Player.PLAYER0 else 1

    def __str__(self) -> str:
        if self == Player.NOBODY:
            return "Nobody"
        return "Player 0" if self == Player.PLAYER0 else "Player 1"


PLAYERS = (Player.PLAYER0, Player.PLAYER1)


# Dice type
Dice = Tuple[int, int]  # (die0, die1) where 1 <= die0, die1 <= 6


@dataclass(frozen=True)
class MoveStep:
    """A single checker movement.

    Attributes:
        from_point: Starting point (0-23, or BAR when entering)
        to_point: Ending point (0-23, or OFF when bearing off)
        die_used: Which die value was used (1-6)
        hits_opponent: Whether this move hit an opponent blot
    """
    from_point: Point
    to_point: Point
    die_used: int
    hits_opponent: bool = False

    def __post_init__(self):
        """Validate move step."""
        assert 0 <= self.from_point <= BAR, f"Invalid from_point: {self.from_point}"
        assert OFF <= self.to_point < NUM_POINTS, f"Invalid to_point: {self.to_point}"
        assert 1 <= self.die_used <= 6, f"Invalid die: {self.die_used}"

    @property
    def is_entry(self) -> bool:
        return self.from_point == BAR

    @property
    def is_bear_off(self) -> bool:
        return self.to_point == OFF


@dataclass
class BoardDisplay:
    """Both sides of the board in one signed view.

    Attributes:
        board: 24 signed counts from Player 0's perspective. Positive
            amounts are Player 0's checkers, negative amounts Player 1's.
        bar: Checkers on the bar for (Player 0, Player 1)
        off: Checkers borne off for (Player 0, Player 1)
    """
    board: List[int] = field(default_factory=lambda: [0] * NUM_POINTS)
    bar: Tuple[int, int] = (0, 0)
    off: Tuple[int, int] = (0, 0)


# ==============================================================================
# GAME STATE
# ==============================================================================


class GamePhase(Enum):
    """Which action the game is waiting for."""
    OPENING = "opening"  # nobody to play yet, opening roll pending
    ROLL = "roll"  # who_plays must roll
    MOVE = "move"  # who_plays must play the rolled dice
    CUBE_OFFERED = "cube_offered"  # who_plays must answer a double
    ENDED = "ended"


# ==============================================================================
# GAME RESULTS
# ==============================================================================


class EndReason(Enum):
    """How a game came to an end."""
    BORNE_OFF = "borne_off"
    DOUBLE_DECLINED = "double_declined"


@dataclass
class GameOutcome:
    """Game outcome with points won.

    Attributes:
        winner: Which player won
        points: Points won, cube value included
        multiplier: 1=single, 2=gammon, 3=backgammon
        reason: Why the game ended
    """
    winner: Player
    points: int
    multiplier: int = 1
    reason: EndReason = EndReason.BORNE_OFF

    def __post_init__(self):
        """Validate outcome."""
        assert self.winner != Player.NOBODY, "An outcome needs a winner"
        assert self.multiplier in [1, 2, 3], f"Multiplier must be 1, 2, or 3, got {self.multiplier}"

    def is_gammon(self) -> bool:
        """Check if outcome is a gammon (includes backgammon)."""
        return self.multiplier >= 2

    def is_backgammon(self) -> bool:
        """Check if outcome is a backgammon."""
        return self.multiplier == 3
