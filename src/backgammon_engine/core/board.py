"""Board representation and checker bookkeeping.

Each player sees the board from their own side: they move from point 23
towards point 0, their home board is points 0-5, and a checker moving past
point 0 is borne off. Point p of one player is point 23 - p of the other
(see ``mirror``).

Board Layout (Player 0's numbering, Player 1's in brackets):

    12 13 14 15 16 17    18 19 20 21 22 23
    (11 10  9  8  7  6)  ( 5  4  3  2  1  0)   Player 1 home
    +------------------+------------------+
    |                  |                  |
    |                  |                  |
    +------------------+------------------+
    (12 13 14 15 16 17)  (18 19 20 21 22 23)
    11 10  9  8  7  6     5  4  3  2  1  0    Player 0 home

Each side's counts are kept separately; the signed single-array view used
for display is derived by ``Board.get``.
"""

from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from backgammon_engine.core.errors import (
    FieldBlocked,
    FieldInvalid,
    MoveInvalid,
    PlayerInvalid,
    PositionInvalid,
)
from backgammon_engine.core.types import (
    HOME_POINTS,
    NUM_CHECKERS,
    NUM_POINTS,
    PLAYERS,
    BoardDisplay,
    CheckerCount,
    Player,
    Point,
)


# Standard starting position, identical for both sides in own orientation
STARTING_POINTS = {23: 2, 12: 5, 7: 3, 5: 5}


def mirror(point: Point) -> Point:
    """Translate a point into the opponent's numbering."""
    return NUM_POINTS - 1 - point


def _side(player: Player) -> int:
    if player == Player.NOBODY:
        raise PlayerInvalid("Player.NOBODY has no side of the board")
    return player.index


def _check_point(point: Point) -> None:
    if not 0 <= point < NUM_POINTS:
        raise FieldInvalid(f"Point {point} is outside 0-{NUM_POINTS - 1}")


class Board:
    """Checker counts for both players.

    Attributes:
        _points: [2, 24] counts, row = player, column = own-oriented point
        _bar: [2] checkers on the bar
        _off: [2] checkers borne off
    """

    def __init__(self):
        self._points: NDArray[np.int16] = np.zeros((2, NUM_POINTS), dtype=np.int16)
        self._bar: NDArray[np.int16] = np.zeros(2, dtype=np.int16)
        self._off: NDArray[np.int16] = np.zeros(2, dtype=np.int16)
        for point, count in STARTING_POINTS.items():
            self._points[:, point] = count

    # ==========================================================================
    # CONSTRUCTION
    # ==========================================================================

    @classmethod
    def empty(cls) -> "Board":
        """Board with no checkers at all. Only useful for building positions."""
        board = cls()
        board._points[:] = 0
        return board

    @classmethod
    def from_position(
        cls,
        points0: Sequence[int],
        points1: Sequence[int],
        bar: Tuple[int, int] = (0, 0),
        off: Tuple[int, int] = (0, 0),
    ) -> "Board":
        """Build a board from per-player counts.

        Args:
            points0: 24 counts for Player 0, in Player 0's numbering
            points1: 24 counts for Player 1, in Player 1's numbering
            bar: Bar counts (Player 0, Player 1)
            off: Borne-off counts (Player 0, Player 1)

        Returns:
            The board

        Raises:
            PositionInvalid: If a side does not total 15 checkers, a count is
                negative, or both sides occupy the same physical point
        """
        if len(points0) != NUM_POINTS or len(points1) != NUM_POINTS:
            raise PositionInvalid(f"Each side needs exactly {NUM_POINTS} point counts")

        board = cls.empty()
        board._points[0] = np.asarray(points0, dtype=np.int16)
        board._points[1] = np.asarray(points1, dtype=np.int16)
        board._bar[:] = bar
        board._off[:] = off

        if (board._points < 0).any() or (board._bar < 0).any() or (board._off < 0).any():
            raise PositionInvalid("Checker counts cannot be negative")
        for player in PLAYERS:
            total = board.checker_count(player)
            if total != NUM_CHECKERS:
                raise PositionInvalid(f"{player} has {total} checkers, should have {NUM_CHECKERS}")
        # Player 1's row reversed lines up with Player 0's numbering
        shared = (board._points[0] > 0) & (board._points[1][::-1] > 0)
        if shared.any():
            point = int(np.flatnonzero(shared)[0])
            raise PositionInvalid(f"Both players occupy Player 0's point {point}")
        return board

    def copy(self) -> "Board":
        """Create a deep copy of the board."""
        board = Board.empty()
        board._points = self._points.copy()
        board._bar = self._bar.copy()
        board._off = self._off.copy()
        return board

    # ==========================================================================
    # QUERIES
    # ==========================================================================

    def get(self) -> BoardDisplay:
        """Signed view of both sides from Player 0's perspective."""
        signed = self._points[0] - self._points[1][::-1]
        return BoardDisplay(
            board=[int(v) for v in signed],
            bar=(int(self._bar[0]), int(self._bar[1])),
            off=(int(self._off[0]), int(self._off[1])),
        )

    def points(self, player: Player) -> Tuple[int, ...]:
        """A player's 24 counts in their own numbering."""
        return tuple(int(v) for v in self._points[_side(player)])

    def count(self, player: Player, point: Point) -> CheckerCount:
        _check_point(point)
        return int(self._points[_side(player), point])

    def bar(self, player: Player) -> CheckerCount:
        return int(self._bar[_side(player)])

    def off(self, player: Player) -> CheckerCount:
        return int(self._off[_side(player)])

    def checker_count(self, player: Player) -> int:
        """Checkers on points, bar and off combined; always 15 in play."""
        side = _side(player)
        return int(self._points[side].sum() + self._bar[side] + self._off[side])

    def blocked(self, player: Player, point: Point) -> bool:
        """Check whether the opponent holds ``point`` with two or more checkers.

        Args:
            player: Player who wants to land
            point: Point in ``player``'s numbering

        Raises:
            FieldInvalid: If point is outside 0-23
        """
        _check_point(point)
        opponent = _side(player.other())
        return int(self._points[opponent, mirror(point)]) >= 2

    def can_land(self, player: Player, point: Point) -> bool:
        """Empty, own, or an opponent blot (which gets hit)."""
        return not self.blocked(player, point)

    def is_blot(self, player: Player, point: Point) -> bool:
        """Check whether landing on ``point`` would hit a single opposing checker."""
        _check_point(point)
        opponent = _side(player.other())
        return int(self._points[opponent, mirror(point)]) == 1

    def pip_count(self, player: Player) -> int:
        """Calculate pip count for a player.

        A checker on point p needs p + 1 pips to bear off; a checker on the
        bar needs 25.
        """
        side = _side(player)
        distances = np.arange(1, NUM_POINTS + 1)
        return int((self._points[side] * distances).sum() + 25 * self._bar[side])

    def all_home(self, player: Player) -> bool:
        """Check if every checker still in play is in the home board.

        A player can bear off only when this holds.
        """
        side = _side(player)
        if self._bar[side] > 0:
            return False
        return not self._points[side, HOME_POINTS:].any()

    def highest_point(self, player: Player) -> Optional[Point]:
        """Furthest occupied point from home, or None with no checkers on points."""
        occupied = np.flatnonzero(self._points[_side(player)])
        if len(occupied) == 0:
            return None
        return int(occupied[-1])

    # ==========================================================================
    # MUTATORS
    # ==========================================================================

    def set(self, player: Player, point: Point, delta: int) -> bool:
        """Add ``delta`` checkers to a player's point.

        Landing on a point with a single opposing checker hits it: that
        checker moves to the opponent's bar in the same call, so both sides
        keep 15 checkers.

        Args:
            player: Player whose count changes
            point: Point in ``player``'s numbering
            delta: Signed change

        Returns:
            True if an opposing checker was hit

        Raises:
            PlayerInvalid: If player is NOBODY
            FieldInvalid: If point is outside 0-23
            FieldBlocked: If delta > 0 and the point is blocked
            MoveInvalid: If the count would become negative
        """
        side = _side(player)
        _check_point(point)
        if delta > 0 and self.blocked(player, point):
            raise FieldBlocked(f"Point {point} is blocked for {player}")
        new_count = int(self._points[side, point]) + delta
        if new_count < 0:
            raise MoveInvalid(f"{player} has no checker on point {point}")

        hit = delta > 0 and self.is_blot(player, point)
        self._points[side, point] = new_count
        if hit:
            opponent = 1 - side
            self._points[opponent, mirror(point)] = 0
            self._bar[opponent] += 1
        return hit

    def set_bar(self, player: Player, delta: int) -> None:
        """Add ``delta`` checkers to a player's bar.

        Raises:
            PlayerInvalid: If player is NOBODY
            MoveInvalid: If the bar count would become negative
        """
        side = _side(player)
        new_count = int(self._bar[side]) + delta
        if new_count < 0:
            raise MoveInvalid(f"{player} has no checker on the bar")
        self._bar[side] = new_count

    def set_off(self, player: Player, delta: int) -> None:
        """Add ``delta`` checkers to a player's off area.

        Negative deltas are accepted unchecked for undo tooling.

        Raises:
            PlayerInvalid: If player is NOBODY
        """
        self._off[_side(player)] += delta

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            np.array_equal(self._points, other._points)
            and np.array_equal(self._bar, other._bar)
            and np.array_equal(self._off, other._off)
        )

    def __repr__(self) -> str:
        display = self.get()
        return f"Board(board={display.board}, bar={display.bar}, off={display.off})"


# ==============================================================================
# BOARD DISPLAY (for debugging)
# ==============================================================================

def board_to_string(board: Board) -> str:
    """Convert board to string representation.

    Args:
        board: Board to display

    Returns:
        Table of both sides in Player 0's numbering
    """
    display = board.get()
    lines = []
    lines.append("=" * 30)
    lines.append(f"Player 0 pip count: {board.pip_count(Player.PLAYER0)}")
    lines.append(f"Player 1 pip count: {board.pip_count(Player.PLAYER1)}")
    lines.append("")
    lines.append("Point | P0 | P1")
    lines.append("------+----+---")

    for point in range(NUM_POINTS - 1, -1, -1):
        value = display.board[point]
        p0 = value if value > 0 else 0
        p1 = -value if value < 0 else 0
        lines.append(f"  {point:2d}  | {p0:2d} | {p1:2d}")

    lines.append(f"BAR   | {display.bar[0]:2d} | {display.bar[1]:2d}")
    lines.append(f"OFF   | {display.off[0]:2d} | {display.off[1]:2d}")
    lines.append("=" * 30)
    return "\n".join(lines)
