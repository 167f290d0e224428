"""Doubling cube.

This module implements the doubling cube:
- Cube state (stake exponent, owner)
- Offer arithmetic (who may be offered the cube, the next value)
- The Crawford/Holland gate deciding whether doubling is allowed at all

The cube can be offered to either player the first time. After that it can
only be offered to the player who does not hold it, i.e. only its holder
may redouble.
"""

from backgammon_engine.core.errors import DoublingNotPermitted, InvalidCubeValue
from backgammon_engine.core.rules import Rules
from backgammon_engine.core.types import Player


# Completed turns after the Crawford game before the Holland rule allows
# doubling again (both players rolled at least twice).
HOLLAND_TURNS = 4


class Cube:
    """Doubling cube.

    The value is stored as an exponent of two so it is a power of two by
    construction.

    Args:
        exponent: Stake is 2 ** exponent
        owner: Player holding the cube, NOBODY while centred
    """

    def __init__(self, exponent: int = 0, owner: Player = Player.NOBODY):
        if exponent < 0:
            raise InvalidCubeValue(f"Cube exponent must be >= 0, got {exponent}")
        self.exponent = exponent
        self._owner = owner

    def value(self) -> int:
        """Current stake multiplier."""
        return 2 ** self.exponent

    def owner(self) -> Player:
        return self._owner

    def set(self, value: int) -> None:
        """Set the stake directly.

        Args:
            value: New stake, a power of two >= 1

        Raises:
            InvalidCubeValue: If value is not a power of two
        """
        if not is_power_of_two(value):
            raise InvalidCubeValue(f"Cube value must be a power of two, got {value}")
        self.exponent = value.bit_length() - 1

    def set_owner(self, owner: Player) -> None:
        self._owner = owner

    def offer(self, to: Player) -> int:
        """Value of the cube if it were offered to ``to`` now.

        Does not change the cube; the caller commits the value and the new
        owner once the offer is taken.

        Args:
            to: Player who would receive the cube

        Returns:
            Twice the current value

        Raises:
            DoublingNotPermitted: If ``to`` already holds the cube
        """
        if self._owner == Player.NOBODY or self._owner != to:
            return 2 ** (self.exponent + 1)
        raise DoublingNotPermitted(f"{to} already owns the cube")

    def copy(self) -> "Cube":
        return Cube(exponent=self.exponent, owner=self._owner)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cube):
            return NotImplemented
        return self.exponent == other.exponent and self._owner == other._owner

    def __repr__(self) -> str:
        return f"Cube(exponent={self.exponent}, owner={self._owner!r})"

    def __str__(self) -> str:
        return f"{self.value()} (owner: {self._owner})"


def is_power_of_two(value: int) -> bool:
    return isinstance(value, int) and value >= 1 and value & (value - 1) == 0


def doubling_allowed(
    rules: Rules,
    crawford: bool,
    post_crawford: bool = False,
    since_crawford: int = 0,
) -> bool:
    """Check whether the match situation allows doubling in this game.

    Doubling is disabled in the Crawford game. With the Holland rule it
    stays disabled in the following game until HOLLAND_TURNS turns have
    been completed.

    Args:
        rules: Rule settings
        crawford: Whether the current game is the Crawford game
        post_crawford: Whether the current game directly follows it
        since_crawford: Completed turns in the current game

    Returns:
        True if a double may be offered (cube ownership aside)
    """
    if not rules.crawford:
        return True
    if crawford:
        return False
    if rules.holland and post_crawford and since_crawford < HOLLAND_TURNS:
        return False
    return True


def game_points(base_points: int, cube: Cube) -> int:
    """Calculate total points won in a game considering the cube.

    Args:
        base_points: Base game points (1=normal, 2=gammon, 3=backgammon)
        cube: Current cube

    Returns:
        Total points = base_points * cube value
    """
    return base_points * cube.value()
