"""Dice utilities for backgammon.

This module handles dice rolling and the per-turn consumption record.

A roll always yields four consumption slots. Slot i plays face
``values[i % 2]``: doubles leave all four slots live, other rolls pre-mark
slots 2 and 3 as consumed since those moves do not exist.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

from backgammon_engine.core.errors import DiceInvalid
from backgammon_engine.core.types import Dice

Consumed = Tuple[bool, bool, bool, bool]

ALL_CONSUMED: Consumed = (True, True, True, True)


@dataclass(frozen=True)
class Dices:
    """The last roll and which of its moves have been played.

    Attributes:
        values: The two face values (0, 0) before the first roll
        consumed: One flag per playable move
    """
    values: Dice = (0, 0)
    consumed: Consumed = ALL_CONSUMED

    @classmethod
    def from_values(cls, die0: int, die1: int) -> "Dices":
        """Create fresh, fully playable dice for a given roll.

        Args:
            die0: First die (1-6)
            die1: Second die (1-6)

        Returns:
            Dices with 4 live slots for doubles, 2 otherwise

        Raises:
            DiceInvalid: If a value is outside 1-6
        """
        for die in (die0, die1):
            if not 1 <= die <= 6:
                raise DiceInvalid(f"Die value {die} must be between 1 and 6")
        moves = len(dice_values((die0, die1)))
        consumed = tuple(slot >= moves for slot in range(4))
        return cls(values=(die0, die1), consumed=consumed)

    def is_doubles(self) -> bool:
        return is_doubles(self.values)

    def is_consumed(self) -> bool:
        """True once every slot has been played."""
        return all(self.consumed)

    def _slot_face(self, slot: int) -> int:
        return self.values[slot % 2]

    def available(self) -> List[int]:
        """Face values still to be played, in slot order."""
        return [
            self._slot_face(slot)
            for slot, used in enumerate(self.consumed)
            if not used
        ]

    def can_use(self, value: int) -> bool:
        return value in self.available()

    def consume(self, value: int) -> "Dices":
        """Mark the first live slot showing ``value`` as played.

        Args:
            value: Face value used by a move

        Returns:
            New Dices with that slot consumed

        Raises:
            DiceInvalid: If no live slot shows this value
        """
        for slot, used in enumerate(self.consumed):
            if not used and self._slot_face(slot) == value:
                consumed = list(self.consumed)
                consumed[slot] = True
                return replace(self, consumed=tuple(consumed))
        raise DiceInvalid(
            f"Die value {value} not available (rolled {self.values}, "
            f"remaining {self.available()})"
        )

    def exhaust(self) -> "Dices":
        """Forfeit every remaining move."""
        return replace(self, consumed=ALL_CONSUMED)

    def __str__(self) -> str:
        if self.values == (0, 0):
            return "not rolled"
        return f"{dice_to_string(self.values)} (remaining {self.available()})"


def new_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a random source for dice.

    Args:
        seed: Fixed seed, or None to seed from OS entropy

    Returns:
        NumPy random generator
    """
    return np.random.default_rng(seed)


def roll_dice(rng: np.random.Generator) -> Dices:
    """Roll two dice.

    Args:
        rng: NumPy random generator, or any object with a compatible
            ``integers(low, high)`` method

    Returns:
        Fresh Dices; the caller replaces its previous roll with it
    """
    die0 = int(rng.integers(1, 7))
    die1 = int(rng.integers(1, 7))
    return Dices.from_values(die0, die1)


def is_doubles(dice: Dice) -> bool:
    """Check if dice roll is doubles.

    Args:
        dice: Dice roll tuple

    Returns:
        True if both dice show the same value
    """
    return dice[0] == dice[1]


def dice_values(dice: Dice) -> List[int]:
    """Get the dice values to use for moves.

    For doubles, you get 4 moves. For non-doubles, you get 2 moves.

    Examples:
        >>> dice_values((3, 5))
        [3, 5]
        >>> dice_values((4, 4))
        [4, 4, 4, 4]
    """
    if is_doubles(dice):
        return [dice[0]] * 4
    else:
        return [dice[0], dice[1]]


def dice_to_string(dice: Dice) -> str:
    """Convert dice to readable string.

    Examples:
        >>> dice_to_string((3, 5))
        '3-5'
        >>> dice_to_string((4, 4))
        'Double 4s'
    """
    if is_doubles(dice):
        return f"Double {dice[0]}s"
    else:
        return f"{dice[0]}-{dice[1]}"
