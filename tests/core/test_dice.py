"""Tests for dice utilities."""

import pytest
import numpy as np
from backgammon_engine.core.dice import (
    ALL_CONSUMED,
    Dices,
    dice_to_string,
    dice_values,
    is_doubles,
    new_rng,
    roll_dice,
)
from backgammon_engine.core.errors import DiceInvalid


class TestDiceUtilities:
    """Tests for dice utility functions."""

    def test_is_doubles(self):
        """Test doubles detection."""
        assert is_doubles((1, 1))
        assert is_doubles((6, 6))
        assert not is_doubles((1, 2))
        assert not is_doubles((5, 6))

    def test_dice_values(self):
        """Test getting dice values for moves."""
        assert dice_values((3, 5)) == [3, 5]
        assert dice_values((4, 4)) == [4, 4, 4, 4]

    def test_dice_to_string(self):
        """Test dice string conversion."""
        assert dice_to_string((3, 5)) == "3-5"
        assert dice_to_string((4, 4)) == "Double 4s"


class TestRoll:
    """Tests for rolling."""

    def test_roll_range(self, rng):
        """Every face is between 1 and 6."""
        for _ in range(500):
            dices = roll_dice(rng)
            assert 1 <= dices.values[0] <= 6
            assert 1 <= dices.values[1] <= 6

    def test_roll_consumed_slots(self, rng):
        """Doubles leave four live slots, other rolls two."""
        for _ in range(200):
            dices = roll_dice(rng)
            if dices.values[0] == dices.values[1]:
                assert dices.consumed == (False, False, False, False)
            else:
                assert dices.consumed == (False, False, True, True)

    def test_roll_fair(self):
        """Average face over many rolls converges to 3.5."""
        rng = new_rng(7)
        n = 100_000
        total = 0
        for _ in range(n):
            dices = roll_dice(rng)
            total += dices.values[0] + dices.values[1]
        assert abs(total / (2 * n) - 3.5) < 0.02

    def test_roll_uses_injected_source(self, scripted):
        """The generator passed in decides the faces."""
        scripted.push((6, 1))
        dices = roll_dice(scripted)
        assert dices.values == (6, 1)

    def test_unseeded_rng(self):
        """An OS-seeded generator is a NumPy Generator."""
        assert isinstance(new_rng(), np.random.Generator)


class TestDices:
    """Tests for the consumption record."""

    def test_default_is_empty(self):
        """Fresh dice hold nothing to play."""
        dices = Dices()
        assert dices.values == (0, 0)
        assert dices.consumed == ALL_CONSUMED
        assert dices.is_consumed()
        assert dices.available() == []

    def test_from_values_rejects_bad_face(self):
        """Faces outside 1-6 are rejected."""
        with pytest.raises(DiceInvalid):
            Dices.from_values(0, 3)
        with pytest.raises(DiceInvalid):
            Dices.from_values(2, 7)

    def test_consume_non_doubles(self):
        """Each face of a normal roll can be used once."""
        dices = Dices.from_values(5, 2)
        assert dices.available() == [5, 2]

        dices = dices.consume(5)
        assert dices.consumed == (True, False, True, True)
        assert not dices.can_use(5)
        assert dices.can_use(2)

        dices = dices.consume(2)
        assert dices.is_consumed()

    def test_consume_doubles_in_slot_order(self):
        """Doubles give four moves, consumed front to back."""
        dices = Dices.from_values(3, 3)
        dices = dices.consume(3)
        assert dices.consumed == (True, False, False, False)
        dices = dices.consume(3).consume(3)
        assert dices.consumed == (True, True, True, False)
        assert dices.available() == [3]
        dices = dices.consume(3)
        assert dices.is_consumed()

    def test_consume_unrolled_value(self):
        """Using a face that was not rolled fails."""
        dices = Dices.from_values(4, 1)
        with pytest.raises(DiceInvalid):
            dices.consume(3)

    def test_consume_twice(self):
        """A face cannot be reused after it is played."""
        dices = Dices.from_values(4, 1).consume(4)
        with pytest.raises(DiceInvalid):
            dices.consume(4)

    def test_consume_does_not_mutate(self):
        """Consumption returns a new record."""
        dices = Dices.from_values(6, 2)
        dices.consume(6)
        assert dices.consumed == (False, False, True, True)

    def test_exhaust(self):
        """Forfeiting marks every slot as played."""
        assert Dices.from_values(2, 2).exhaust().is_consumed()
