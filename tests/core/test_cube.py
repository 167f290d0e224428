"""Tests for doubling cube implementation."""

import pytest
from backgammon_engine.core.cube import (
    HOLLAND_TURNS,
    Cube,
    doubling_allowed,
    game_points,
    is_power_of_two,
)
from backgammon_engine.core.errors import DoublingNotPermitted, InvalidCubeValue
from backgammon_engine.core.rules import Rules
from backgammon_engine.core.types import Player


# ==============================================================================
# CUBE STATE TESTS
# ==============================================================================


class TestCubeState:
    """Tests for Cube value and ownership."""

    def test_initial_cube(self):
        """Test initial cube state."""
        cube = Cube()
        assert cube.value() == 1
        assert cube.owner() == Player.NOBODY

    @pytest.mark.parametrize("value", [1, 2, 4, 8, 16, 64, 1024])
    def test_set_valid_values(self, value):
        """Powers of two are accepted."""
        cube = Cube()
        cube.set(value)
        assert cube.value() == value

    @pytest.mark.parametrize("value", [0, 3, 6, 12, -2])
    def test_set_invalid_value(self, value):
        """Other values are rejected and leave the cube alone."""
        cube = Cube()
        cube.set(2)
        with pytest.raises(InvalidCubeValue):
            cube.set(value)
        assert cube.value() == 2

    def test_no_upper_bound(self):
        """The engine does not cap the cube."""
        cube = Cube()
        cube.set(2 ** 40)
        assert cube.offer(Player.PLAYER0) == 2 ** 41

    def test_negative_exponent(self):
        with pytest.raises(InvalidCubeValue):
            Cube(exponent=-1)

    def test_set_owner(self):
        """Owner can be assigned directly."""
        cube = Cube()
        cube.set_owner(Player.PLAYER0)
        assert cube.owner() == Player.PLAYER0

    def test_is_power_of_two(self):
        assert is_power_of_two(1)
        assert is_power_of_two(32)
        assert not is_power_of_two(0)
        assert not is_power_of_two(24)


# ==============================================================================
# OFFER TESTS
# ==============================================================================


class TestOffer:
    """Tests for offer arithmetic."""

    def test_offer_from_centre(self):
        """A centred cube can be offered to either player."""
        cube = Cube()
        assert cube.offer(Player.PLAYER0) == 2
        assert cube.offer(Player.PLAYER1) == 2

    def test_offer_does_not_mutate(self):
        """Offering only computes the next value."""
        cube = Cube()
        cube.set(2)
        cube.set_owner(Player.PLAYER0)
        assert cube.offer(Player.PLAYER1) == 4
        assert cube.value() == 2
        assert cube.owner() == Player.PLAYER0

    def test_offer_to_owner_refused(self):
        """The holder cannot be offered their own cube."""
        cube = Cube()
        cube.set_owner(Player.PLAYER1)
        with pytest.raises(DoublingNotPermitted):
            cube.offer(Player.PLAYER1)

    def test_offer_is_always_double(self):
        """Offers are exactly twice the current value."""
        cube = Cube()
        for value in [1, 2, 4, 8, 16]:
            cube.set(value)
            assert cube.offer(Player.PLAYER0) == 2 * cube.value()

    def test_offer_accept_cycle(self):
        """Cube passes back and forth, doubling every time."""
        cube = Cube()
        assert cube.value() == 1
        assert cube.owner() == Player.NOBODY

        offered = cube.offer(Player.PLAYER1)
        assert offered == 2
        cube.set(offered)
        cube.set_owner(Player.PLAYER1)
        assert cube.value() == 2
        assert cube.owner() == Player.PLAYER1

        with pytest.raises(DoublingNotPermitted):
            cube.offer(Player.PLAYER1)

        assert cube.offer(Player.PLAYER0) == 4


# ==============================================================================
# CRAWFORD / HOLLAND TESTS
# ==============================================================================


class TestDoublingAllowed:
    """Tests for the Crawford/Holland gate."""

    def test_normal_game(self):
        assert doubling_allowed(Rules(), crawford=False)

    def test_crawford_game(self):
        """No doubling in the Crawford game."""
        assert not doubling_allowed(Rules(), crawford=True)

    def test_crawford_rule_off(self):
        """Without the rule the flag has no effect."""
        rules = Rules(crawford=False)
        assert doubling_allowed(rules, crawford=True)

    def test_holland_after_crawford(self):
        """Holland keeps doubling closed for the first turns after Crawford."""
        rules = Rules().with_holland()
        for turns in range(HOLLAND_TURNS):
            assert not doubling_allowed(rules, False, post_crawford=True, since_crawford=turns)
        assert doubling_allowed(rules, False, post_crawford=True, since_crawford=HOLLAND_TURNS)

    def test_post_crawford_without_holland(self):
        """Plain Crawford allows doubling right after the Crawford game."""
        assert doubling_allowed(Rules(), False, post_crawford=True, since_crawford=0)


def test_game_points():
    """Points scale with the cube."""
    cube = Cube()
    cube.set(4)
    assert game_points(1, cube) == 4
    assert game_points(2, cube) == 8
    assert game_points(3, cube) == 12
