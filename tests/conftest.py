"""Pytest configuration and shared fixtures."""

import pytest
import numpy as np

from backgammon_engine.core.game import Game
from backgammon_engine.core.rules import Rules


class ScriptedDice:
    """Random source that replays fixed die faces.

    Stands in for ``numpy.random.Generator`` in ``roll_dice``: each
    ``integers`` call returns the next scripted face.
    """

    def __init__(self, *rolls):
        self.faces = [face for roll in rolls for face in roll]

    def push(self, *rolls):
        self.faces.extend(face for roll in rolls for face in roll)

    def integers(self, low, high):
        assert self.faces, "ScriptedDice ran out of faces"
        face = self.faces.pop(0)
        assert low <= face < high
        return face


@pytest.fixture
def rng():
    """Seeded NumPy generator for statistical tests."""
    return np.random.default_rng(42)


@pytest.fixture
def scripted():
    """Empty scripted dice; tests push the rolls they need."""
    return ScriptedDice()


@pytest.fixture
def make_game(scripted):
    """Factory for games rolling scripted dice."""
    def _make(rules=None, **kwargs):
        return Game(rules or Rules(), rng=scripted, **kwargs)
    return _make


@pytest.fixture
def started_game(make_game, scripted):
    """Factory for games past a given opening roll."""
    def _start(roll=(5, 2), rules=None, **kwargs):
        game = make_game(rules, **kwargs)
        scripted.push(roll)
        game.roll(game.who_plays)
        return game
    return _start
