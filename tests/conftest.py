"""Shared pytest fixtures used across the test suite."""

import pytest

from taksim import rules
from taksim.core import TakState
from taksim.game import TakGame
from taksim.notation import parse_ptn


@pytest.fixture
def game5():
    return TakGame(5)


@pytest.fixture
def game3():
    return TakGame(3)


@pytest.fixture
def play():
    """Apply a space separated PTN move list to a fresh or given state."""

    def _play(moves, size=5, state=None):
        if state is None:
            state = TakState(size)
        for text in moves.split():
            state = rules.apply(state, parse_ptn(text))
        return state

    return _play
