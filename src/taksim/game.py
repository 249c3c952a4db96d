import logging

from taksim import rules
from taksim.core import TakState
from taksim.errors import GameAlreadyOver
from taksim.notation import format_ptn, parse_ptn
from taksim.outcome import compute_outcome

logger = logging.getLogger(__name__)


class TakGame:
    """One game of Tak: the object an agent or match runner talks to.

    The session owns its current state exclusively. Each accepted move
    replaces it with a fresh state, so snapshots returned by
    ``current_state`` stay valid and unchanged for as long as the caller
    holds them. Calls must be serialised by the caller.
    """

    def __init__(self, size, stones_per_player=None, caps_per_player=None):
        self._state = TakState(size, stones_per_player, caps_per_player)
        self._outcome = compute_outcome(self._state)

    @classmethod
    def from_state(cls, state):
        game = cls.__new__(cls)
        game._state = state
        game._outcome = compute_outcome(state)
        return game

    @property
    def size(self):
        return self._state.size

    @property
    def to_move(self):
        return self._state.to_move

    @property
    def outcome(self):
        return self._outcome

    @property
    def is_over(self):
        return self._outcome.is_over

    @property
    def history(self):
        return self._state.history

    def current_state(self):
        return self._state

    def legal_moves(self):
        return rules.legal_moves(self._state)

    def submit_move(self, move):
        if self._outcome.is_over:
            raise GameAlreadyOver(f"Game is already over ({self._outcome})")
        self._state = rules.apply(self._state, move)
        self._outcome = compute_outcome(self._state)
        if self._outcome.is_over:
            logger.info(
                "game over after %d plies: %s", self._state.ply, self._outcome
            )
        return self._outcome

    def submit_ptn(self, text):
        return self.submit_move(parse_ptn(text))

    def resign(self, player):
        if self._outcome.is_over:
            raise GameAlreadyOver(f"Game is already over ({self._outcome})")
        self._state = rules.resign(self._state, player)
        self._outcome = compute_outcome(self._state)
        logger.info("%s resigned at ply %d", player.name, self._state.ply)
        return self._outcome

    def ptn_moves(self):
        return [format_ptn(move) for move in self._state.history]
