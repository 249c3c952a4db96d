import random

from taksim import rules
from taksim.notation import parse_ptn


class _Resign:
    def __repr__(self):
        return "RESIGN"


RESIGN = _Resign()


class Agent:
    """The whole agent boundary: look at a snapshot, answer with a move.

    ``choose_move`` gets a state it must not mutate and returns a ``Place``,
    a ``StackMove`` or ``RESIGN``.
    """

    name = "agent"

    def choose_move(self, state):
        raise NotImplementedError


class RandomAgent(Agent):
    name = "random"

    def __init__(self, seed=None):
        self.rng = random.Random(seed)

    def choose_move(self, state):
        moves = list(rules.legal_moves(state))
        if not moves:
            return RESIGN
        return self.rng.choice(moves)


class ScriptedAgent(Agent):
    name = "scripted"

    def __init__(self, moves):
        self.moves = [parse_ptn(m) if isinstance(m, str) else m for m in moves]
        self.index = 0

    def choose_move(self, state):
        if self.index >= len(self.moves):
            return RESIGN
        move = self.moves[self.index]
        self.index += 1
        return move
