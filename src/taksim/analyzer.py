from typing import NamedTuple

import numpy as np

from taksim.core import BLACK, CAPSTONE, FLAT, WHITE


class Metric(NamedTuple):
    white: int = 0
    black: int = 0

    def of(self, player):
        return self.white if player == WHITE else self.black


def _by_color(values):
    return Metric(values[WHITE], values[BLACK])


class Analyzer:
    """Per-colour board statistics for agents and match reports."""

    def __init__(self, state):
        self.state = state
        self.board = state.board

    def road_dominance(self):
        """Cells whose top stone belongs to each colour."""
        counts = [0, 0]
        for square in self.board.squares():
            owner = self.board.controller(square)
            if owner is not None:
                counts[owner] += 1
        return _by_color(counts)

    def flat_count(self):
        counts = [0, 0]
        for square in self.board.squares():
            top = self.board.top(square)
            if top is not None and top.kind == FLAT:
                counts[top.owner] += 1
        return _by_color(counts)

    def stones_left(self):
        return _by_color(self.state.stones_remaining)

    def caps_left(self):
        return _by_color(self.state.caps_remaining)

    def highest_stack(self):
        best = [0, 0]
        for square in self.board.squares():
            owner = self.board.controller(square)
            if owner is not None:
                best[owner] = max(best[owner], self.board.height(square))
        return _by_color(best)

    def stones_on_board(self):
        """(flat pool, capstone pool) stones on the board per colour."""
        stones = [0, 0]
        caps = [0, 0]
        for square in self.board.squares():
            for stone in self.board.stack(square):
                if stone.kind == CAPSTONE:
                    caps[stone.owner] += 1
                else:
                    stones[stone.owner] += 1
        return _by_color(stones), _by_color(caps)

    def is_conserved(self):
        """True when board plus reserves accounts for every stone dealt out."""
        stones, caps = self.stones_on_board()
        initial = self.state.initial_reserves
        for player in (WHITE, BLACK):
            if stones.of(player) + self.state.stones_remaining[player] != initial.flats:
                return False
            if caps.of(player) + self.state.caps_remaining[player] != initial.capstones:
                return False
        return True

    def height_map(self):
        n = self.board.size
        heights = np.zeros((n, n), dtype=np.int32)
        for square in self.board.squares():
            heights[square.y, square.x] = self.board.height(square)
        return heights

    def summary(self):
        return {
            "road_dominance": self.road_dominance()._asdict(),
            "flats": self.flat_count()._asdict(),
            "stones_left": self.stones_left()._asdict(),
            "caps_left": self.caps_left()._asdict(),
            "highest_stack": self.highest_stack()._asdict(),
        }
