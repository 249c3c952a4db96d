from enum import IntEnum
from typing import NamedTuple, Optional

from taksim.core import BLACK, FLAT, WHITE, Color, Square


class OutcomeKind(IntEnum):
    ONGOING = 0
    ROAD = 1
    FLAT = 2
    DRAW = 3
    RESIGNATION = 4


class Outcome(NamedTuple):
    kind: OutcomeKind
    winner: Optional[Color] = None

    @property
    def is_over(self):
        return self.kind != OutcomeKind.ONGOING

    def value_for(self, player):
        """+1 for a win, -1 for a loss, 0 for a draw or a running game."""
        if self.winner is None:
            return 0
        return 1 if self.winner == player else -1

    def __str__(self):
        if self.kind == OutcomeKind.ONGOING:
            return "ongoing"
        if self.kind == OutcomeKind.DRAW:
            return "draw"
        return f"{self.winner.name.lower()} wins by {self.kind.name.lower()}"


ONGOING = Outcome(OutcomeKind.ONGOING)
DRAW = Outcome(OutcomeKind.DRAW)


def is_road_cell(board, player, square):
    top = board.top(square)
    return top is not None and top.owner == player and top.is_road


def has_road(board, player):
    n = board.size
    # left to right, then bottom to top
    for starts, reached in (
        ([Square(0, y) for y in range(n)], lambda sq: sq.x == n - 1),
        ([Square(x, 0) for x in range(n)], lambda sq: sq.y == n - 1),
    ):
        visited = set()
        stack = []
        for start in starts:
            if is_road_cell(board, player, start):
                visited.add(start)
                stack.append(start)
        while stack:
            square = stack.pop()
            if reached(square):
                return True
            for nxt in board.neighbors(square):
                if nxt not in visited and is_road_cell(board, player, nxt):
                    visited.add(nxt)
                    stack.append(nxt)
    return False


def count_flats(board, player):
    total = 0
    for square in board.squares():
        top = board.top(square)
        if top is not None and top.owner == player and top.kind == FLAT:
            total += 1
    return total


def reserves_exhausted(state):
    return any(
        state.stones_remaining[c] + state.caps_remaining[c] == 0 for c in (WHITE, BLACK)
    )


def compute_outcome(state):
    if state.resigned is not None:
        return Outcome(OutcomeKind.RESIGNATION, state.resigned.opponent())
    if state.ply == 0:
        return ONGOING

    mover = state.to_move.opponent()
    for player in (mover, mover.opponent()):
        if has_road(state.board, player):
            return Outcome(OutcomeKind.ROAD, player)

    if state.board.is_full() or reserves_exhausted(state):
        white = count_flats(state.board, WHITE)
        black = count_flats(state.board, BLACK)
        if white > black:
            return Outcome(OutcomeKind.FLAT, WHITE)
        if black > white:
            return Outcome(OutcomeKind.FLAT, BLACK)
        return DRAW
    return ONGOING
