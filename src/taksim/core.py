from enum import IntEnum
from typing import NamedTuple

from taksim.errors import InsufficientStack


class Color(IntEnum):
    WHITE = 0
    BLACK = 1

    def opponent(self):
        return Color(1 - self)


class StoneKind(IntEnum):
    FLAT = 0
    STANDING = 1
    CAPSTONE = 2


WHITE = Color.WHITE
BLACK = Color.BLACK

FLAT = StoneKind.FLAT
STANDING = StoneKind.STANDING
CAPSTONE = StoneKind.CAPSTONE

MIN_SIZE = 3
MAX_SIZE = 8
DEFAULT_SIZE = 5

# size -> (flats, capstones) per player
PIECE_TABLE = {
    3: (10, 0),
    4: (15, 0),
    5: (21, 1),
    6: (30, 1),
    7: (40, 2),
    8: (50, 2),
}


class Stone(NamedTuple):
    owner: Color
    kind: StoneKind

    @property
    def is_road(self):
        return self.kind != STANDING

    @property
    def blocks(self):
        return self.kind != FLAT


class Direction(IntEnum):
    NORTH = 0
    SOUTH = 1
    EAST = 2
    WEST = 3

    @property
    def delta(self):
        return _DELTAS[self]


_DELTAS = {
    Direction.NORTH: (0, 1),
    Direction.SOUTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}


class Square(NamedTuple):
    x: int
    y: int

    def step(self, direction, distance=1):
        dx, dy = direction.delta
        return Square(self.x + dx * distance, self.y + dy * distance)


class Reserves(NamedTuple):
    flats: int
    capstones: int

    @property
    def total(self):
        return self.flats + self.capstones


def reserves_for_size(size):
    if size not in PIECE_TABLE:
        raise ValueError(f"Unsupported board size {size}")
    return Reserves(*PIECE_TABLE[size])


class Board:
    """An N x N grid of stacks, each stored bottom to top.

    Only the rule engine calls the mutating primitives (``push``,
    ``pop_top``, ``flatten_top_if_standing``); everything else reads.
    """

    def __init__(self, size):
        if size < MIN_SIZE or size > MAX_SIZE:
            raise ValueError(f"Board size must be between {MIN_SIZE} and {MAX_SIZE}")
        self.size = size
        self._rows = [[[] for _ in range(size)] for _ in range(size)]

    def clone(self):
        other = Board.__new__(Board)
        other.size = self.size
        other._rows = [[stack.copy() for stack in row] for row in self._rows]
        return other

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self._rows == other._rows

    def __repr__(self):
        return f"<Board {self.size}x{self.size}>"

    def inside(self, square):
        x, y = square
        return 0 <= x < self.size and 0 <= y < self.size

    def squares(self):
        n = self.size
        for y in range(n):
            for x in range(n):
                yield Square(x, y)

    def stack(self, square):
        """Return a copy of the stack at ``square``, bottom first."""
        return list(self._cell(square))

    def top(self, square):
        stack = self._cell(square)
        return stack[-1] if stack else None

    def height(self, square):
        return len(self._cell(square))

    def is_empty(self, square):
        return not self._cell(square)

    def is_full(self):
        return all(stack for row in self._rows for stack in row)

    def controller(self, square):
        top = self.top(square)
        return top.owner if top is not None else None

    def neighbors(self, square):
        result = []
        for direction in Direction:
            nxt = square.step(direction)
            if self.inside(nxt):
                result.append(nxt)
        return result

    def push(self, square, stone):
        self._cell(square).append(stone)

    def pop_top(self, square, count):
        stack = self._cell(square)
        if count < 0 or count > len(stack):
            raise InsufficientStack(
                f"Cannot take {count} stones from a stack of {len(stack)}"
            )
        if count == 0:
            return []
        taken = stack[-count:]
        del stack[-count:]
        return taken

    def flatten_top_if_standing(self, square):
        stack = self._cell(square)
        if stack and stack[-1].kind == STANDING:
            stack[-1] = Stone(stack[-1].owner, FLAT)
            return True
        return False

    def _cell(self, square):
        if not self.inside(square):
            raise IndexError(f"Square {square} is off a {self.size}x{self.size} board")
        x, y = square
        return self._rows[y][x]


class TakState:
    """Immutable-by-convention snapshot of a game.

    A state is never changed once it has been handed to a caller; the rule
    engine clones it and mutates the clone before returning it.
    """

    def __init__(self, size, stones_per_player=None, caps_per_player=None):
        default = reserves_for_size(size)
        if stones_per_player is None:
            stones_per_player = default.flats
        if caps_per_player is None:
            caps_per_player = default.capstones
        # each side's opening stone is a flat
        if stones_per_player < 1:
            raise ValueError("Each player needs at least one flat stone")
        if caps_per_player < 0:
            raise ValueError("Capstone count must not be negative")
        self.size = size
        self.board = Board(size)
        self.to_move = WHITE
        self.stones_remaining = [stones_per_player, stones_per_player]
        self.caps_remaining = [caps_per_player, caps_per_player]
        self.initial_reserves = Reserves(stones_per_player, caps_per_player)
        self.ply = 0
        self.history = ()
        self.resigned = None

    def clone(self):
        other = TakState.__new__(TakState)
        other.size = self.size
        other.board = self.board.clone()
        other.to_move = self.to_move
        other.stones_remaining = self.stones_remaining.copy()
        other.caps_remaining = self.caps_remaining.copy()
        other.initial_reserves = self.initial_reserves
        other.ply = self.ply
        other.history = self.history
        other.resigned = self.resigned
        return other

    def __eq__(self, other):
        if not isinstance(other, TakState):
            return NotImplemented
        return (
            self.size == other.size
            and self.board == other.board
            and self.to_move == other.to_move
            and self.stones_remaining == other.stones_remaining
            and self.caps_remaining == other.caps_remaining
            and self.initial_reserves == other.initial_reserves
            and self.ply == other.ply
            and self.history == other.history
            and self.resigned == other.resigned
        )

    def __repr__(self):
        return (
            f"<TakState size={self.size} ply={self.ply} "
            f"to_move={self.to_move.name}>"
        )

    @property
    def opening(self):
        return self.ply < 2

    @property
    def carry_limit(self):
        return self.size

    def reserves(self, color):
        return Reserves(self.stones_remaining[color], self.caps_remaining[color])
