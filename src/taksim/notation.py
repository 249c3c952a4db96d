"""Text formats for moves, positions and results.

PTN (Portable Tak Notation) moves::

    a1  Sa1  Ca1          placements (flat prefix ``F`` is optional)
    a1>  3c3>12  2b2+     stack moves: count, origin, direction, drops

TPS (Tak Positional System) positions::

    x3/x,1,x/2,x2 2 1

playtak.com server moves (``P A1 W``, ``M A1 A3 1 2``) and game result
strings (``R-0``, ``0-F``, ``1/2-1/2`` ...) are handled here as well.
"""

import re

from taksim.core import (
    BLACK,
    CAPSTONE,
    FLAT,
    STANDING,
    WHITE,
    Color,
    Direction,
    Square,
    Stone,
    TakState,
)
from taksim.errors import NotationError
from taksim.moves import Place, StackMove
from taksim.outcome import DRAW, ONGOING, Outcome, OutcomeKind

FILES = "abcdefgh"

DIRECTION_CHARS = {
    Direction.NORTH: "+",
    Direction.SOUTH: "-",
    Direction.EAST: ">",
    Direction.WEST: "<",
}
CHAR_DIRECTIONS = {ch: d for d, ch in DIRECTION_CHARS.items()}

KIND_PREFIX = {FLAT: "", STANDING: "S", CAPSTONE: "C"}
PREFIX_KIND = {"F": FLAT, "S": STANDING, "C": CAPSTONE}

_PLACE_RE = re.compile(r"([FSC])?([a-h][1-8])", re.IGNORECASE)
_MOVE_RE = re.compile(r"([1-8])?([a-h][1-8])([<>+\-])([1-8]*)", re.IGNORECASE)
_DECORATIONS = "'\"!?*"


def square_name(square):
    x, y = square
    return f"{FILES[x]}{y + 1}"


def parse_square(text):
    s = text.strip().lower()
    if len(s) != 2 or s[0] not in FILES or not s[1].isdigit():
        raise NotationError(f"Invalid square {text!r}")
    y = int(s[1]) - 1
    if y < 0:
        raise NotationError(f"Invalid rank in {text!r}")
    return Square(FILES.index(s[0]), y)


def parse_ptn(text):
    s = text.strip().rstrip(_DECORATIONS).replace(" ", "")
    if not s:
        raise NotationError("Empty move")

    m = _PLACE_RE.fullmatch(s)
    if m:
        prefix, coord = m.groups()
        kind = PREFIX_KIND[prefix.upper()] if prefix else FLAT
        return Place(parse_square(coord), kind)

    m = _MOVE_RE.fullmatch(s)
    if m:
        count_str, coord, dir_char, drops_str = m.groups()
        drops = tuple(int(ch) for ch in drops_str)
        if count_str is not None:
            count = int(count_str)
        else:
            count = sum(drops) if drops else 1
        if not drops:
            drops = (count,)
        if sum(drops) != count:
            raise NotationError(f"Drops in {text!r} do not sum to {count}")
        return StackMove(parse_square(coord), CHAR_DIRECTIONS[dir_char], drops)

    raise NotationError(f"Could not parse move {text!r}")


def format_ptn(move):
    if isinstance(move, Place):
        return f"{KIND_PREFIX[move.kind]}{square_name(move.square)}"
    if isinstance(move, StackMove):
        carry = move.carry
        count = str(carry) if carry > 1 else ""
        drops = "".join(str(n) for n in move.drops)
        if move.drops == (carry,):
            drops = ""
        return f"{count}{square_name(move.origin)}{DIRECTION_CHARS[move.direction]}{drops}"
    raise NotationError(f"Not a move: {move!r}")


def parse_ptn_moves(text):
    """Parse a whitespace separated PTN move list.

    Move numbers (``1.``), result tokens and ``{comments}`` are skipped.
    """
    text = re.sub(r"\{[^}]*\}", " ", text)
    moves = []
    for token in text.split():
        if token.endswith(".") or parse_result(token) is not None:
            continue
        moves.append(parse_ptn(token))
    return moves


# -- TPS ---------------------------------------------------------------------


def _stack_tps(stack):
    digits = "".join("1" if stone.owner == WHITE else "2" for stone in stack)
    return digits + KIND_PREFIX[stack[-1].kind]


def format_tps(state):
    n = state.size
    rows = []
    for y in range(n - 1, -1, -1):
        cells = []
        empty = 0
        for x in range(n):
            stack = state.board.stack(Square(x, y))
            if not stack:
                empty += 1
                continue
            if empty:
                cells.append("x" if empty == 1 else f"x{empty}")
                empty = 0
            cells.append(_stack_tps(stack))
        if empty:
            cells.append("x" if empty == 1 else f"x{empty}")
        rows.append(",".join(cells))
    player = int(state.to_move) + 1
    move_number = state.ply // 2 + 1
    return "/".join(rows) + f" {player} {move_number}"


def _parse_tps_stack(cell):
    if not cell:
        raise NotationError("Empty TPS cell")
    top_kind = FLAT
    if cell[-1] in "SC":
        top_kind = PREFIX_KIND[cell[-1]]
        cell = cell[:-1]
    if not cell or any(ch not in "12" for ch in cell):
        raise NotationError(f"Invalid TPS stack {cell!r}")
    stones = [Stone(Color(int(ch) - 1), FLAT) for ch in cell]
    stones[-1] = Stone(stones[-1].owner, top_kind)
    return stones


def parse_tps(text, stones_per_player=None, caps_per_player=None):
    parts = text.strip().split()
    if len(parts) != 3:
        raise NotationError("TPS needs a position, a player and a move number")
    position, player_str, move_str = parts
    if player_str not in ("1", "2") or not move_str.isdigit() or int(move_str) < 1:
        raise NotationError(f"Invalid TPS turn {player_str} {move_str}")

    rows = position.split("/")
    size = len(rows)
    try:
        state = TakState(size, stones_per_player, caps_per_player)
    except ValueError as e:
        raise NotationError(str(e))

    for row_index, row in enumerate(rows):
        y = size - 1 - row_index
        x = 0
        for cell in row.split(","):
            cell = cell.strip().upper()
            if cell.startswith("X"):
                run = cell[1:]
                if run and not run.isdigit():
                    raise NotationError(f"Invalid TPS cell {cell!r}")
                x += int(run) if run else 1
                continue
            if x >= size:
                raise NotationError(f"TPS row {row!r} is too long")
            for stone in _parse_tps_stack(cell):
                if stone.kind == CAPSTONE:
                    state.caps_remaining[stone.owner] -= 1
                else:
                    state.stones_remaining[stone.owner] -= 1
                state.board.push(Square(x, y), stone)
            x += 1
        if x != size:
            raise NotationError(f"TPS row {row!r} does not have {size} cells")

    for color in (WHITE, BLACK):
        if state.stones_remaining[color] < 0 or state.caps_remaining[color] < 0:
            raise NotationError(f"Position uses more stones than {color.name} owns")

    state.to_move = Color(int(player_str) - 1)
    state.ply = (int(move_str) - 1) * 2 + int(state.to_move)
    return state


# -- playtak.com server format ---------------------------------------------


def parse_playtak(text):
    parts = text.split()
    if not parts:
        raise NotationError("Empty action")
    head = parts[0].upper()
    if head == "P" and len(parts) in (2, 3):
        kind = FLAT
        if len(parts) == 3:
            k = parts[2].upper()
            if k == "W":
                kind = STANDING
            elif k == "C":
                kind = CAPSTONE
            else:
                raise NotationError(f"Unknown piece {parts[2]!r}")
        return Place(parse_square(parts[1]), kind)

    if head == "M" and len(parts) >= 4:
        origin = parse_square(parts[1])
        target = parse_square(parts[2])
        try:
            drops = tuple(int(p) for p in parts[3:])
        except ValueError:
            raise NotationError(f"Invalid drops in {text!r}")
        dx = target.x - origin.x
        dy = target.y - origin.y
        if dx != 0 and dy != 0:
            raise NotationError("Diagonal move")
        if dx == 0 and dy == 0:
            raise NotationError("Zero move")
        if max(abs(dx), abs(dy)) != len(drops):
            raise NotationError("Move distance does not match the drops")
        if dx > 0:
            direction = Direction.EAST
        elif dx < 0:
            direction = Direction.WEST
        elif dy > 0:
            direction = Direction.NORTH
        else:
            direction = Direction.SOUTH
        return StackMove(origin, direction, drops)

    raise NotationError(f"Unknown action {text!r}")


def format_playtak(move):
    if isinstance(move, Place):
        suffix = {FLAT: "", STANDING: " W", CAPSTONE: " C"}[move.kind]
        return f"P {square_name(move.square).upper()}{suffix}"
    target = move.origin.step(move.direction, len(move.drops))
    drops = " ".join(str(n) for n in move.drops)
    return f"M {square_name(move.origin).upper()} {square_name(target).upper()} {drops}"


def split_playtak_notation(notation):
    if not notation:
        return []
    parts = [p.strip() for p in notation.split(",")]
    return [p for p in parts if p]


# -- results -----------------------------------------------------------------

_RESULT_LETTER = {
    OutcomeKind.ROAD: "R",
    OutcomeKind.FLAT: "F",
    OutcomeKind.RESIGNATION: "1",
}


def format_result(outcome):
    if outcome.kind == OutcomeKind.ONGOING:
        return "0-0"
    if outcome.kind == OutcomeKind.DRAW:
        return "1/2-1/2"
    letter = _RESULT_LETTER[outcome.kind]
    return f"{letter}-0" if outcome.winner == WHITE else f"0-{letter}"


def parse_result(text):
    r = text.strip().upper()
    if r == "0-0":
        return ONGOING
    if r in ("1/2-1/2", "DRAW"):
        return DRAW
    m = re.fullmatch(r"([RF1])-0|0-([RF1])", r)
    if not m:
        return None
    letter = m.group(1) or m.group(2)
    winner = WHITE if m.group(1) else BLACK
    kind = {"R": OutcomeKind.ROAD, "F": OutcomeKind.FLAT, "1": OutcomeKind.RESIGNATION}
    return Outcome(kind[letter], winner)
