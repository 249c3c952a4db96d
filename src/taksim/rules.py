import logging
import operator

from taksim.core import CAPSTONE, FLAT, STANDING, Direction, Square, Stone, StoneKind
from taksim.errors import (
    BlockedPath,
    CellEmpty,
    CellOccupied,
    GameAlreadyOver,
    IllegalMove,
    InsufficientReserve,
    InvalidCarryCount,
    MalformedDrops,
    MoveError,
    NotYourStone,
    OpeningViolation,
    OutOfBounds,
)
from taksim.moves import Place, StackMove, is_move
from taksim.outcome import compute_outcome

logger = logging.getLogger(__name__)


def _as_square(obj):
    try:
        x, y = obj
        return Square(operator.index(x), operator.index(y))
    except (TypeError, ValueError):
        raise OutOfBounds(f"Not a square: {obj!r}")


def _placement_owner(state):
    return state.to_move.opponent() if state.opening else state.to_move


def _validate_place(state, move):
    square = _as_square(move.square)
    if not state.board.inside(square):
        raise OutOfBounds(f"{square} is off the board")
    try:
        kind = StoneKind(move.kind)
    except ValueError:
        raise IllegalMove(f"Invalid piece type {move.kind!r}")
    if not state.board.is_empty(square):
        raise CellOccupied(f"{square} is not empty")

    owner = _placement_owner(state)
    if state.opening and kind != FLAT:
        raise OpeningViolation("Only flat placements allowed on the first two moves")
    if kind == CAPSTONE:
        if state.caps_remaining[owner] <= 0:
            raise InsufficientReserve("No capstones left")
    elif state.stones_remaining[owner] <= 0:
        raise InsufficientReserve("No stones left")
    return Place(square, kind)


def _validate_drops(drops):
    try:
        drops = tuple(drops)
    except TypeError:
        raise MalformedDrops("Drops must be a sequence of counts")
    if not drops:
        raise MalformedDrops("Drops required")
    counts = []
    for n in drops:
        if isinstance(n, bool):
            raise MalformedDrops(f"Invalid drop count {n!r}")
        try:
            n = operator.index(n)
        except TypeError:
            raise MalformedDrops(f"Invalid drop count {n!r}")
        if n <= 0:
            raise MalformedDrops("Drop counts must be positive")
        counts.append(n)
    return tuple(counts)


def _validate_stack_move(state, move):
    board = state.board
    origin = _as_square(move.origin)
    if not board.inside(origin):
        raise OutOfBounds(f"{origin} is off the board")
    try:
        direction = Direction(move.direction)
    except ValueError:
        raise MalformedDrops(f"Unknown direction {move.direction!r}")
    drops = _validate_drops(move.drops)

    if state.opening:
        raise OpeningViolation("No stack moves allowed on the first two moves")

    top = board.top(origin)
    if top is None:
        raise CellEmpty(f"{origin} is empty")
    if top.owner != state.to_move:
        raise NotYourStone("Stack not controlled by player")

    carry = sum(drops)
    if carry > state.carry_limit:
        raise InvalidCarryCount("Cannot carry that many stones")
    if carry > board.height(origin):
        raise InvalidCarryCount("Not enough stones in stack")

    last = len(drops) - 1
    for i, n in enumerate(drops):
        square = origin.step(direction, i + 1)
        if not board.inside(square):
            raise OutOfBounds("Move goes off board")
        dest_top = board.top(square)
        if dest_top is None or not dest_top.blocks:
            continue
        if dest_top.kind == STANDING and i == last and n == 1 and top.kind == CAPSTONE:
            continue
        raise BlockedPath(f"Cannot move onto {dest_top.kind.name.lower()} at {square}")
    return StackMove(origin, direction, drops)


def validate(state, move):
    """Check ``move`` against ``state`` without touching either.

    Returns the move normalised to ``Square``/``Direction``/tuple values, or
    raises a ``MoveError`` subclass naming the first rule it breaks.
    """
    if not is_move(move):
        raise IllegalMove(f"Not a move: {move!r}")
    if isinstance(move, Place):
        return _validate_place(state, move)
    return _validate_stack_move(state, move)


def is_legal(state, move):
    try:
        validate(state, move)
    except MoveError:
        return False
    return True


def _apply_place(state, move):
    owner = _placement_owner(state)
    if move.kind == CAPSTONE:
        state.caps_remaining[owner] -= 1
        assert state.caps_remaining[owner] >= 0
    else:
        state.stones_remaining[owner] -= 1
        assert state.stones_remaining[owner] >= 0
    state.board.push(move.square, Stone(owner, move.kind))


def _apply_stack_move(state, move):
    board = state.board
    carried = board.pop_top(move.origin, move.carry)
    last = len(move.drops) - 1
    for i, n in enumerate(move.drops):
        square = move.origin.step(move.direction, i + 1)
        drop_pieces = carried[:n]
        carried = carried[n:]
        dest_top = board.top(square)
        if dest_top is not None and dest_top.kind == STANDING:
            assert i == last and drop_pieces[0].kind == CAPSTONE
            board.flatten_top_if_standing(square)
        for stone in drop_pieces:
            board.push(square, stone)
    assert not carried


def apply(state, move):
    """Return the state after ``move``; ``state`` itself is left untouched."""
    if compute_outcome(state).is_over:
        raise GameAlreadyOver("Game is already over")
    try:
        move = validate(state, move)
    except MoveError as e:
        logger.debug("rejected %r at ply %d: %s", move, state.ply, e)
        raise

    new_state = state.clone()
    if isinstance(move, Place):
        _apply_place(new_state, move)
    else:
        _apply_stack_move(new_state, move)
    new_state.to_move = state.to_move.opponent()
    new_state.ply = state.ply + 1
    new_state.history = state.history + (move,)
    logger.debug("ply %d: %s played %r", state.ply, state.to_move.name, move)
    return new_state


def outcome(state):
    return compute_outcome(state)


def resign(state, player):
    if compute_outcome(state).is_over:
        raise GameAlreadyOver("Game is already over")
    new_state = state.clone()
    new_state.resigned = player
    return new_state


def drop_partitions(stones, max_len):
    """
    Generate all drop sequences:
    - sum(drops) == stones
    - each drop >= 1
    - len(drops) <= max_len
    """
    if stones == 0:
        yield ()
        return
    if max_len == 0:
        return
    for first in range(1, stones + 1):
        for rest in drop_partitions(stones - first, max_len - 1):
            yield (first,) + rest


def _distance_to_edge(size, square, direction):
    if direction == Direction.NORTH:
        return size - 1 - square.y
    if direction == Direction.SOUTH:
        return square.y
    if direction == Direction.EAST:
        return size - 1 - square.x
    return square.x


def candidate_moves(state):
    """Every well-formed move for the side to move, legal or not."""
    board = state.board
    player = state.to_move
    kinds = (FLAT,) if state.opening else (FLAT, STANDING, CAPSTONE)

    for square in board.squares():
        if board.is_empty(square):
            for kind in kinds:
                yield Place(square, kind)

    if state.opening:
        return

    for square in board.squares():
        if board.controller(square) != player:
            continue
        max_carry = min(board.height(square), state.carry_limit)
        for direction in Direction:
            distance = _distance_to_edge(state.size, square, direction)
            if distance == 0:
                continue
            for carry in range(1, max_carry + 1):
                for drops in drop_partitions(carry, distance):
                    yield StackMove(square, direction, drops)


def legal_moves(state):
    """Lazily yield every legal move; a fresh generator on each call."""
    if compute_outcome(state).is_over:
        return
    for move in candidate_moves(state):
        if is_legal(state, move):
            yield move
