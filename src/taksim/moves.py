from typing import NamedTuple, Tuple

from taksim.core import FLAT, Direction, Square, StoneKind


class Place(NamedTuple):
    square: Square
    kind: StoneKind = FLAT


class _StackMove(NamedTuple):
    origin: Square
    direction: Direction
    drops: Tuple[int, ...]


class StackMove(_StackMove):
    """Pick up ``sum(drops)`` stones at ``origin`` and spread them.

    ``drops[i]`` stones are left on the i-th cell past the origin, taken
    from the bottom of the carried group.
    """

    __slots__ = ()

    def __new__(cls, origin, direction, drops):
        if isinstance(drops, list):
            drops = tuple(drops)
        return super().__new__(cls, origin, direction, drops)

    @property
    def carry(self):
        return sum(self.drops)

    def squares(self):
        return [self.origin.step(self.direction, i + 1) for i in range(len(self.drops))]


MOVE_TYPES = (Place, StackMove)


def is_move(obj):
    return isinstance(obj, MOVE_TYPES)
