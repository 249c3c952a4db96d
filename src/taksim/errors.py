class MoveError(Exception):
    pass


class OutOfBounds(MoveError):
    pass


class MalformedDrops(MoveError):
    pass


class IllegalMove(MoveError):
    pass


class CellOccupied(IllegalMove):
    pass


class CellEmpty(IllegalMove):
    pass


class NotYourStone(IllegalMove):
    pass


class InsufficientReserve(IllegalMove):
    pass


class InvalidCarryCount(IllegalMove):
    pass


class BlockedPath(IllegalMove):
    pass


class OpeningViolation(IllegalMove):
    """Only flat placements are allowed on each player's first ply."""


class GameAlreadyOver(MoveError):
    pass


class InsufficientStack(Exception):
    pass


class NotationError(ValueError):
    pass
