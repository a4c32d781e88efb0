"""Grid geometry for the Tic-Tac-Move board.

Cells are addressed as ``(row, col)`` tuples with ``(0, 0)`` in the top-left
corner. Movement is orthogonal and one cell at a time; the offsets for each
direction live in a single table so the rest of the code never branches on
the direction itself.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Tuple


Position = Tuple[int, int]


class Direction(Enum):
    NONE = "none"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# fmt: off
DIRECTION_OFFSETS: Dict[Direction, Position] = {
    Direction.NONE:  (0, 0),
    Direction.UP:    (-1, 0),
    Direction.DOWN:  (1, 0),
    Direction.LEFT:  (0, -1),
    Direction.RIGHT: (0, 1),
}
# fmt: on

_DIRECTION_BY_OFFSET: Dict[Position, Direction] = {
    delta: direction for direction, delta in DIRECTION_OFFSETS.items() if direction is not Direction.NONE
}


def offset(direction: Direction) -> Position:
    """Return the ``(d_row, d_col)`` offset for ``direction``."""

    return DIRECTION_OFFSETS[direction]


def step(position: Position, direction: Direction) -> Position:
    """Return the cell one step from ``position`` towards ``direction``."""

    d_row, d_col = DIRECTION_OFFSETS[direction]
    return position[0] + d_row, position[1] + d_col


def direction_between(origin: Position, target: Position) -> Direction:
    """Direction leading from ``origin`` to an orthogonally adjacent ``target``.

    Returns :attr:`Direction.NONE` when the two cells are not adjacent
    (including when they are the same cell).
    """

    delta = (target[0] - origin[0], target[1] - origin[1])
    return _DIRECTION_BY_OFFSET.get(delta, Direction.NONE)


def in_bounds(position: Position, size: int) -> bool:
    row, col = position
    return 0 <= row < size and 0 <= col < size


def neighbors(position: Position, size: int) -> List[Position]:
    """Return the in-bounds cells orthogonally adjacent to ``position``."""

    result: List[Position] = []
    for direction in (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT):
        candidate = step(position, direction)
        if in_bounds(candidate, size):
            result.append(candidate)
    return result


def all_cells(size: int) -> Iterator[Position]:
    """Iterate over every cell of a ``size`` x ``size`` board in row-major order."""

    for row in range(size):
        for col in range(size):
            yield row, col
