"""Line detection for variable board sizes.

A win needs an entire row, column or full diagonal held by one team, so the
win length always equals the board size.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..geometry import Position
from .board import BoardState, Team


Line = Tuple[Position, ...]


@dataclass(frozen=True)
class WinResult:
    is_win: bool
    winner: Team = Team.NONE
    winning_cells: Line = ()


def win_patterns(size: int) -> List[Line]:
    """Rows, then columns, then the two diagonals of a ``size`` x ``size`` board."""

    patterns: List[Line] = []
    for row in range(size):
        patterns.append(tuple((row, col) for col in range(size)))
    for col in range(size):
        patterns.append(tuple((row, col) for row in range(size)))
    patterns.append(tuple((i, i) for i in range(size)))
    patterns.append(tuple((i, size - 1 - i) for i in range(size)))
    return patterns


def check_for_win(board: BoardState) -> WinResult:
    for line in win_patterns(board.size):
        first = board.cell_owner(line[0])
        if first is Team.NONE:
            continue
        if all(board.cell_owner(cell) is first for cell in line[1:]):
            return WinResult(is_win=True, winner=first, winning_cells=line)
    return WinResult(is_win=False)


__all__ = ["WinResult", "check_for_win", "win_patterns"]
