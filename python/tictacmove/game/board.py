from __future__ import annotations

import itertools
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Optional

from ..config import MIN_BOARD_SIZE, SettingsError
from ..geometry import Direction, Position, all_cells, in_bounds, step


class Team(Enum):
    NONE = "none"
    BLUE = "blue"
    RED = "red"


# Flip between teams
def opponent(team: Team) -> Team:
    if team is Team.BLUE:
        return Team.RED
    if team is Team.RED:
        return Team.BLUE
    return Team.NONE


class PremoveOutcome(Enum):
    PENDING = "pending"
    MOVED = "moved"
    BLOCKED = "blocked"
    DESTROYED = "destroyed"
    SWAPPED = "swapped"


@dataclass(eq=False)
class Piece:
    id: int
    team: Team
    position: Position
    queued_direction: Direction = Direction.NONE
    just_placed: bool = True
    placed_on_turn: int = 0


@dataclass
class PremoveEntry:
    """Pending directions for one piece, consumed front first."""

    piece_id: int
    source_position: Position
    moves: Deque[Direction] = field(default_factory=deque)
    outcome: PremoveOutcome = PremoveOutcome.PENDING

    @property
    def direction(self) -> Direction:
        return self.moves[0] if self.moves else Direction.NONE

    @property
    def target_position(self) -> Position:
        return step(self.source_position, self.direction)

    def path(self) -> List[Position]:
        # Cells visited if every queued step succeeds
        cells: List[Position] = []
        position = self.source_position
        for direction in self.moves:
            position = step(position, direction)
            cells.append(position)
        return cells


class BoardState:
    """Grid, pieces and premove queues for one game.

    The grid and the id index are only ever changed through
    :meth:`_update_index`, which keeps ``piece.position`` and the grid cell
    pointing at each other.
    """

    def __init__(self, size: int = MIN_BOARD_SIZE) -> None:
        if size < MIN_BOARD_SIZE:
            raise SettingsError(f"Board size must be at least {MIN_BOARD_SIZE}, got {size}.")
        self.size = size
        self.current_team = Team.BLUE
        self._pieces: Dict[int, Piece] = {}
        self._grid: List[List[Optional[Piece]]] = []
        self._premoves: Dict[int, PremoveEntry] = {}
        self._id_seq = itertools.count(1)
        self.reset()

    def reset(self) -> None:
        # Back to an empty board with a fresh id sequence
        self._pieces.clear()
        self._premoves.clear()
        self._grid = [[None] * self.size for _ in range(self.size)]
        self._id_seq = itertools.count(1)
        self.current_team = Team.BLUE

    # -- queries ---------------------------------------------------------

    def is_in_bounds(self, position: Position) -> bool:
        return in_bounds(position, self.size)

    def piece_at(self, position: Position) -> Optional[Piece]:
        if not self.is_in_bounds(position):
            return None
        row, col = position
        return self._grid[row][col]

    def is_empty(self, position: Position) -> bool:
        return self.is_in_bounds(position) and self.piece_at(position) is None

    def is_full(self) -> bool:
        return all(cell is not None for row in self._grid for cell in row)

    def piece_by_id(self, piece_id: int) -> Optional[Piece]:
        return self._pieces.get(piece_id)

    def pieces(self, team: Optional[Team] = None) -> List[Piece]:
        if team is None:
            return list(self._pieces.values())
        return [piece for piece in self._pieces.values() if piece.team is team]

    def cell_owner(self, position: Position) -> Team:
        piece = self.piece_at(position)
        return piece.team if piece is not None else Team.NONE

    def snapshot(self) -> Dict[Position, Team]:
        return {cell: self.cell_owner(cell) for cell in all_cells(self.size)}

    def queued_premoves(self, team: Optional[Team] = None) -> Dict[int, PremoveEntry]:
        # Copy of the index so callers can mutate the board while iterating
        if team is None:
            return dict(self._premoves)
        return {
            piece_id: entry
            for piece_id, entry in self._premoves.items()
            if piece_id in self._pieces and self._pieces[piece_id].team is team
        }

    def premove_count(self, piece_id: int) -> int:
        entry = self._premoves.get(piece_id)
        return len(entry.moves) if entry is not None else 0

    # -- mutation --------------------------------------------------------

    def place_piece(self, row: int, col: int, turn_number: int, team: Team) -> Optional[Piece]:
        position = (row, col)
        if team is Team.NONE or not self.is_empty(position):
            return None

        piece = Piece(id=next(self._id_seq), team=team, position=position, placed_on_turn=turn_number)
        self._update_index(piece, position)
        return piece

    def move_piece(self, piece_id: int, new_position: Position) -> None:
        piece = self._pieces.get(piece_id)
        if piece is None:
            return
        self._update_index(piece, new_position)

    def remove_piece(self, piece_id: int) -> None:
        piece = self._pieces.get(piece_id)
        if piece is None:
            return
        self._update_index(piece, None)
        self._premoves.pop(piece_id, None)

    def set_queued_direction(self, piece_id: int, direction: Direction) -> None:
        piece = self._pieces.get(piece_id)
        if piece is None:
            return

        if direction is Direction.NONE:
            self.clear_premove(piece_id)
            return

        entry = self._premoves.get(piece_id)
        if entry is None:
            entry = PremoveEntry(piece_id=piece_id, source_position=piece.position)
            self._premoves[piece_id] = entry
        entry.moves.append(direction)
        piece.queued_direction = entry.direction

    def dequeue_consumed_move(self, piece_id: int) -> None:
        entry = self._premoves.get(piece_id)
        if entry is None:
            return

        if entry.moves:
            entry.moves.popleft()

        piece = self._pieces.get(piece_id)
        if not entry.moves:
            del self._premoves[piece_id]
            if piece is not None:
                piece.queued_direction = Direction.NONE
            return

        if piece is not None:
            entry.source_position = piece.position
            piece.queued_direction = entry.direction

    def clear_premove(self, piece_id: int) -> None:
        piece = self._pieces.get(piece_id)
        if piece is not None:
            piece.queued_direction = Direction.NONE
        self._premoves.pop(piece_id, None)

    def clear_all_premoves(self) -> None:
        for piece in self._pieces.values():
            piece.queued_direction = Direction.NONE
        self._premoves.clear()

    def switch_team(self) -> None:
        self.current_team = opponent(self.current_team)

    def clear_just_placed_flags(self, team: Optional[Team] = None) -> None:
        for piece in self.pieces(team):
            piece.just_placed = False

    def _update_index(self, piece: Piece, position: Optional[Position]) -> None:
        # Only release the old cell if it still refers to this piece; during a
        # swap the partner may already have landed there.
        if piece.id in self._pieces:
            old_row, old_col = piece.position
            if self._grid[old_row][old_col] is piece:
                self._grid[old_row][old_col] = None

        if position is None:
            self._pieces.pop(piece.id, None)
            return

        row, col = position
        piece.position = position
        self._grid[row][col] = piece
        self._pieces[piece.id] = piece


__all__ = [
    "BoardState",
    "Piece",
    "PremoveEntry",
    "PremoveOutcome",
    "Team",
    "opponent",
]
