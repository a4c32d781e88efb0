"""Premove input for the piece that was just placed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..geometry import Direction, Position, direction_between, neighbors, step
from .board import BoardState, Piece


@dataclass
class SelectionResult:
    accepted: bool
    finished: bool = False
    direction: Direction = Direction.NONE
    error: Optional[str] = None


class PremoveSession:
    """Turns "select adjacent cell" events into queued directions for one piece.

    Each selection is read relative to the *projected* position, i.e. where
    the piece will stand after every direction queued so far, so a player can
    trace a path one cell at a time. The queue is capped at ``size - 2``.
    """

    def __init__(self, board: BoardState, max_premoves: Optional[int] = None) -> None:
        self.board = board
        self.max_premoves = board.size - 2 if max_premoves is None else max_premoves
        self._piece: Optional[Piece] = None
        self._projected: Optional[Position] = None

    @property
    def is_active(self) -> bool:
        return self._piece is not None

    @property
    def piece(self) -> Optional[Piece]:
        return self._piece

    @property
    def projected_position(self) -> Optional[Position]:
        return self._projected

    @property
    def depth(self) -> int:
        if self._piece is None:
            return 0
        return self.board.premove_count(self._piece.id)

    def begin(self, piece: Piece) -> None:
        self._piece = piece
        self._projected = piece.position

    def end(self) -> None:
        self._piece = None
        self._projected = None

    def handle_target_selection(self, position: Position) -> SelectionResult:
        if self._piece is None or self._projected is None:
            return SelectionResult(accepted=False, error="no_active_session")

        # Clicking the piece itself: stay if nothing queued yet, else confirm
        if position == self._piece.position:
            if self.depth == 0:
                return self.stay()
            return self.confirm()

        if not self.board.is_in_bounds(position):
            return SelectionResult(accepted=False, error="out_of_bounds")

        direction = direction_between(self._projected, position)
        if direction is Direction.NONE:
            return SelectionResult(accepted=False, error="not_adjacent")

        return self._queue(direction)

    def confirm(self) -> SelectionResult:
        if self._piece is None:
            return SelectionResult(accepted=False, error="no_active_session")
        self.end()
        return SelectionResult(accepted=True, finished=True)

    def stay(self) -> SelectionResult:
        if self._piece is None:
            return SelectionResult(accepted=False, error="no_active_session")
        self.board.set_queued_direction(self._piece.id, Direction.NONE)
        self.end()
        return SelectionResult(accepted=True, finished=True)

    def highlight_targets(self) -> List[Position]:
        if self._projected is None:
            return []
        return neighbors(self._projected, self.board.size)

    def path(self) -> List[Position]:
        if self._piece is None:
            return []
        entry = self.board.queued_premoves().get(self._piece.id)
        return entry.path() if entry is not None else []

    def _queue(self, direction: Direction) -> SelectionResult:
        assert self._piece is not None and self._projected is not None
        self.board.set_queued_direction(self._piece.id, direction)
        self._projected = step(self._projected, direction)

        if self.depth >= self.max_premoves:
            self.end()
            return SelectionResult(accepted=True, finished=True, direction=direction)
        return SelectionResult(accepted=True, direction=direction)


__all__ = ["PremoveSession", "SelectionResult"]
