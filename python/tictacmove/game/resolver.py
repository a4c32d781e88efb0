"""Simultaneous movement resolution for one team's queued premoves.

Each call consumes exactly one queued step per piece and applies the rules
in a fixed order: edge blocks, swaps, collisions, stationary blocks, then
execution. Changing the order changes the game.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..geometry import Direction, Position, step
from .board import BoardState, Piece, PremoveEntry, PremoveOutcome, Team


LOG = logging.getLogger("tictacmove.resolver")


@dataclass(frozen=True)
class MoveAction:
    piece_id: int
    origin: Position
    target: Position
    direction: Direction


@dataclass
class ResolutionResult:
    successful_moves: List[MoveAction] = field(default_factory=list)
    blocked_moves: List[MoveAction] = field(default_factory=list)
    destroyed_piece_ids: List[int] = field(default_factory=list)
    swaps: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.successful_moves or self.blocked_moves or self.destroyed_piece_ids or self.swaps)

    def outcome_for(self, piece_id: int) -> Optional[PremoveOutcome]:
        # None when the piece had no part in this pass
        if piece_id in self.destroyed_piece_ids:
            return PremoveOutcome.DESTROYED
        if any(piece_id in pair for pair in self.swaps):
            return PremoveOutcome.SWAPPED
        if any(move.piece_id == piece_id for move in self.successful_moves):
            return PremoveOutcome.MOVED
        if any(move.piece_id == piece_id for move in self.blocked_moves):
            return PremoveOutcome.BLOCKED
        return None


Intentions = Dict[int, MoveAction]


class MovementResolver:
    def __init__(self, board: BoardState) -> None:
        self.board = board

    def resolve(self, team: Team) -> ResolutionResult:
        """Resolve the front queued step of every ``team`` piece.

        Pieces of other teams are never intentions here, so from this pass's
        point of view they are always stationary.
        """

        return self._resolve(self.board.queued_premoves(team), team.value)

    def resolve_all(self) -> ResolutionResult:
        """Resolve the front step of every queued piece, whatever its team, in one pass."""

        return self._resolve(self.board.queued_premoves(), "all teams")

    def _resolve(self, premoves: Dict[int, PremoveEntry], label: str) -> ResolutionResult:
        result = ResolutionResult()
        if not premoves:
            LOG.debug("No queued premoves for %s", label)
            return result

        intentions = self._build_intentions(premoves)
        self._handle_edge_blocks(intentions, result)
        self._handle_swaps(intentions, result)
        self._handle_collisions(intentions, result)
        self._handle_stationary_blocks(intentions, result)
        self._execute(intentions, result)
        self._consume_queues(premoves, result)

        LOG.info(
            "Resolved %s: %d moved, %d blocked, %d destroyed, %d swaps",
            label,
            len(result.successful_moves),
            len(result.blocked_moves),
            len(result.destroyed_piece_ids),
            len(result.swaps),
        )
        return result

    def _build_intentions(self, premoves: Dict[int, PremoveEntry]) -> Intentions:
        # Targets are computed from where the piece stands now, not the cached source
        intentions: Intentions = {}
        for piece_id in sorted(premoves):
            direction = premoves[piece_id].direction
            if direction is Direction.NONE:
                continue

            piece = self.board.piece_by_id(piece_id)
            if piece is None:
                continue

            intentions[piece_id] = MoveAction(
                piece_id=piece_id,
                origin=piece.position,
                target=step(piece.position, direction),
                direction=direction,
            )
        return intentions

    def _handle_edge_blocks(self, intentions: Intentions, result: ResolutionResult) -> None:
        for piece_id, action in list(intentions.items()):
            if not self.board.is_in_bounds(action.target):
                LOG.debug("Piece %d blocked by edge at %s", piece_id, action.target)
                result.blocked_moves.append(action)
                del intentions[piece_id]

    def _handle_swaps(self, intentions: Intentions, result: ResolutionResult) -> None:
        ordered = sorted(intentions)
        swapped: Set[int] = set()
        for index, first_id in enumerate(ordered):
            if first_id in swapped:
                continue
            first = intentions[first_id]
            for second_id in ordered[index + 1 :]:
                if second_id in swapped:
                    continue
                second = intentions[second_id]
                if first.target == second.origin and second.target == first.origin:
                    LOG.debug("Pieces %d and %d swap", first_id, second_id)
                    result.swaps.append((first_id, second_id))
                    result.successful_moves.extend((first, second))
                    swapped.update((first_id, second_id))
                    break

        for piece_id in swapped:
            del intentions[piece_id]

    def _handle_collisions(self, intentions: Intentions, result: ResolutionResult) -> None:
        by_target: Dict[Position, List[int]] = defaultdict(list)
        for piece_id, action in intentions.items():
            by_target[action.target].append(piece_id)

        for target, claimants in by_target.items():
            if len(claimants) < 2:
                continue
            LOG.debug("Collision at %s destroys %s", target, claimants)
            for piece_id in claimants:
                result.destroyed_piece_ids.append(piece_id)
                del intentions[piece_id]

    def _handle_stationary_blocks(self, intentions: Intentions, result: ResolutionResult) -> None:
        # A blocked piece stays put, which can in turn block whoever was
        # moving into its cell, so repeat until nothing changes.
        while True:
            blocked = [
                piece_id
                for piece_id, action in intentions.items()
                if self._is_stationary_occupant(self.board.piece_at(action.target), intentions)
            ]
            if not blocked:
                return
            for piece_id in blocked:
                LOG.debug("Piece %d blocked by occupant at %s", piece_id, intentions[piece_id].target)
                result.blocked_moves.append(intentions.pop(piece_id))

    @staticmethod
    def _is_stationary_occupant(occupant: Optional[Piece], intentions: Intentions) -> bool:
        return occupant is not None and occupant.id not in intentions

    def _execute(self, intentions: Intentions, result: ResolutionResult) -> None:
        for first_id, second_id in result.swaps:
            first = self.board.piece_by_id(first_id)
            second = self.board.piece_by_id(second_id)
            if first is None or second is None:
                continue
            first_origin, second_origin = first.position, second.position
            self.board.move_piece(first_id, second_origin)
            self.board.move_piece(second_id, first_origin)

        for piece_id, action in intentions.items():
            self.board.move_piece(piece_id, action.target)
            result.successful_moves.append(action)

        for piece_id in result.destroyed_piece_ids:
            self.board.remove_piece(piece_id)

    def _consume_queues(self, premoves: Dict[int, PremoveEntry], result: ResolutionResult) -> None:
        for piece_id, entry in premoves.items():
            if self.board.piece_by_id(piece_id) is None:
                # Destroyed this pass; the entry went with the piece
                entry.outcome = PremoveOutcome.DESTROYED
                continue
            entry.outcome = result.outcome_for(piece_id) or PremoveOutcome.PENDING
            self.board.dequeue_consumed_move(piece_id)


__all__ = ["MoveAction", "MovementResolver", "ResolutionResult"]
