"""Turn sequencing built on top of :mod:`tictacmove.game.board`.

A round runs: Blue places and premoves, Red's queued moves resolve, Red
places and premoves, Blue's queued moves resolve. Each team's premoves
therefore execute one placement later than they were entered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import GameSettings
from .board import BoardState, Piece, Team
from .premove import PremoveSession, SelectionResult
from .resolver import MovementResolver, ResolutionResult
from .win import WinResult, check_for_win


LOG = logging.getLogger("tictacmove.rules")


class GamePhase(Enum):
    BLUE_PLACEMENT = "blue_placement"
    BLUE_PREMOVE = "blue_premove"
    RED_RESOLUTION = "red_resolution"
    RED_PLACEMENT = "red_placement"
    RED_PREMOVE = "red_premove"
    BLUE_RESOLUTION = "blue_resolution"
    GAME_OVER = "game_over"


_AFTER_PLACEMENT = {
    GamePhase.BLUE_PLACEMENT: GamePhase.BLUE_PREMOVE,
    GamePhase.RED_PLACEMENT: GamePhase.RED_PREMOVE,
}

_AFTER_PREMOVE = {
    GamePhase.BLUE_PREMOVE: GamePhase.RED_RESOLUTION,
    GamePhase.RED_PREMOVE: GamePhase.BLUE_RESOLUTION,
}

_AFTER_RESOLUTION = {
    GamePhase.RED_RESOLUTION: GamePhase.RED_PLACEMENT,
    GamePhase.BLUE_RESOLUTION: GamePhase.BLUE_PLACEMENT,
}

_ACTIVE_TEAM = {
    GamePhase.BLUE_PLACEMENT: Team.BLUE,
    GamePhase.BLUE_PREMOVE: Team.BLUE,
    GamePhase.RED_PLACEMENT: Team.RED,
    GamePhase.RED_PREMOVE: Team.RED,
}

_RESOLVING_TEAM = {
    GamePhase.RED_RESOLUTION: Team.RED,
    GamePhase.BLUE_RESOLUTION: Team.BLUE,
}


@dataclass
class TurnState:
    """Tracks the phase and turn counter beyond the raw board."""

    phase: GamePhase = GamePhase.BLUE_PLACEMENT
    turn_number: int = 1

    @property
    def active_team(self) -> Team:
        return _ACTIVE_TEAM.get(self.phase, Team.NONE)

    @property
    def resolving_team(self) -> Team:
        return _RESOLVING_TEAM.get(self.phase, Team.NONE)

    def can_place(self) -> bool:
        return self.phase in _AFTER_PLACEMENT

    def can_premove(self) -> bool:
        return self.phase in _AFTER_PREMOVE

    def is_resolution(self) -> bool:
        return self.phase in _AFTER_RESOLUTION

    def is_game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    def after_placement(self) -> None:
        self.phase = _AFTER_PLACEMENT.get(self.phase, self.phase)

    def after_premove(self) -> None:
        self.phase = _AFTER_PREMOVE.get(self.phase, self.phase)

    def after_resolution(self) -> None:
        # A full cycle ends once Blue's moves have resolved
        if self.phase is GamePhase.BLUE_RESOLUTION:
            self.turn_number += 1
        self.phase = _AFTER_RESOLUTION.get(self.phase, self.phase)

    def game_over(self) -> None:
        self.phase = GamePhase.GAME_OVER


@dataclass
class ActionResult:
    legal: bool
    error: Optional[str] = None
    piece: Optional[Piece] = None
    selection: Optional[SelectionResult] = None
    resolution: Optional[ResolutionResult] = None
    resolved_team: Team = Team.NONE
    win: Optional[WinResult] = None
    draw: bool = False


class GameRules:
    """Enforces the phase order and drives placement, premoves and resolution."""

    def __init__(self, settings: Optional[GameSettings] = None) -> None:
        self.settings = settings or GameSettings()
        self.board = BoardState(self.settings.board_size)
        self.resolver = MovementResolver(self.board)
        self.premoves = PremoveSession(self.board, max_premoves=self.settings.max_premoves)
        self.turn = TurnState()
        self.winner: Team = Team.NONE
        self.is_draw = False

    def reset(self) -> None:
        self.board.reset()
        self.premoves.end()
        self.turn = TurnState()
        self.winner = Team.NONE
        self.is_draw = False

    def place_piece(self, row: int, col: int) -> ActionResult:
        if self.turn.is_game_over():
            return ActionResult(legal=False, error="game_over")
        if not self.turn.can_place():
            return ActionResult(legal=False, error="not_placement_phase")

        team = self.turn.active_team
        piece = self.board.place_piece(row, col, self.turn.turn_number, team)
        if piece is None:
            return ActionResult(legal=False, error="cell_unavailable")

        LOG.debug("%s placed piece %d at %s", team.value, piece.id, piece.position)
        self.turn.after_placement()

        win = check_for_win(self.board)
        if win.is_win:
            self._finish(win)
            return ActionResult(legal=True, piece=piece, win=win)

        self.premoves.begin(piece)
        return ActionResult(legal=True, piece=piece)

    def select_target(self, row: int, col: int) -> ActionResult:
        if not self.turn.can_premove():
            return self._premove_phase_error()
        return self._apply_selection(self.premoves.handle_target_selection((row, col)))

    def confirm_premove(self) -> ActionResult:
        if not self.turn.can_premove():
            return self._premove_phase_error()
        return self._apply_selection(self.premoves.confirm())

    def stay(self) -> ActionResult:
        if not self.turn.can_premove():
            return self._premove_phase_error()
        return self._apply_selection(self.premoves.stay())

    def _premove_phase_error(self) -> ActionResult:
        if self.turn.is_game_over():
            return ActionResult(legal=False, error="game_over")
        return ActionResult(legal=False, error="not_premove_phase")

    def _apply_selection(self, selection: SelectionResult) -> ActionResult:
        if not selection.accepted:
            return ActionResult(legal=False, error=selection.error, selection=selection)
        if not selection.finished:
            return ActionResult(legal=True, selection=selection)

        self.turn.after_premove()
        return self._run_resolution(selection)

    def _run_resolution(self, selection: SelectionResult) -> ActionResult:
        # The other team's moves from its previous turn execute now
        team = self.turn.resolving_team
        resolution = self.resolver.resolve(team)
        self.board.clear_just_placed_flags(team)
        result = ActionResult(legal=True, selection=selection, resolution=resolution, resolved_team=team)

        win = check_for_win(self.board)
        if win.is_win:
            self._finish(win)
            result.win = win
            return result

        if self.board.is_full():
            self._finish(None)
            result.draw = True
            return result

        self.turn.after_resolution()
        self.board.current_team = self.turn.active_team
        return result

    def _finish(self, win: Optional[WinResult]) -> None:
        self.premoves.end()
        self.turn.game_over()
        if win is None:
            self.is_draw = True
            LOG.info("Game drawn on turn %d", self.turn.turn_number)
        else:
            self.winner = win.winner
            LOG.info("%s wins on turn %d", win.winner.value, self.turn.turn_number)

    def remaining(self, team: Team) -> int:
        return len(self.board.pieces(team))


__all__ = ["ActionResult", "GamePhase", "GameRules", "TurnState"]
