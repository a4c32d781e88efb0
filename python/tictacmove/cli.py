"""Command-line interface for hot-seat Tic-Tac-Move."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Tuple

from .config import GameSettings, SettingsError
from .game.board import Team
from .game.resolver import ResolutionResult
from .game.rules import ActionResult, GameRules
from .game.win import WinResult
from .protocol import board_message, encode, resolution_message, win_message


SYMBOLS = {Team.NONE: ".", Team.BLUE: "B", Team.RED: "R"}
QUIT_WORDS = {"q", "quit", "exit"}


def _render_board(state: GameRules) -> None:
    board = state.board
    print("\n   " + " ".join(str(col) for col in range(board.size)))
    for row in range(board.size):
        cells = []
        for col in range(board.size):
            piece = board.piece_at((row, col))
            if piece is None:
                cells.append(SYMBOLS[Team.NONE])
            else:
                symbol = SYMBOLS[piece.team]
                cells.append(symbol if board.premove_count(piece.id) == 0 else symbol.lower())
        print(f"{row:2} " + " ".join(cells))
    print()


def _emit(message: dict) -> None:
    sys.stdout.write(encode(message).decode("utf-8"))
    sys.stdout.flush()


def _say(text: str, as_json: bool) -> None:
    # stdout carries protocol lines only in JSON mode
    print(text, file=sys.stderr if as_json else sys.stdout)


def _prompt(prompt: str, as_json: bool = False) -> Optional[str]:
    try:
        if as_json:
            sys.stderr.write(prompt)
            sys.stderr.flush()
            value = input()
        else:
            value = input(prompt)
    except EOFError:
        return None

    value = value.strip().lower()
    if value in QUIT_WORDS:
        return None
    return value


def _parse_cell(text: str) -> Optional[Tuple[int, int]]:
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def _report_resolution(team: Team, result: ResolutionResult, as_json: bool) -> None:
    if as_json:
        _emit(resolution_message(team, result))
        return

    if result.is_empty:
        print(f"No queued moves for {team.value.capitalize()}.")
        return

    print(f"{team.value.capitalize()} moves resolve:")
    for first, second in result.swaps:
        print(f"  pieces {first} and {second} swap places")
    swapped = {piece_id for pair in result.swaps for piece_id in pair}
    for move in result.successful_moves:
        if move.piece_id not in swapped:
            print(f"  piece {move.piece_id} moves {move.direction.value} to {move.target}")
    for move in result.blocked_moves:
        print(f"  piece {move.piece_id} is blocked moving {move.direction.value}")
    if result.destroyed_piece_ids:
        print(f"  collision destroys {', '.join(str(pid) for pid in result.destroyed_piece_ids)}")


def _report_end(win: Optional[WinResult], as_json: bool) -> None:
    if as_json:
        _emit(win_message(win or WinResult(is_win=False)))
        return
    if win is not None and win.is_win:
        print(f"{win.winner.value.capitalize()} wins with {list(win.winning_cells)}!")
    else:
        print("It's a draw!")


def _show(state: GameRules, as_json: bool) -> None:
    if as_json:
        _emit(board_message(state.board))
    else:
        _render_board(state)


def _placement(state: GameRules, as_json: bool) -> Optional[ActionResult]:
    team = state.turn.active_team
    while True:
        text = _prompt(f"{team.value.capitalize()} places a piece (row col, or q to quit): ", as_json)
        if text is None:
            return None

        cell = _parse_cell(text)
        if cell is None:
            _say("Please enter a row and a column, e.g. '1 2'.", as_json)
            continue

        result = state.place_piece(*cell)
        if not result.legal:
            _say(f"Cannot place there: {result.error}. Try again.", as_json)
            continue
        return result


def _premoves(state: GameRules, as_json: bool) -> Optional[ActionResult]:
    session = state.premoves
    while True:
        if not as_json:
            print(
                f"Queued {session.depth}/{session.max_premoves} moves; "
                f"piece would end at {session.projected_position}."
            )
        text = _prompt("Select an adjacent cell (row col), 'c' to confirm or 's' to stay: ", as_json)
        if text is None:
            return None

        if text in {"c", "confirm"}:
            result = state.confirm_premove()
        elif text in {"s", "stay"}:
            result = state.stay()
        else:
            cell = _parse_cell(text)
            if cell is None:
                _say("Please enter a row and a column, 'c' or 's'.", as_json)
                continue
            result = state.select_target(*cell)

        if not result.legal:
            _say(f"Rejected: {result.error}.", as_json)
            continue
        if result.resolution is not None:
            return result


def _run_game(settings: GameSettings, as_json: bool) -> int:
    state = GameRules(settings)
    if not as_json:
        print(f"Tic-Tac-Move on a {settings.board_size}x{settings.board_size} board. Blue opens.")
        print("Premoves run one placement later: each team's queued moves resolve after the other team acts.")

    while True:
        _show(state, as_json)

        placed = _placement(state, as_json)
        if placed is None:
            break
        if placed.win is not None:
            _show(state, as_json)
            _report_end(placed.win, as_json)
            return 0

        if not as_json:
            _render_board(state)
        queued = _premoves(state, as_json)
        if queued is None:
            break

        assert queued.resolution is not None
        _report_resolution(queued.resolved_team, queued.resolution, as_json)
        if queued.win is not None or queued.draw:
            _show(state, as_json)
            _report_end(queued.win, as_json)
            return 0

    _say("Thanks for playing!", as_json)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tic-Tac-Move hot-seat game")
    parser.add_argument("--size", type=int, default=None, help="board size (default: $TICTACMOVE_BOARD_SIZE or 3)")
    parser.add_argument("--json", action="store_true", help="print newline-delimited JSON events instead of a board")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = GameSettings.from_env(args.size)
    except SettingsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return _run_game(settings, args.json)


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    sys.exit(main())
