"""JSON event encoding for renderers and animators running out of process."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .game.board import BoardState, Team
from .game.resolver import MoveAction, ResolutionResult
from .game.win import WinResult
from .geometry import Position


Message = Dict[str, Any]
ENCODING = "utf-8"


class ProtocolError(RuntimeError):
    pass


def encode(message: Message) -> bytes:
    """Serialize a message to bytes with a trailing newline."""

    return (json.dumps(message, separators=(",", ":")) + "\n").encode(ENCODING)


def decode(payload: bytes) -> Message:
    """Parse bytes into a Python dictionary."""

    try:
        message = json.loads(payload.decode(ENCODING))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError("Malformed payload") from exc
    if not isinstance(message, dict):
        raise ProtocolError("Payload is not a JSON object")
    return message


def _cell(position: Position) -> List[int]:
    return [position[0], position[1]]


def _move(action: MoveAction) -> Message:
    return {
        "piece": action.piece_id,
        "from": _cell(action.origin),
        "to": _cell(action.target),
        "direction": action.direction.value,
    }


def board_message(board: BoardState) -> Message:
    return {
        "type": "board",
        "size": board.size,
        "pieces": [
            {
                "id": piece.id,
                "team": piece.team.value,
                "at": _cell(piece.position),
                "queued": piece.queued_direction.value,
                "premoves": board.premove_count(piece.id),
            }
            for piece in sorted(board.pieces(), key=lambda p: p.id)
        ],
    }


def resolution_message(team: Team, result: ResolutionResult) -> Message:
    return {
        "type": "resolution",
        "team": team.value,
        "moved": [_move(action) for action in result.successful_moves],
        "blocked": [_move(action) for action in result.blocked_moves],
        "destroyed": list(result.destroyed_piece_ids),
        "swaps": [[first, second] for first, second in result.swaps],
    }


def win_message(win: WinResult) -> Message:
    return {
        "type": "game_over",
        "winner": win.winner.value if win.is_win else None,
        "cells": [_cell(cell) for cell in win.winning_cells],
    }


__all__ = [
    "ProtocolError",
    "board_message",
    "decode",
    "encode",
    "resolution_message",
    "win_message",
]
