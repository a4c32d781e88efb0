from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 9
DEFAULT_BOARD_SIZE = 3
BOARD_SIZE_ENV = "TICTACMOVE_BOARD_SIZE"


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class GameSettings:
    board_size: int = DEFAULT_BOARD_SIZE

    def __post_init__(self) -> None:
        # Reject sizes the win checker and premove cap cannot work with
        if isinstance(self.board_size, bool) or not isinstance(self.board_size, int):
            raise SettingsError(f"Board size must be an integer, got {self.board_size!r}.")
        if not MIN_BOARD_SIZE <= self.board_size <= MAX_BOARD_SIZE:
            raise SettingsError(
                f"Board size must be between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}, got {self.board_size}."
            )

    @property
    def win_length(self) -> int:
        return self.board_size

    @property
    def max_premoves(self) -> int:
        return self.board_size - 2

    @classmethod
    def from_env(cls, board_size: Optional[int] = None) -> "GameSettings":
        # Explicit argument wins over the environment
        if board_size is not None:
            return cls(board_size=board_size)

        raw = os.getenv(BOARD_SIZE_ENV, "").strip()
        if not raw:
            return cls()

        try:
            value = int(raw)
        except ValueError as exc:
            raise SettingsError(f"{BOARD_SIZE_ENV} must be an integer, got {raw!r}.") from exc
        return cls(board_size=value)


__all__ = [
    "BOARD_SIZE_ENV",
    "DEFAULT_BOARD_SIZE",
    "GameSettings",
    "MAX_BOARD_SIZE",
    "MIN_BOARD_SIZE",
    "SettingsError",
]
