import pytest

from tictacmove.game.board import BoardState, Team


@pytest.fixture
def board():
    return BoardState(3)


@pytest.fixture
def big_board():
    return BoardState(5)


@pytest.fixture
def check_occupancy():
    """Assert that the grid and every piece's own position agree."""

    def check(board: BoardState) -> None:
        seen = set()
        for piece in board.pieces():
            assert board.piece_at(piece.position) is piece
            assert piece.position not in seen
            seen.add(piece.position)
        occupied = {cell for cell, team in board.snapshot().items() if team is not Team.NONE}
        assert occupied == seen

    return check
