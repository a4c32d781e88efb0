"""Tests for simultaneous movement resolution."""

from tictacmove.game.board import BoardState, PremoveOutcome, Team
from tictacmove.game.resolver import MoveAction, MovementResolver
from tictacmove.geometry import Direction


def place(board, row, col, team=Team.BLUE, *directions):
    piece = board.place_piece(row, col, 1, team)
    assert piece is not None
    for direction in directions:
        board.set_queued_direction(piece.id, direction)
    return piece


class TestEmptyAndEdges:
    def test_no_queued_moves_returns_empty_result(self, board):
        piece = place(board, 1, 1)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert result.is_empty
        assert piece.position == (1, 1)

    def test_edge_block_keeps_piece_in_place(self, board, check_occupancy):
        piece = place(board, 0, 0, Team.BLUE, Direction.UP)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert result.blocked_moves == [MoveAction(piece.id, (0, 0), (-1, 0), Direction.UP)]
        assert result.successful_moves == []
        assert piece.position == (0, 0)
        check_occupancy(board)

    def test_edge_block_on_far_side(self, board):
        piece = place(board, 2, 2, Team.BLUE, Direction.RIGHT)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert [move.piece_id for move in result.blocked_moves] == [piece.id]
        assert piece.position == (2, 2)


class TestSingleMoves:
    def test_move_into_empty_cell(self, board, check_occupancy):
        piece = place(board, 1, 1, Team.BLUE, Direction.DOWN)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert [move.target for move in result.successful_moves] == [(2, 1)]
        assert piece.position == (2, 1)
        assert board.piece_at((1, 1)) is None
        check_occupancy(board)

    def test_only_resolving_team_moves(self, board):
        blue = place(board, 0, 0, Team.BLUE, Direction.DOWN)
        red = place(board, 2, 2, Team.RED, Direction.UP)

        MovementResolver(board).resolve(Team.BLUE)

        assert blue.position == (1, 0)
        assert red.position == (2, 2)
        assert board.premove_count(red.id) == 1

    def test_follow_the_leader_moves_both(self, board, check_occupancy):
        back = place(board, 0, 0, Team.BLUE, Direction.RIGHT)
        front = place(board, 0, 1, Team.BLUE, Direction.RIGHT)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert len(result.successful_moves) == 2
        assert back.position == (0, 1)
        assert front.position == (0, 2)
        assert board.piece_at((0, 0)) is None
        check_occupancy(board)

    def test_follow_the_leader_with_leader_placed_first(self, board, check_occupancy):
        front = place(board, 0, 1, Team.BLUE, Direction.RIGHT)
        back = place(board, 0, 0, Team.BLUE, Direction.RIGHT)

        MovementResolver(board).resolve(Team.BLUE)

        assert front.position == (0, 2)
        assert back.position == (0, 1)
        check_occupancy(board)

    def test_rotation_of_three_pieces(self, big_board, check_occupancy):
        first = place(big_board, 0, 0, Team.BLUE, Direction.RIGHT)
        second = place(big_board, 0, 1, Team.BLUE, Direction.DOWN)
        third = place(big_board, 1, 1, Team.BLUE, Direction.LEFT)

        result = MovementResolver(big_board).resolve(Team.BLUE)

        assert len(result.successful_moves) == 3
        assert first.position == (0, 1)
        assert second.position == (1, 1)
        assert third.position == (1, 0)
        check_occupancy(big_board)


class TestStationaryBlocks:
    def test_blocked_by_enemy_occupant(self, board, check_occupancy):
        mover = place(board, 0, 0, Team.BLUE, Direction.RIGHT)
        occupant = place(board, 0, 1, Team.RED)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert [move.piece_id for move in result.blocked_moves] == [mover.id]
        assert mover.position == (0, 0)
        assert occupant.position == (0, 1)
        assert board.piece_at((0, 1)) is occupant
        check_occupancy(board)

    def test_enemy_with_queued_move_is_still_stationary(self, board):
        mover = place(board, 1, 1, Team.BLUE, Direction.RIGHT)
        enemy = place(board, 1, 2, Team.RED, Direction.LEFT)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert result.swaps == []
        assert [move.piece_id for move in result.blocked_moves] == [mover.id]
        assert enemy.position == (1, 2)

    def test_blocked_by_friendly_piece_without_premove(self, board):
        mover = place(board, 2, 0, Team.BLUE, Direction.UP)
        place(board, 1, 0, Team.BLUE)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert [move.piece_id for move in result.blocked_moves] == [mover.id]

    def test_block_cascades_down_a_chain(self, board, check_occupancy):
        back = place(board, 0, 0, Team.BLUE, Direction.RIGHT)
        front = place(board, 0, 1, Team.BLUE, Direction.RIGHT)
        wall = place(board, 0, 2, Team.RED)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert {move.piece_id for move in result.blocked_moves} == {back.id, front.id}
        assert result.successful_moves == []
        assert (back.position, front.position, wall.position) == ((0, 0), (0, 1), (0, 2))
        check_occupancy(board)

    def test_moving_into_cell_of_piece_blocked_by_edge(self, board, check_occupancy):
        back = place(board, 0, 1, Team.BLUE, Direction.RIGHT)
        front = place(board, 0, 2, Team.BLUE, Direction.RIGHT)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert {move.piece_id for move in result.blocked_moves} == {back.id, front.id}
        check_occupancy(board)


class TestSwaps:
    def test_swap_exchanges_positions(self, board, check_occupancy):
        left = place(board, 1, 1, Team.BLUE, Direction.RIGHT)
        right = place(board, 1, 2, Team.BLUE, Direction.LEFT)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert result.swaps == [(left.id, right.id)]
        assert {move.piece_id for move in result.successful_moves} == {left.id, right.id}
        assert left.position == (1, 2)
        assert right.position == (1, 1)
        check_occupancy(board)

    def test_swap_pair_ordered_by_lower_id(self, board):
        right = place(board, 1, 2, Team.BLUE, Direction.LEFT)
        left = place(board, 1, 1, Team.BLUE, Direction.RIGHT)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert result.swaps == [(right.id, left.id)]
        assert left.position == (1, 2)
        assert right.position == (1, 1)

    def test_swap_takes_priority_over_incoming_move(self, board, check_occupancy):
        left = place(board, 1, 1, Team.BLUE, Direction.RIGHT)
        right = place(board, 1, 2, Team.BLUE, Direction.LEFT)
        above = place(board, 0, 2, Team.BLUE, Direction.DOWN)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert result.swaps == [(left.id, right.id)]
        assert result.destroyed_piece_ids == []
        assert [move.piece_id for move in result.blocked_moves] == [above.id]
        assert above.position == (0, 2)
        check_occupancy(board)


class TestCollisions:
    def test_friendly_collision_destroys_both(self, board, check_occupancy):
        first = place(board, 0, 0, Team.BLUE, Direction.RIGHT)
        second = place(board, 0, 2, Team.BLUE, Direction.LEFT)

        result = MovementResolver(board).resolve(Team.BLUE)

        assert sorted(result.destroyed_piece_ids) == [first.id, second.id]
        assert result.successful_moves == []
        assert board.pieces() == []
        assert board.piece_at((0, 1)) is None
        check_occupancy(board)

    def test_three_way_collision_destroys_all(self, board, check_occupancy):
        ids = [
            place(board, 0, 1, Team.BLUE, Direction.DOWN).id,
            place(board, 1, 0, Team.BLUE, Direction.RIGHT).id,
            place(board, 1, 2, Team.BLUE, Direction.LEFT).id,
        ]

        result = MovementResolver(board).resolve(Team.BLUE)

        assert sorted(result.destroyed_piece_ids) == ids
        assert board.piece_at((1, 1)) is None
        assert board.pieces() == []
        check_occupancy(board)

    def test_collision_discards_queues(self, big_board):
        first = place(big_board, 0, 0, Team.BLUE, Direction.RIGHT, Direction.RIGHT)
        second = place(big_board, 0, 2, Team.BLUE, Direction.LEFT)

        MovementResolver(big_board).resolve(Team.BLUE)

        assert big_board.queued_premoves() == {}
        assert big_board.piece_by_id(first.id) is None
        assert big_board.piece_by_id(second.id) is None


class TestAllTeamsPass:
    def test_head_on_collision_between_teams(self, board, check_occupancy):
        blue = place(board, 0, 0, Team.BLUE, Direction.RIGHT)
        red = place(board, 0, 2, Team.RED, Direction.LEFT)

        result = MovementResolver(board).resolve_all()

        assert sorted(result.destroyed_piece_ids) == [blue.id, red.id]
        assert result.successful_moves == []
        assert result.blocked_moves == []
        assert result.swaps == []
        for cell in ((0, 0), (0, 1), (0, 2)):
            assert board.piece_at(cell) is None
        check_occupancy(board)

    def test_swap_between_teams(self, board, check_occupancy):
        blue = place(board, 1, 1, Team.BLUE, Direction.RIGHT)
        red = place(board, 1, 2, Team.RED, Direction.LEFT)

        result = MovementResolver(board).resolve_all()

        assert result.swaps == [(blue.id, red.id)]
        assert blue.position == (1, 2)
        assert red.position == (1, 1)
        check_occupancy(board)


class TestQueueBookkeeping:
    def test_last_direction_consumed(self, board):
        piece = place(board, 1, 1, Team.BLUE, Direction.UP)

        MovementResolver(board).resolve(Team.BLUE)

        assert piece.queued_direction is Direction.NONE
        assert piece.id not in board.queued_premoves()

    def test_multi_step_queue_advances_one_step_per_pass(self, big_board):
        piece = place(big_board, 2, 2, Team.BLUE, Direction.RIGHT, Direction.UP)
        resolver = MovementResolver(big_board)

        resolver.resolve(Team.BLUE)

        entry = big_board.queued_premoves()[piece.id]
        assert piece.position == (2, 3)
        assert entry.source_position == (2, 3)
        assert entry.outcome is PremoveOutcome.MOVED
        assert piece.queued_direction is Direction.UP

        resolver.resolve(Team.BLUE)

        assert piece.position == (1, 3)
        assert big_board.premove_count(piece.id) == 0

    def test_blocked_move_still_consumes_its_slot(self, big_board):
        piece = place(big_board, 0, 0, Team.BLUE, Direction.UP, Direction.RIGHT)

        result = MovementResolver(big_board).resolve(Team.BLUE)

        assert [move.piece_id for move in result.blocked_moves] == [piece.id]
        assert big_board.queued_premoves()[piece.id].outcome is PremoveOutcome.BLOCKED
        assert piece.queued_direction is Direction.RIGHT
        assert piece.position == (0, 0)

    def test_swapped_entry_records_outcome(self, big_board):
        left = place(big_board, 2, 1, Team.BLUE, Direction.RIGHT, Direction.DOWN)
        place(big_board, 2, 2, Team.BLUE, Direction.LEFT)

        MovementResolver(big_board).resolve(Team.BLUE)

        assert big_board.queued_premoves()[left.id].outcome is PremoveOutcome.SWAPPED


def _build(board: BoardState) -> None:
    place(board, 0, 0, Team.BLUE, Direction.RIGHT)
    place(board, 0, 2, Team.BLUE, Direction.LEFT)
    place(board, 2, 0, Team.BLUE, Direction.UP)
    place(board, 1, 0, Team.BLUE, Direction.DOWN)
    place(board, 2, 2, Team.BLUE, Direction.UP)
    place(board, 1, 2, Team.RED)


def test_resolution_is_deterministic():
    first, second = BoardState(3), BoardState(3)
    _build(first)
    _build(second)

    result_a = MovementResolver(first).resolve(Team.BLUE)
    result_b = MovementResolver(second).resolve(Team.BLUE)

    assert result_a == result_b
    assert first.snapshot() == second.snapshot()


def test_outcome_for_reports_each_kind():
    board = BoardState(3)
    _build(board)

    result = MovementResolver(board).resolve(Team.BLUE)

    assert result.swaps == [(3, 4)]
    assert result.outcome_for(1) is PremoveOutcome.DESTROYED
    assert result.outcome_for(3) is PremoveOutcome.SWAPPED
    assert result.outcome_for(5) is PremoveOutcome.BLOCKED
    assert result.outcome_for(6) is None
