"""Unit tests for /src/nine_mens_morris"""

from random import Random

import pytest

from src.core.exceptions import OutOfBoundsError
from src.core.shared_types import Difficulty, Status
from src.nine_mens_morris.ai import open_lines, select_opponent_move
from src.nine_mens_morris.board import CONNECTIONS, MILLS, N_POINTS, Board, Color
from src.nine_mens_morris.game import (
    GameState,
    Move,
    Phase,
    apply_move,
    generate_legal_moves,
    legal_moves,
)


def play(state: GameState, *moves: Move) -> GameState:
    for move in moves:
        new_state = apply_move(state, move)
        assert new_state is not None, f"{move} was rejected"
        state = new_state
    return state


def endgame(white: list[int], black: list[int], side_to_move: Color = Color.WHITE) -> GameState:
    """All pieces placed: the game continues with slides (or flying)"""
    return GameState(
        board=Board.from_pieces(white, black),
        side_to_move=side_to_move,
        white_in_hand=0,
        black_in_hand=0,
    )


@pytest.fixture
def mill_closed() -> GameState:
    """White closed the top line (0, 1, 2) and has to remove a black piece"""
    return play(
        GameState.new_game(),
        Move.place(0),
        Move.place(3),
        Move.place(1),
        Move.place(4),
        Move.place(2),
    )


# -- BOARD --
def test_connections_are_symmetric() -> None:
    assert len(CONNECTIONS) == N_POINTS
    for point, neighbours in CONNECTIONS.items():
        for neighbour in neighbours:
            assert point in CONNECTIONS[neighbour]


def test_mill_points_are_connected() -> None:
    assert len(MILLS) == 16
    for first, middle, last in MILLS:
        assert middle in CONNECTIONS[first]
        assert last in CONNECTIONS[middle]


def test_point_out_of_range() -> None:
    with pytest.raises(OutOfBoundsError):
        Board().piece(N_POINTS)


def test_removable_pieces_outside_mills() -> None:
    board = Board.from_pieces(white=[0, 1, 2, 9], black=[])
    assert board.get_removable_pieces(Color.WHITE) == [9]


def test_removable_pieces_when_all_in_mills() -> None:
    board = Board.from_pieces(white=[0, 1, 2], black=[])
    assert board.get_removable_pieces(Color.WHITE) == [0, 1, 2]


# -- PLACING --
def test_new_game() -> None:
    state = GameState.new_game()
    assert state.phase == Phase.PLACING
    assert state.in_hand(Color.WHITE) == 9
    assert state.in_hand(Color.BLACK) == 9
    assert len(legal_moves(state)) == N_POINTS


def test_placing_on_occupied_point_is_rejected() -> None:
    state = play(GameState.new_game(), Move.place(0))
    assert apply_move(state, Move.place(0)) is None
    assert state.in_hand(Color.WHITE) == 8
    assert state.side_to_move == Color.BLACK


def test_closing_a_mill(mill_closed: GameState) -> None:
    assert mill_closed.board.check_mill(2, Color.WHITE)
    assert mill_closed.awaiting_removal
    assert mill_closed.side_to_move == Color.WHITE
    assert legal_moves(mill_closed) == [3, 4]
    # nothing but a removal is accepted
    assert apply_move(mill_closed, Move.place(5)) is None


def test_removal(mill_closed: GameState) -> None:
    state = apply_move(mill_closed, Move.remove(3))
    assert state.on_board(Color.BLACK) == 1
    assert not state.awaiting_removal
    assert state.side_to_move == Color.BLACK
    assert apply_move(mill_closed, Move.remove(0)) is None


def test_mill_without_removable_piece_passes_the_turn() -> None:
    state = GameState(board=Board.from_pieces(white=[0, 1], black=[]), white_in_hand=7)
    state = apply_move(state, Move.place(2))
    assert not state.awaiting_removal
    assert state.side_to_move == Color.BLACK


# -- MOVING --
def test_phases() -> None:
    assert endgame([0, 4, 12, 20], [2, 10, 15, 23]).phase == Phase.MOVING
    assert endgame([0, 1, 16], [2, 10, 15, 23]).phase == Phase.FLYING


def test_slides_follow_the_lines() -> None:
    state = endgame([0, 4, 12, 20], [2, 10, 15, 23])
    assert legal_moves(state, 0) == [1, 9]
    assert apply_move(state, Move.slide(0, 3)) is None

    state = apply_move(state, Move.slide(0, 9))
    assert state.board.piece(9) == Color.WHITE
    assert state.board.piece(0) is None


def test_legal_moves_is_pure() -> None:
    state = endgame([0, 4, 12, 20], [2, 10, 15, 23])
    assert legal_moves(state, 0) == legal_moves(state, 0)
    assert generate_legal_moves(state) == generate_legal_moves(state)


def test_flying() -> None:
    state = endgame([0, 1, 16], [2, 10, 15, 23])
    assert legal_moves(state, 0) == state.board.empty_points()
    state = apply_move(state, Move.fly(0, 21))
    assert state.board.piece(21) == Color.WHITE


def test_reduced_to_two_pieces_loses() -> None:
    state = endgame([0, 1, 14, 23], [5, 20, 22])
    state = play(state, Move.slide(14, 2), Move.remove(22))
    assert state.status == Status.FINISHED
    assert state.winner == Color.WHITE
    assert generate_legal_moves(state) == []


def test_blocked_side_loses() -> None:
    state = endgame([0, 1, 2, 9], [4, 10, 14, 22], side_to_move=Color.BLACK)
    state = apply_move(state, Move.slide(22, 21))
    assert state.status == Status.FINISHED
    assert state.winner == Color.BLACK


# -- COMPUTER OPPONENT --
def test_open_lines() -> None:
    assert open_lines(Board.from_pieces(white=[0, 1], black=[]), Color.WHITE) == [(0, 1, 2)]
    # a line the opponent already blocked is no threat
    assert open_lines(Board.from_pieces(white=[0, 1], black=[2]), Color.WHITE) == []


def test_hard_removes_from_a_threatening_line(
    mill_closed: GameState, rng: Random, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("BOARDGAMES_SECOND_BEST_CHANCE", "0")
    assert select_opponent_move(mill_closed, Color.WHITE, Difficulty.HARD, rng) == Move.remove(4)


def test_hard_blocks_an_open_line(rng: Random, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOARDGAMES_SECOND_BEST_CHANCE", "0")
    state = GameState(
        board=Board.from_pieces(white=[0, 1], black=[9]),
        side_to_move=Color.BLACK,
        white_in_hand=7,
        black_in_hand=8,
    )
    assert select_opponent_move(state, Color.BLACK, Difficulty.HARD, rng) == Move.place(2)


def test_medium_closes_mills_when_preferred(rng: Random, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOARDGAMES_CAPTURE_PREFERENCE", "1")
    state = GameState(board=Board.from_pieces(white=[0, 1], black=[9]), white_in_hand=7, black_in_hand=8)
    assert select_opponent_move(state, Color.WHITE, Difficulty.MEDIUM, rng) == Move.place(2)


def test_easy_removes_when_a_mill_is_pending(mill_closed: GameState, rng: Random) -> None:
    move = select_opponent_move(mill_closed, Color.WHITE, Difficulty.EASY, rng)
    assert move in (Move.remove(3), Move.remove(4))
    assert select_opponent_move(mill_closed, Color.BLACK, Difficulty.EASY, rng) is None
