"""Unit tests for /src/go"""

from dataclasses import replace
from random import Random

import pytest

from src.core.exceptions import OccupiedPointError, OutOfBoundsError
from src.core.position import Position
from src.core.shared_types import Difficulty, Status
from src.go.ai import select_opponent_move
from src.go.board import Board, Stone, place_stone
from src.go.game import GameState, Move, apply_move, is_legal, legal_moves

EMPTY_ROW = "........."


def state_from(*rows: str, side_to_move: Stone = Stone.BLACK, **kwargs) -> GameState:
    """9x9 game: the given rows on top, empty rows below"""
    diagram = list(rows) + [EMPTY_ROW] * (9 - len(rows))
    return replace(
        GameState.new_game(9, **kwargs),
        board=Board.from_diagram(diagram),
        side_to_move=side_to_move,
    )


@pytest.fixture
def surrounded() -> GameState:
    """A white stone on (4,4) with black stones on three sides: black to play the last liberty (4,5)"""
    return state_from(
        EMPTY_ROW,
        EMPTY_ROW,
        EMPTY_ROW,
        "....b....",
        "...bw....",
        "....b....",
    )


@pytest.fixture
def ko() -> GameState:
    return state_from(
        ".bw......",
        "bw.w.....",
        ".bw......",
    )


# -- BOARD --
def test_group_and_liberties() -> None:
    board = Board.from_diagram(["bb.......", "w........"] + [EMPTY_ROW] * 7)
    group = board.group_at(Position(0, 0))
    assert group.stones == frozenset({Position(0, 0), Position(0, 1)})
    assert group.liberties == frozenset({Position(0, 2), Position(1, 1)})
    assert board.group_at(Position(5, 5)) is None
    assert len(board.find_groups()) == 2


def test_place_stone_does_not_mutate() -> None:
    board = Board.empty(9)
    placement = place_stone(board, Position(0, 0), Stone.BLACK)
    assert board.stone(Position(0, 0)) is None
    assert placement.board.stone(Position(0, 0)) == Stone.BLACK
    assert not placement.is_suicide


# -- CAPTURES --
def test_capture_single_stone(surrounded: GameState) -> None:
    state = apply_move(surrounded, Move(Position(4, 5)))
    assert state.board.stone(Position(4, 4)) is None
    assert state.black_captures == 1
    assert state.white_captures == 0
    assert state.side_to_move == Stone.WHITE


def test_capture_by_playing_out_the_sequence() -> None:
    state = GameState.new_game(9)
    for move in [
        Move(Position(3, 4)),
        Move(Position(4, 4)),
        Move(Position(5, 4)),
        Move.pass_turn(),
        Move(Position(4, 3)),
        Move.pass_turn(),
        Move(Position(4, 5)),
    ]:
        state = apply_move(state, move)
    assert state.captures(Stone.BLACK) == 1
    assert state.status == Status.PLAYING


def test_occupied_point_raises(surrounded: GameState) -> None:
    with pytest.raises(OccupiedPointError):
        apply_move(surrounded, Move(Position(4, 4)))


@pytest.mark.parametrize("point", [Position(9, 0), Position(5, 30), Position(-1, 4)])
def test_off_board_placement_is_rejected(point: Position) -> None:
    """Nothing changes: the same state stays in play, the board itself still refuses the lookup"""
    state = GameState.new_game(9)
    assert apply_move(state, Move(point)) is None
    with pytest.raises(OutOfBoundsError):
        state.board.stone(point)


def test_suicide_is_rejected() -> None:
    state = state_from(".w.......", "w........")
    assert not is_legal(state, Position(0, 0))
    assert Position(0, 0) not in legal_moves(state)
    assert apply_move(state, Move(Position(0, 0))) is None


def test_placement_that_captures_is_not_suicide() -> None:
    state = state_from(".wb......", "wb.......", "b........")
    new_state = apply_move(state, Move(Position(0, 0)))
    assert new_state.black_captures == 2
    assert new_state.board.stone(Position(0, 1)) is None
    assert new_state.board.stone(Position(1, 0)) is None


def test_legal_moves_is_pure(surrounded: GameState) -> None:
    """Trying the capturing point does not take the white stone off the board"""
    first = legal_moves(surrounded)
    assert Position(4, 5) in first
    assert legal_moves(surrounded) == first
    assert surrounded.board.stone(Position(4, 4)) == Stone.WHITE


def test_ko(ko: GameState) -> None:
    state = apply_move(ko, Move(Position(1, 2)))
    assert state.board.stone(Position(1, 1)) is None
    assert state.ko_point == Position(1, 1)

    # white may not retake at once
    assert not is_legal(state, Position(1, 1))
    assert apply_move(state, Move(Position(1, 1))) is None

    # after an exchange elsewhere the point is playable again
    state = apply_move(state, Move(Position(8, 8)))
    state = apply_move(state, Move(Position(8, 0)))
    assert state.ko_point is None
    state = apply_move(state, Move(Position(1, 1)))
    assert state.board.stone(Position(1, 2)) is None
    assert state.white_captures == 1


def test_every_group_keeps_a_liberty(rng: Random) -> None:
    state = GameState.new_game(9)
    for _ in range(60):
        points = legal_moves(state)
        if not points:
            break
        state = apply_move(state, Move(rng.choice(points)))
        assert all(group.liberties for group in state.board.find_groups())


# -- END OF GAME --
def test_two_passes_end_the_game() -> None:
    state = apply_move(GameState.new_game(9), Move.pass_turn())
    assert state.status == Status.PLAYING
    assert state.side_to_move == Stone.WHITE

    state = apply_move(state, Move.pass_turn())
    assert state.status == Status.FINISHED
    assert state.winner is None
    assert apply_move(state, Move(Position(0, 0))) is None


def test_more_captures_win_after_passes(surrounded: GameState) -> None:
    state = apply_move(surrounded, Move(Position(4, 5)))
    state = apply_move(state, Move.pass_turn())
    state = apply_move(state, Move.pass_turn())
    assert state.winner == Stone.BLACK


def test_placement_resets_pass_count() -> None:
    state = apply_move(GameState.new_game(9), Move.pass_turn())
    state = apply_move(state, Move(Position(0, 0)))
    assert state.pass_count == 0
    state = apply_move(state, Move.pass_turn())
    assert state.status == Status.PLAYING


def test_capture_target_ends_the_game() -> None:
    state = state_from(
        EMPTY_ROW,
        EMPTY_ROW,
        EMPTY_ROW,
        "....b....",
        "...bw....",
        "....b....",
        capture_target=1,
    )
    state = apply_move(state, Move(Position(4, 5)))
    assert state.status == Status.FINISHED
    assert state.winner == Stone.BLACK
    assert state.is_over


# -- COMPUTER OPPONENT --
def test_hard_captures(surrounded: GameState, rng: Random, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOARDGAMES_SECOND_BEST_CHANCE", "0")
    assert select_opponent_move(surrounded, Stone.BLACK, Difficulty.HARD, rng) == Move(Position(4, 5))


def test_medium_captures_when_preferred(
    surrounded: GameState, rng: Random, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("BOARDGAMES_CAPTURE_PREFERENCE", "1")
    assert select_opponent_move(surrounded, Stone.BLACK, Difficulty.MEDIUM, rng) == Move(Position(4, 5))


def test_easy_plays_a_legal_point(rng: Random) -> None:
    state = GameState.new_game(9)
    move = select_opponent_move(state, Stone.BLACK, Difficulty.EASY, rng)
    assert move.point in legal_moves(state)
    assert select_opponent_move(state, Stone.WHITE, Difficulty.EASY, rng) is None
