"""Unit tests for /src/xiangqi/moves.py and /src/xiangqi/board.py"""

import pytest

from src.core.position import Position
from src.xiangqi.board import STARTING_DIAGRAM, Board
from src.xiangqi.moves import in_palace, on_own_side
from src.xiangqi.pieces import Color, Piece, PieceType

EMPTY_ROW = "........."


def board_from(**rows: str) -> Board:
    """10x9 board with the given rows (keyword `r<index>`) filled in"""
    return Board.from_diagram([rows.get(f"r{index}", EMPTY_ROW) for index in range(10)])


def destinations(board: Board, position: Position) -> set[Position]:
    return {move.to_square for move in board.candidate_moves_from(position)}


def test_starting_position() -> None:
    board = Board.starting_position()
    assert board.to_diagram() == STARTING_DIAGRAM
    assert board.find_general(Color.RED) == Position(9, 4)
    assert board.find_general(Color.BLACK) == Position(0, 4)
    assert board.piece(Position(7, 1)) == Piece(PieceType.CANNON, Color.RED)
    assert len(board.locate_color(Color.BLACK)) == 16


@pytest.mark.parametrize(
    "position, color, expected",
    [
        (Position(9, 4), Color.RED, True),
        (Position(7, 3), Color.RED, True),
        (Position(6, 4), Color.RED, False),
        (Position(9, 2), Color.RED, False),
        (Position(2, 5), Color.BLACK, True),
        (Position(7, 4), Color.BLACK, False),
    ],
)
def test_palace(position: Position, color: Color, expected: bool) -> None:
    assert in_palace(position, color) is expected


def test_river() -> None:
    assert on_own_side(Position(5, 0), Color.RED)
    assert not on_own_side(Position(4, 0), Color.RED)
    assert on_own_side(Position(4, 0), Color.BLACK)


# -- PIECES --
def test_cannon_captures_over_a_screen() -> None:
    """Red cannon on (7,1) jumps the black cannon on (2,1) to take the horse on (0,1)"""
    board = Board.starting_position()
    targets = destinations(board, Position(7, 1))
    assert Position(0, 1) in targets
    assert Position(2, 1) not in targets
    assert Position(3, 1) in targets


def test_cannon_needs_exactly_one_screen() -> None:
    board = board_from(r0=".r.......", r5=".C.......")
    assert Position(0, 1) not in destinations(board, Position(5, 1))


def test_chariot_slides_until_blocked() -> None:
    board = board_from(r5="R..s..S..")
    assert destinations(board, Position(5, 0)) == {
        Position(5, 1),
        Position(5, 2),
        Position(5, 3),
        *(Position(row, 0) for row in range(10) if row != 5),
    }


def test_horse_leg() -> None:
    board = Board.starting_position()
    assert destinations(board, Position(9, 1)) == {Position(7, 0), Position(7, 2)}

    blocked = board_from(r8=".S.......", r9=".H.......")
    assert destinations(blocked, Position(9, 1)) == {Position(8, 3)}


def test_elephant_stays_on_own_side() -> None:
    board = board_from(r5="..E......")
    assert destinations(board, Position(5, 2)) == {Position(7, 0), Position(7, 4)}


def test_elephant_eye_blocked() -> None:
    board = board_from(r5="..E......", r6="...S.....")
    assert destinations(board, Position(5, 2)) == {Position(7, 0)}


def test_advisor_and_general_stay_in_palace() -> None:
    board = board_from(r7="...A.....", r9="....K....")
    assert destinations(board, Position(7, 3)) == {Position(8, 4)}
    assert destinations(board, Position(9, 4)) == {Position(8, 4), Position(9, 3), Position(9, 5)}


@pytest.mark.parametrize(
    "position, expected",
    [
        (Position(6, 4), {Position(5, 4)}),
        (Position(4, 4), {Position(3, 4), Position(4, 3), Position(4, 5)}),
        (Position(0, 0), {Position(0, 1)}),
    ],
)
def test_soldier_moves(position: Position, expected: set[Position]) -> None:
    """Forward only before the river, sideways too after it, never backwards"""
    rows = [EMPTY_ROW] * 10
    rows[position.row] = "".join("S" if col == position.col else "." for col in range(9))
    assert destinations(Board.from_diagram(rows), position) == expected


# -- CHECK --
def test_generals_facing() -> None:
    board = board_from(r0="....k....", r9="....K....")
    assert board.generals_facing()
    assert board.is_check(Color.RED)
    assert board.is_check(Color.BLACK)

    screened = board_from(r0="....k....", r4="....S....", r9="....K....")
    assert not screened.generals_facing()
