"""Unit tests for /src/checkers/board.py"""

from src.checkers.board import Board, Color, Move, Piece, get_valid_moves
from src.core.position import Position

EMPTY_ROW = "........"


def diagram(**rows: str) -> list[str]:
    """8 empty rows, with the given rows (keyword `r<index>`) filled in"""
    return [rows.get(f"r{index}", EMPTY_ROW) for index in range(8)]


def test_starting_position() -> None:
    board = Board.starting_position()
    assert board.count(Color.WHITE) == 12
    assert board.count(Color.BLACK) == 12
    assert all((position.row + position.col) % 2 == 1 for position, _ in board.grid.occupied())
    assert board.to_diagram()[0] == ".b.b.b.b"
    assert board.to_diagram()[7] == "w.w.w.w."


def test_diagram_roundtrip() -> None:
    rows = diagram(r0=".......B", r4="...b....", r5="..w.....", r7="W.......")
    assert Board.from_diagram(rows).to_diagram() == rows


def test_men_step_forward_only() -> None:
    board = Board.from_diagram(diagram(r5="..w....."))
    assert get_valid_moves(board, Position(5, 2)) == [Position(4, 1), Position(4, 3)]


def test_kings_step_both_ways() -> None:
    board = Board.from_diagram(diagram(r5="..W....."))
    assert set(get_valid_moves(board, Position(5, 2))) == {
        Position(4, 1),
        Position(4, 3),
        Position(6, 1),
        Position(6, 3),
    }


def test_jump_over_enemy() -> None:
    """White man on (5,2), black man on (4,3): the white man must jump to (3,4)"""
    board = Board.from_diagram(diagram(r4="...b....", r5="..w....."))
    assert get_valid_moves(board, Position(5, 2)) == [Position(3, 4)]


def test_no_jump_over_own_piece_or_into_occupied_square() -> None:
    board = Board.from_diagram(diagram(r3="....b...", r4="...b.w..", r5="..w.w..."))
    # (5,2) -> (3,4) is blocked by the black man on (3,4); (5,4) cannot jump its own piece on (4,5)
    assert board.jump_moves(Position(5, 2)) == []
    assert Move(Position(5, 4), Position(3, 6)) not in board.jump_moves(Position(5, 4))


def test_forced_capture_applies_to_every_piece() -> None:
    board = Board.from_diagram(diagram(r4="...b....", r5="..w...w."))
    assert board.must_jump(Color.WHITE)
    assert get_valid_moves(board, Position(5, 6)) == []
    assert board.all_moves(Color.WHITE) == [Move(Position(5, 2), Position(3, 4))]


def test_move_piece_removes_jumped_piece() -> None:
    board = Board.from_diagram(diagram(r4="...b....", r5="..w....."))
    new_board = board.move_piece(Move(Position(5, 2), Position(3, 4)))
    assert new_board.piece(Position(4, 3)) is None
    assert new_board.piece(Position(3, 4)) == Piece(Color.WHITE)
    assert board.piece(Position(4, 3)) == Piece(Color.BLACK)


def test_crowning() -> None:
    board = Board.from_diagram(diagram(r1="..w.....", r6=".b......"))
    assert board.move_piece(Move(Position(1, 2), Position(0, 1))).piece(Position(0, 1)) == Piece(
        Color.WHITE, is_king=True
    )
    assert board.move_piece(Move(Position(6, 1), Position(7, 0))).piece(Position(7, 0)) == Piece(
        Color.BLACK, is_king=True
    )


def test_jumped_square() -> None:
    assert Move(Position(5, 2), Position(3, 4)).jumped_square == Position(4, 3)
    assert Move(Position(5, 2), Position(4, 3)).jumped_square is None
