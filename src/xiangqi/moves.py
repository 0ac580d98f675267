"""
Pseudo-legal movement rules of the xiangqi pieces, one strategy per piece type.

Board geometry: 10 rows by 9 columns, red at the bottom (rows 5-9), black at the top (rows 0-4).
The river runs between rows 4 and 5. Each side has a 3x3 palace in columns 3-5.
Whether a move leaves the own general exposed is checked by the game module.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.core.position import Position, Vector
from src.xiangqi.pieces import Color, Piece, PieceType

BOARD_ROWS = 10
BOARD_COLS = 9
PALACE_COLS = range(3, 6)


class Board(Protocol):
    def piece(self, position: Position) -> Optional[Piece]: ...


@dataclass(frozen=True)
class Move:
    from_square: Position
    to_square: Position


# --- BOARD REGIONS ---
def is_within_bounds(position: Position) -> bool:
    return position.is_within(BOARD_ROWS, BOARD_COLS)


def in_palace(position: Position, color: Color) -> bool:
    rows = range(7, 10) if color == Color.RED else range(0, 3)
    return position.row in rows and position.col in PALACE_COLS


def on_own_side(position: Position, color: Color) -> bool:
    return position.row >= 5 if color == Color.RED else position.row <= 4


def has_crossed_river(position: Position, color: Color) -> bool:
    return not on_own_side(position, color)


def forward(color: Color) -> int:
    return -1 if color == Color.RED else 1


def _is_target(position: Position, color: Color, board: Board) -> bool:
    """On the board and not occupied by a piece of the own color"""
    if not is_within_bounds(position):
        return False
    occupant = board.piece(position)
    return occupant is None or occupant.color != color


STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]

# orthogonal leg square, followed by the two destinations it unlocks
HORSE_LEGS: list[tuple[Vector, list[Vector]]] = [
    ((-1, 0), [(-2, -1), (-2, 1)]),
    ((1, 0), [(2, -1), (2, 1)]),
    ((0, -1), [(-1, -2), (1, -2)]),
    ((0, 1), [(-1, 2), (1, 2)]),
]


# --- MOVEMENT RULES ---
def candidate_chariot_moves(position: Position, board: Board) -> list[Move]:
    """Slides orthogonally until blocked; the blocker is included when it is an enemy"""
    color = board.piece(position).color
    moves: list[Move] = []
    for d_row, d_col in STRAIGHTS:
        target = position.offset(d_row, d_col)
        while is_within_bounds(target):
            occupant = board.piece(target)
            if occupant is None:
                moves.append(Move(position, target))
            else:
                if occupant.color != color:
                    moves.append(Move(position, target))
                break
            target = target.offset(d_row, d_col)
    return moves


def candidate_cannon_moves(position: Position, board: Board) -> list[Move]:
    """
    Moves like a chariot over empty points, but captures by jumping exactly one piece (the screen).
    The screen itself is never a destination.
    """
    color = board.piece(position).color
    moves: list[Move] = []
    for d_row, d_col in STRAIGHTS:
        target = position.offset(d_row, d_col)
        while is_within_bounds(target) and board.piece(target) is None:
            moves.append(Move(position, target))
            target = target.offset(d_row, d_col)

        # target is now the screen (or off the board)
        target = target.offset(d_row, d_col)
        while is_within_bounds(target):
            occupant = board.piece(target)
            if occupant is not None:
                if occupant.color != color:
                    moves.append(Move(position, target))
                break
            target = target.offset(d_row, d_col)
    return moves


def candidate_horse_moves(position: Position, board: Board) -> list[Move]:
    """L-shaped jump, blocked when the orthogonal leg square is occupied"""
    color = board.piece(position).color
    moves: list[Move] = []
    for (leg_row, leg_col), destinations in HORSE_LEGS:
        leg = position.offset(leg_row, leg_col)
        if not is_within_bounds(leg) or board.piece(leg) is not None:
            continue
        for d_row, d_col in destinations:
            target = position.offset(d_row, d_col)
            if _is_target(target, color, board):
                moves.append(Move(position, target))
    return moves


def candidate_elephant_moves(position: Position, board: Board) -> list[Move]:
    """Two points diagonally, never across the river, blocked when the point in between is occupied"""
    color = board.piece(position).color
    moves: list[Move] = []
    for d_row, d_col in DIAGONALS:
        eye = position.offset(d_row, d_col)
        target = position.offset(2 * d_row, 2 * d_col)
        if not _is_target(target, color, board) or not on_own_side(target, color):
            continue
        if board.piece(eye) is None:
            moves.append(Move(position, target))
    return moves


def candidate_advisor_moves(position: Position, board: Board) -> list[Move]:
    color = board.piece(position).color
    return [
        Move(position, target)
        for target in (position.offset(d_row, d_col) for d_row, d_col in DIAGONALS)
        if in_palace(target, color) and _is_target(target, color, board)
    ]


def candidate_general_moves(position: Position, board: Board) -> list[Move]:
    color = board.piece(position).color
    return [
        Move(position, target)
        for target in (position.offset(d_row, d_col) for d_row, d_col in STRAIGHTS)
        if in_palace(target, color) and _is_target(target, color, board)
    ]


def candidate_soldier_moves(position: Position, board: Board) -> list[Move]:
    """One point forward; sideways steps too once the river is crossed. Never backwards."""
    color = board.piece(position).color
    steps: list[Vector] = [(forward(color), 0)]
    if has_crossed_river(position, color):
        steps.extend([(0, -1), (0, 1)])
    return [
        Move(position, target)
        for target in (position.offset(d_row, d_col) for d_row, d_col in steps)
        if _is_target(target, color, board)
    ]


CandidateMovesFn = Callable[[Position, Board], list[Move]]

MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.GENERAL: candidate_general_moves,
    PieceType.ADVISOR: candidate_advisor_moves,
    PieceType.ELEPHANT: candidate_elephant_moves,
    PieceType.HORSE: candidate_horse_moves,
    PieceType.CHARIOT: candidate_chariot_moves,
    PieceType.CANNON: candidate_cannon_moves,
    PieceType.SOLDIER: candidate_soldier_moves,
}
