"""Castling geometry. Shared by the move generator, the board and the game module."""

from dataclasses import dataclass
from enum import Enum

from src.chess.pieces import Color
from src.chess.square import BOARD_DIMENSIONS
from src.core.position import Position

KING_COLUMN = 4


class CastlingDirection(Enum):
    """The value is the letter used for the castling right in FEN"""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self.value.lower() == "k"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Where king and rook stand before and after castling.
    As long as the right has not been revoked, both are known to be on their starting squares.
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    def path(self) -> list[Position]:
        """Squares strictly between king and rook. All of them must be empty to castle."""
        step = 1 if self.rook_from.col > self.king_from.col else -1
        return [
            Position(self.king_from.row, col)
            for col in range(self.king_from.col + step, self.rook_from.col, step)
        ]

    def king_walk(self) -> list[Position]:
        """Squares the king passes through and lands on. None of them may be under attack."""
        step = 1 if self.king_to.col > self.king_from.col else -1
        return [
            Position(self.king_from.row, col)
            for col in range(self.king_from.col + step, self.king_to.col + step, step)
        ]


def castling_squares(direction: CastlingDirection) -> CastlingSquares:
    """The king moves two squares towards the rook, the rook lands on the square the king crossed"""
    home_row = BOARD_DIMENSIONS[0] - 1 if direction.color == Color.WHITE else 0
    step = 1 if direction.is_king_side else -1
    rook_col = BOARD_DIMENSIONS[1] - 1 if direction.is_king_side else 0
    return CastlingSquares(
        king_from=Position(home_row, KING_COLUMN),
        king_to=Position(home_row, KING_COLUMN + 2 * step),
        rook_from=Position(home_row, rook_col),
        rook_to=Position(home_row, KING_COLUMN + step),
    )


CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    direction: castling_squares(direction) for direction in CastlingDirection
}


def castling_options(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CastlingDirection if direction.color == color]
