"""Chess pieces and the two sides. Pieces are immutable values: a promotion yields a new piece."""

from dataclasses import dataclass, field
from enum import Enum, StrEnum, auto
from typing import Self


class PieceType(StrEnum):
    """The value is the letter used in FEN and UCI notation (lower case)"""

    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


# Material, scaled by 10 so that a full army stays well below the mate score used by the search (1000).
# The king has no material value.
PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 10,
    PieceType.KNIGHT: 30,
    PieceType.BISHOP: 30,
    PieceType.ROOK: 50,
    PieceType.QUEEN: 90,
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color
    points: int = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "points", PIECE_POINTS.get(self.type, 0))

    @classmethod
    def from_fen(cls, character: str) -> Self:
        """Upper case letters are white pieces, lower case letters black pieces"""
        color = Color.WHITE if character.isupper() else Color.BLACK
        return cls(PieceType(character.lower()), color)

    def to_fen(self) -> str:
        return self.type.value.upper() if self.color == Color.WHITE else self.type.value

    def promoted_to(self, new_type: PieceType) -> Self:
        return type(self)(new_type, self.color)
