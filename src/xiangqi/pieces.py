"""Defines the types of xiangqi (Chinese chess) pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class PieceType(Enum):
    GENERAL = auto()
    ADVISOR = auto()
    ELEPHANT = auto()
    HORSE = auto()
    CHARIOT = auto()
    CANNON = auto()
    SOLDIER = auto()


class Color(Enum):
    RED = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.RED else Color.RED


# Letters used in board diagrams (upper case: red, lower case: black)
LETTER_TO_PIECE: dict[str, PieceType] = {
    "k": PieceType.GENERAL,
    "a": PieceType.ADVISOR,
    "e": PieceType.ELEPHANT,
    "h": PieceType.HORSE,
    "r": PieceType.CHARIOT,
    "c": PieceType.CANNON,
    "s": PieceType.SOLDIER,
}
PIECE_TO_LETTER: dict[PieceType, str] = {value: key for key, value in LETTER_TO_PIECE.items()}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_letter(cls, character: str) -> Self:
        color = Color.RED if character.isupper() else Color.BLACK
        return cls(LETTER_TO_PIECE[character.lower()], color)

    def to_letter(self) -> str:
        letter = PIECE_TO_LETTER[self.type]
        return letter.upper() if self.color == Color.RED else letter
