"""Xiangqi board: piece placement, candidate moves and the attack / check questions asked by the game module"""

from dataclasses import dataclass
from typing import Optional, Self

from src.core.grid import Grid
from src.core.position import Position
from src.xiangqi.moves import MOVEMENT_RULES, Move
from src.xiangqi.pieces import Color, Piece, PieceType

# one string per row, row 0 is black's back rank. Upper case red, lower case black, '.' empty
STARTING_DIAGRAM = [
    "rheakaehr",
    ".........",
    ".c.....c.",
    "s.s.s.s.s",
    ".........",
    ".........",
    "S.S.S.S.S",
    ".C.....C.",
    ".........",
    "RHEAKAEHR",
]


@dataclass(frozen=True)
class Board:
    grid: Grid[Piece]

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_diagram(STARTING_DIAGRAM)

    @classmethod
    def from_diagram(cls, diagram: list[str]) -> Self:
        return cls(
            Grid.from_rows(
                [
                    [None if char == "." else Piece.from_letter(char) for char in line]
                    for line in diagram
                ]
            )
        )

    def to_diagram(self) -> list[str]:
        return [
            "".join(piece.to_letter() if piece else "." for piece in row)
            for row in self.grid.cells
        ]

    def piece(self, position: Position) -> Optional[Piece]:
        return self.grid.get(position)

    def locate_color(self, color: Color) -> list[Position]:
        return [position for position, piece in self.grid.occupied() if piece.color == color]

    def find_general(self, color: Color) -> Optional[Position]:
        general = Piece(PieceType.GENERAL, color)
        return next(
            (position for position, piece in self.grid.occupied() if piece == general),
            None,
        )

    def candidate_moves_from(self, position: Position) -> list[Move]:
        piece = self.piece(position)
        if piece is None:
            return []
        return MOVEMENT_RULES[piece.type](position, self)

    def generate_candidate_moves(self, color: Color) -> list[Move]:
        candidate_moves: list[Move] = []
        for position in self.locate_color(color):
            candidate_moves.extend(self.candidate_moves_from(position))
        return candidate_moves

    def move_piece(self, move: Move) -> Self:
        return type(self)(
            self.grid.set_many(
                {move.from_square: None, move.to_square: self.piece(move.from_square)}
            )
        )

    def is_under_attack(self, position: Position, by_color: Color) -> bool:
        """Can any pseudo-legal move of `by_color` land on this point?"""
        return any(
            move.to_square == position for move in self.generate_candidate_moves(by_color)
        )

    def generals_facing(self) -> bool:
        """Flying general rule: both generals on one file with nothing in between"""
        red = self.find_general(Color.RED)
        black = self.find_general(Color.BLACK)
        if red is None or black is None or red.col != black.col:
            return False
        return all(
            self.piece(Position(row, red.col)) is None for row in range(black.row + 1, red.row)
        )

    def is_check(self, color: Color) -> bool:
        """The general of `color` is attacked, or exposed to the other general along an open file"""
        general = self.find_general(color)
        if general is None:
            return False
        return self.generals_facing() or self.is_under_attack(general, color.opponent)
