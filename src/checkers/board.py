"""
Checkers board and the movement rules of its pieces.

White starts on the bottom three rows and moves up the board (towards row 0), black moves down.
Pieces only ever stand on the dark squares ((row + col) odd).
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Self

from src.core.grid import Grid
from src.core.position import Position, Vector

BOARD_SIZE = 8


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        return -1 if self == Color.WHITE else 1

    @property
    def crowning_row(self) -> int:
        return 0 if self == Color.WHITE else BOARD_SIZE - 1


@dataclass(frozen=True)
class Piece:
    color: Color
    is_king: bool = False

    def crowned(self) -> Self:
        return replace(self, is_king=True)


DIAGRAM_TO_PIECE: dict[str, Piece] = {
    "w": Piece(Color.WHITE),
    "W": Piece(Color.WHITE, is_king=True),
    "b": Piece(Color.BLACK),
    "B": Piece(Color.BLACK, is_king=True),
}
PIECE_TO_DIAGRAM: dict[Piece, str] = {value: key for key, value in DIAGRAM_TO_PIECE.items()}


@dataclass(frozen=True)
class Move:
    from_square: Position
    to_square: Position

    @property
    def is_jump(self) -> bool:
        return abs(self.to_square.row - self.from_square.row) == 2

    @property
    def jumped_square(self) -> Optional[Position]:
        return self.from_square.midpoint(self.to_square) if self.is_jump else None


def directions(piece: Piece) -> list[Vector]:
    """Men move diagonally forward only, kings use all four diagonals (for both steps and jumps)"""
    if piece.is_king:
        return [(-1, -1), (-1, 1), (1, -1), (1, 1)]
    return [(piece.color.forward, -1), (piece.color.forward, 1)]


@dataclass(frozen=True)
class Board:
    grid: Grid[Piece]

    @classmethod
    def starting_position(cls) -> Self:
        rows: list[list[Optional[Piece]]] = []
        for row in range(BOARD_SIZE):
            cells: list[Optional[Piece]] = []
            for col in range(BOARD_SIZE):
                piece = None
                if (row + col) % 2 == 1:
                    if row < 3:
                        piece = Piece(Color.BLACK)
                    elif row > 4:
                        piece = Piece(Color.WHITE)
                cells.append(piece)
            rows.append(cells)
        return cls(Grid.from_rows(rows))

    @classmethod
    def from_diagram(cls, diagram: list[str]) -> Self:
        """One string per row: '.' empty, 'w'/'b' men, 'W'/'B' kings."""
        return cls(
            Grid.from_rows(
                [[DIAGRAM_TO_PIECE.get(char) for char in line] for line in diagram]
            )
        )

    def to_diagram(self) -> list[str]:
        return [
            "".join(PIECE_TO_DIAGRAM[piece] if piece else "." for piece in row)
            for row in self.grid.cells
        ]

    def piece(self, position: Position) -> Optional[Piece]:
        return self.grid.get(position)

    def locate_color(self, color: Color) -> list[Position]:
        return [position for position, piece in self.grid.occupied() if piece.color == color]

    def count(self, color: Color) -> int:
        return len(self.locate_color(color))

    def _is_open(self, position: Position) -> bool:
        return self.grid.contains(position) and self.piece(position) is None

    # --- MOVEMENT RULES ---
    def step_moves(self, position: Position) -> list[Move]:
        """One diagonal step into an empty square"""
        piece = self.piece(position)
        if piece is None:
            return []
        return [
            Move(position, position.offset(d_row, d_col))
            for d_row, d_col in directions(piece)
            if self._is_open(position.offset(d_row, d_col))
        ]

    def jump_moves(self, position: Position) -> list[Move]:
        """Two squares diagonally over exactly one adjacent enemy piece, into an empty landing square"""
        piece = self.piece(position)
        if piece is None:
            return []
        moves: list[Move] = []
        for d_row, d_col in directions(piece):
            landing = position.offset(2 * d_row, 2 * d_col)
            if not self._is_open(landing):
                continue
            jumped = self.piece(position.offset(d_row, d_col))
            if jumped is not None and jumped.color != piece.color:
                moves.append(Move(position, landing))
        return moves

    def can_jump(self, position: Position) -> bool:
        return len(self.jump_moves(position)) > 0

    def must_jump(self, color: Color) -> bool:
        """Forced capture: does any piece of this color have a jump available?"""
        return any(self.can_jump(position) for position in self.locate_color(color))

    def valid_moves_from(self, position: Position) -> list[Move]:
        """Moves of a single piece with the forced-capture rule applied board-wide."""
        piece = self.piece(position)
        if piece is None:
            return []
        if self.must_jump(piece.color):
            return self.jump_moves(position)
        return self.step_moves(position) + self.jump_moves(position)

    def all_moves(self, color: Color) -> list[Move]:
        jumps = [
            move for position in self.locate_color(color) for move in self.jump_moves(position)
        ]
        if jumps:
            return jumps
        return [
            move for position in self.locate_color(color) for move in self.step_moves(position)
        ]

    def move_piece(self, move: Move) -> Self:
        """New board: relocate the piece, remove the piece jumped over, crown a man reaching the far row"""
        piece = self.piece(move.from_square)
        if not piece.is_king and move.to_square.row == piece.color.crowning_row:
            piece = piece.crowned()
        changes: dict[Position, Optional[Piece]] = {
            move.from_square: None,
            move.to_square: piece,
        }
        if move.jumped_square is not None:
            changes[move.jumped_square] = None
        return type(self)(self.grid.set_many(changes))


def get_valid_moves(board: Board, position: Position) -> list[Position]:
    """Destinations of the piece on `position` (honouring forced capture)."""
    return [move.to_square for move in board.valid_moves_from(position)]
