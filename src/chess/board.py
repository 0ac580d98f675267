"""Chess board: piece placement, FEN conversion, candidate moves and attacked squares"""

from dataclasses import dataclass
from itertools import groupby
from typing import Optional, Self

from src.chess.castling import CASTLING_RULES
from src.chess.moves import ATTACK_RULES, MOVEMENT_RULES, CandidateMovesFn, Move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS
from src.core.grid import Grid
from src.core.position import Position

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass(frozen=True)
class Board:
    grid: Grid[Piece]

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """
        Build a board from the piece placement field of a FEN string, e.g. "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR".
        Ranks are listed from the 8th (row 0) down to the 1st. A digit stands for that many empty squares.
        """
        rows = [
            [piece for character in rank for piece in cls._expand(character)]
            for rank in fen_str.split("/")
        ]
        return cls(Grid.from_rows(rows))

    @staticmethod
    def _expand(character: str) -> list[Optional[Piece]]:
        return [None] * int(character) if character.isdigit() else [Piece.from_fen(character)]

    def to_fen(self) -> str:
        return "/".join(self._rank_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _rank_to_fen(self, row: int) -> str:
        squares = (self.piece(Position(row, col)) for col in range(BOARD_DIMENSIONS[1]))
        parts: list[str] = []
        for is_empty, run in groupby(squares, key=lambda piece: piece is None):
            pieces = list(run)
            parts.append(str(len(pieces)) if is_empty else "".join(piece.to_fen() for piece in pieces))
        return "".join(parts)

    def piece(self, position: Position) -> Optional[Piece]:
        return self.grid.get(position)

    def locate_color(self, color: Color) -> list[Position]:
        return [position for position, piece in self.grid.occupied() if piece.color == color]

    def find_king(self, color: Color) -> Optional[Position]:
        king = Piece(PieceType.KING, color)
        return next(
            (position for position, piece in self.grid.occupied() if piece == king),
            None,
        )

    def generate_candidate_moves(self, color: Color) -> list[Move]:
        """Moves of all pieces of `color`, ignoring checks. En passant and castling are added by the game module."""
        return [move for origin in self.locate_color(color) for move in self.candidate_moves_from(origin)]

    def candidate_moves_from(self, position: Position) -> list[Move]:
        piece = self.piece(position)
        if piece is None:
            return []
        movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
        return movement_rule(position, self)

    def move_piece(self, move: Move) -> Self:
        """New board with the move played. Also relocates the rook when castling and removes the pawn taken en passant."""
        piece_that_moved = self.piece(move.from_square)
        landing_piece = (
            piece_that_moved.promoted_to(move.promote_to)
            if (piece_that_moved is not None and move.promote_to is not None)
            else piece_that_moved
        )
        changes: dict[Position, Optional[Piece]] = {
            move.from_square: None,
            move.to_square: landing_piece,
        }

        if move.castling_direction is not None:
            rule = CASTLING_RULES[move.castling_direction]
            changes[rule.rook_to] = self.piece(rule.rook_from)
            changes[rule.rook_from] = None

        if move.is_en_passant:
            # the pawn taken stands next to the moving pawn: same row it started from, same column as the target square
            changes[Position(move.from_square.row, move.to_square.col)] = None

        return type(self)(self.grid.set_many(changes))

    def is_under_attack(self, position: Position, by_color: Color) -> bool:
        return any(
            is_attacked(position, by_color, self) for is_attacked in ATTACK_RULES.values()
        )

    def is_any_under_attack(self, positions: list[Position], by_color: Color) -> bool:
        return any(self.is_under_attack(position, by_color) for position in positions)

    def is_any_occupied(self, positions: list[Position]) -> bool:
        return any(self.piece(position) is not None for position in positions)

    def is_check(self, color: Color) -> bool:
        """Is the king of the given color under attack by the opponent?"""
        king_square = self.find_king(color)
        if king_square is None:
            return False
        return self.is_under_attack(king_square, color.opponent)

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        totals = {color: 0 for color in Color}
        for _, piece in self.grid.occupied():
            totals[piece.color] += piece.points
        return totals
