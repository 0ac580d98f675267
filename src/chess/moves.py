"""
Pseudo-legal chess moves: where each piece type can go and which squares it attacks.

Every piece type gets a movement function and an attack function (see `MOVEMENT_RULES` and `ATTACK_RULES`).
Whether a move leaves the own king in check is decided by the game module.
"""

from dataclasses import dataclass, replace
from functools import partial
from typing import Callable, Iterator, Optional, Protocol, Self

from src.chess.castling import CASTLING_RULES, CastlingDirection
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, is_within_bounds, to_algebraic
from src.core.position import Position, Vector


class Board(Protocol):
    def piece(self, position: Position) -> Optional[Piece]: ...


@dataclass(frozen=True)
class Move:
    """A move from one square to another. Castling and en passant carry a marker, promotions the new piece type."""

    from_square: Position
    to_square: Position
    promote_to: Optional[PieceType] = None
    castling_direction: Optional[CastlingDirection] = None
    is_en_passant: bool = False

    def to_uci(self) -> str:
        suffix = self.promote_to.value if self.promote_to else ""
        return f"{to_algebraic(self.from_square)}{to_algebraic(self.to_square)}{suffix}"

    def with_promotion(self, piece_type: PieceType) -> Self:
        return replace(self, promote_to=piece_type)


# --- MOVEMENT RULES ---
KNIGHT_JUMPS: list[Vector] = [(-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
STRAIGHTS: list[Vector] = [(0, 1), (0, -1), (1, 0), (-1, 0)]
ALL_DIRECTIONS: list[Vector] = STRAIGHTS + DIAGONALS


@dataclass(frozen=True)
class Reach:
    """How far a piece travels along each of its vectors. Sliding pieces go on until they are blocked."""

    vectors: list[Vector]
    slides: bool


REACH: dict[PieceType, Reach] = {
    PieceType.KNIGHT: Reach(KNIGHT_JUMPS, slides=False),
    PieceType.BISHOP: Reach(DIAGONALS, slides=True),
    PieceType.ROOK: Reach(STRAIGHTS, slides=True),
    PieceType.QUEEN: Reach(ALL_DIRECTIONS, slides=True),
    PieceType.KING: Reach(ALL_DIRECTIONS, slides=False),
}


def walk(position: Position, board: Board, vector: Vector, slides: bool) -> Iterator[tuple[Position, Optional[Piece]]]:
    """
    Yield the squares reached from `position` along `vector` together with whatever stands on them.
    Stops at the edge of the board, after the first occupied square, or after one step for non-sliding pieces.
    """
    d_row, d_col = vector
    target = position.offset(d_row, d_col)
    while is_within_bounds(target):
        occupant = board.piece(target)
        yield target, occupant
        if occupant is not None or not slides:
            return
        target = target.offset(d_row, d_col)


def moves_by_reach(position: Position, board: Board, reach: Reach) -> list[Move]:
    """Every square along the piece's vectors that is empty or holds an enemy piece"""
    color = board.piece(position).color
    return [
        Move(from_square=position, to_square=target)
        for vector in reach.vectors
        for target, occupant in walk(position, board, vector, reach.slides)
        if occupant is None or occupant.color != color
    ]


def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return BOARD_DIMENSIONS[0] - 2 if color == Color.WHITE else 1


def candidate_pawn_moves(position: Position, board: Board) -> list[Move]:
    """
    Pawns push straight ahead onto empty squares (two squares from their starting row) and take diagonally.
    En passant is added by the game module, which knows the en passant square.
    """
    color = board.piece(position).color
    forward = pawn_direction(color)
    pushes = 2 if position.row == pawn_start_row(color) else 1

    moves = [
        Move(from_square=position, to_square=target)
        for target, occupant in walk(position, board, (forward, 0), slides=True)
        if occupant is None
    ][:pushes]

    for d_col in (-1, 1):
        for target, occupant in walk(position, board, (forward, d_col), slides=False):
            if occupant is not None and occupant.color != color:
                moves.append(Move(from_square=position, to_square=target))
    return moves


def candidate_knight_moves(position: Position, board: Board) -> list[Move]:
    return moves_by_reach(position, board, REACH[PieceType.KNIGHT])


def candidate_bishop_moves(position: Position, board: Board) -> list[Move]:
    return moves_by_reach(position, board, REACH[PieceType.BISHOP])


def candidate_rook_moves(position: Position, board: Board) -> list[Move]:
    return moves_by_reach(position, board, REACH[PieceType.ROOK])


def candidate_queen_moves(position: Position, board: Board) -> list[Move]:
    return moves_by_reach(position, board, REACH[PieceType.QUEEN])


def candidate_king_moves(position: Position, board: Board) -> list[Move]:
    """Castling is a separate move, see `candidate_castling_move()`"""
    return moves_by_reach(position, board, REACH[PieceType.KING])


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- ATTACKING RULES ---
def is_attacked_by_reach(piece_type: PieceType, position: Position, by_color: Color, board: Board) -> bool:
    """
    Look outwards from the attacked square, using the attacker's own vectors.
    All of these vectors are symmetric, so a piece found this way can move back onto `position`.
    """
    reach = REACH[piece_type]
    attacker = Piece(piece_type, by_color)
    return any(
        occupant == attacker
        for vector in reach.vectors
        for _, occupant in walk(position, board, vector, reach.slides)
    )


def is_attacked_by_pawn(position: Position, by_color: Color, board: Board) -> bool:
    """Pawn captures are not symmetric: a white pawn attacking `position` stands one row below it"""
    backwards = -pawn_direction(by_color)
    attacker = Piece(PieceType.PAWN, by_color)
    return any(
        occupant == attacker
        for d_col in (-1, 1)
        for _, occupant in walk(position, board, (backwards, d_col), slides=False)
    )


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    **{piece_type: partial(is_attacked_by_reach, piece_type) for piece_type in REACH},
}


# -- CASTLING MOVES ---
def candidate_castling_move(direction: CastlingDirection) -> Move:
    rule = CASTLING_RULES[direction]
    return Move(rule.king_from, rule.king_to, castling_direction=direction)


# -- EN PASSANT MOVES ---
def en_passant_moves(en_passant_square: Position, color: Color, board: Board) -> list[Move]:
    """Pawns of `color` standing beside the square the opponent's pawn skipped can take on it"""
    pawn_row = en_passant_square.row - pawn_direction(color)
    own_pawn = Piece(PieceType.PAWN, color)
    neighbours = (Position(pawn_row, en_passant_square.col + d_col) for d_col in (-1, 1))
    return [
        Move(from_square=neighbour, to_square=en_passant_square, is_en_passant=True)
        for neighbour in neighbours
        if is_within_bounds(neighbour) and board.piece(neighbour) == own_pawn
    ]


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT]


def is_pawn_push_to_promotion_square(move: Move, board: Board) -> bool:
    """A pawn move onto the first or the last row"""
    moving_piece = board.piece(move.from_square)
    if moving_piece is None or moving_piece.type != PieceType.PAWN:
        return False
    return move.to_square.row in (0, BOARD_DIMENSIONS[0] - 1)
