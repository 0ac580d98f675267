"""
Computer opponent for chess.

* easy: heuristic move scores blurred with noise, random pick among the top half
* medium: random pick among the top quarter
* hard: fixed-depth minimax with alpha-beta pruning over material + piece-square tables
"""

from random import Random
from typing import Optional

from loguru import logger

from src.chess.game import GameState, advance, generate_legal_moves
from src.chess.moves import Move, is_pawn_push_to_promotion_square
from src.chess.pieces import Color, PieceType
from src.core.config import get_settings, opponent_rng
from src.core.position import Position
from src.core.shared_types import Difficulty

# Score of a position in which the side to move has no legal reply
MATE_SCORE = 1000

# Value of the piece taken, for the move-scoring heuristic (the king can never actually be taken)
CAPTURE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}

# Piece-square tables, seen from white's side of the board (row 0 is the 8th rank).
# Black uses the same tables mirrored vertically.
PIECE_SQUARE_TABLES: dict[PieceType, list[list[int]]] = {
    PieceType.PAWN: [
        [0, 0, 0, 0, 0, 0, 0, 0],
        [5, 5, 5, 5, 5, 5, 5, 5],
        [1, 1, 2, 3, 3, 2, 1, 1],
        [0, 0, 1, 2, 2, 1, 0, 0],
        [0, 0, 0, 2, 2, 0, 0, 0],
        [0, 0, -1, 0, 0, -1, 0, 0],
        [0, 1, 1, -2, -2, 1, 1, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ],
    PieceType.KNIGHT: [
        [-5, -4, -3, -3, -3, -3, -4, -5],
        [-4, -2, 0, 0, 0, 0, -2, -4],
        [-3, 0, 1, 2, 2, 1, 0, -3],
        [-3, 1, 2, 2, 2, 2, 1, -3],
        [-3, 0, 2, 2, 2, 2, 0, -3],
        [-3, 1, 1, 2, 2, 1, 1, -3],
        [-4, -2, 0, 1, 1, 0, -2, -4],
        [-5, -4, -3, -3, -3, -3, -4, -5],
    ],
    PieceType.BISHOP: [
        [-2, -1, -1, -1, -1, -1, -1, -2],
        [-1, 0, 0, 0, 0, 0, 0, -1],
        [-1, 0, 1, 1, 1, 1, 0, -1],
        [-1, 1, 1, 1, 1, 1, 1, -1],
        [-1, 0, 1, 1, 1, 1, 0, -1],
        [-1, 1, 1, 1, 1, 1, 1, -1],
        [-1, 1, 0, 0, 0, 0, 1, -1],
        [-2, -1, -1, -1, -1, -1, -1, -2],
    ],
    PieceType.ROOK: [
        [0, 0, 0, 0, 0, 0, 0, 0],
        [1, 1, 1, 1, 1, 1, 1, 1],
        [-1, 0, 0, 0, 0, 0, 0, -1],
        [-1, 0, 0, 0, 0, 0, 0, -1],
        [-1, 0, 0, 0, 0, 0, 0, -1],
        [-1, 0, 0, 0, 0, 0, 0, -1],
        [-1, 0, 0, 0, 0, 0, 0, -1],
        [0, 0, 0, 1, 1, 0, 0, 0],
    ],
    PieceType.QUEEN: [
        [-2, -1, -1, 0, 0, -1, -1, -2],
        [-1, 0, 0, 0, 0, 0, 0, -1],
        [-1, 0, 1, 1, 1, 1, 0, -1],
        [0, 0, 1, 1, 1, 1, 0, 0],
        [0, 0, 1, 1, 1, 1, 0, 0],
        [-1, 1, 1, 1, 1, 1, 0, -1],
        [-1, 0, 1, 0, 0, 0, 0, -1],
        [-2, -1, -1, 0, 0, -1, -1, -2],
    ],
    PieceType.KING: [
        [-3, -4, -4, -5, -5, -4, -4, -3],
        [-3, -4, -4, -5, -5, -4, -4, -3],
        [-3, -4, -4, -5, -5, -4, -4, -3],
        [-3, -4, -4, -5, -5, -4, -4, -3],
        [-2, -3, -3, -4, -4, -3, -3, -2],
        [-1, -2, -2, -2, -2, -2, -2, -1],
        [2, 2, 0, 0, 0, 0, 2, 2],
        [2, 3, 1, 0, 0, 1, 3, 2],
    ],
}


def piece_square_value(piece_type: PieceType, color: Color, position: Position) -> int:
    row = position.row if color == Color.WHITE else 7 - position.row
    return PIECE_SQUARE_TABLES[piece_type][row][position.col]


def evaluate(state: GameState, perspective: Color) -> int:
    """Material + position, positive when `perspective` is ahead."""
    material = state.board.count_material()
    score = material[perspective] - material[perspective.opponent]
    for position, piece in state.board.grid.occupied():
        value = piece_square_value(piece.type, piece.color, position)
        score += value if piece.color == perspective else -value
    return score


def minimax(
    state: GameState,
    depth: int,
    alpha: float,
    beta: float,
    perspective: Color,
) -> float:
    """
    Alpha-beta search. The side maximizing is `perspective`, the side to move decides whether this node maximizes.
    A side without legal moves scores the extreme value (loss for the side that is stuck).
    """
    if depth == 0:
        return evaluate(state, perspective)

    moves = _ordered(state, generate_legal_moves(state))
    maximizing = state.side_to_move == perspective
    if not moves:
        return -MATE_SCORE if maximizing else MATE_SCORE

    if maximizing:
        best = float("-inf")
        for move in moves:
            score = minimax(_child(state, move), depth - 1, alpha, beta, perspective)
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return best

    best = float("inf")
    for move in moves:
        score = minimax(_child(state, move), depth - 1, alpha, beta, perspective)
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return best


def score_move(state: GameState, move: Move) -> float:
    """One-ply heuristic: captures, central squares, development; penalty for a king walking into the middle."""
    board = state.board
    piece = board.piece(move.from_square)
    target = board.piece(move.to_square)
    score = 0.0

    if target is not None:
        score += CAPTURE_VALUES[target.type] * 10
    if 2 <= move.to_square.row <= 5 and 2 <= move.to_square.col <= 5:
        score += 2
    if piece.type == PieceType.PAWN:
        score += 0.5
    if piece.type in (PieceType.KNIGHT, PieceType.BISHOP):
        score += 1
    if piece.type == PieceType.KING and 2 <= move.to_square.row <= 5:
        score -= 1
    if board.move_piece(move).is_under_attack(move.to_square, piece.color.opponent):
        score -= 3
    return score


def select_opponent_move(
    state: GameState,
    side: Color,
    difficulty: Difficulty,
    rng: Optional[Random] = None,
    depth: Optional[int] = None,
) -> Optional[Move]:
    """Pick a move for `side`. None when it is not that side's turn or no legal move exists."""
    if state.side_to_move != side or state.is_over or state.pending_promotion is not None:
        return None

    moves = generate_legal_moves(state)
    if not moves:
        return None

    rng = rng or opponent_rng()
    if difficulty == Difficulty.HARD:
        depth = depth or get_settings().chess_search_depth
        chosen = _best_by_search(state, moves, depth)
    else:
        scored = sorted(
            moves,
            key=lambda move: score_move(state, move) + rng.random(),
            reverse=True,
        )
        fraction = 2 if difficulty == Difficulty.EASY else 4
        pool = scored[: max(1, len(scored) // fraction)]
        chosen = rng.choice(pool)

    logger.debug(f"chess.ai.select_opponent_move difficulty={difficulty} move={chosen.to_uci()}")
    return _auto_queen(state, chosen)


def _best_by_search(state: GameState, moves: list[Move], depth: int) -> Move:
    side = state.side_to_move
    best_move = moves[0]
    best_score = float("-inf")
    alpha = float("-inf")
    for move in _ordered(state, moves):
        score = minimax(_child(state, move), depth - 1, alpha, float("inf"), side)
        if score > best_score:
            best_score = score
            best_move = move
        alpha = max(alpha, score)
    return best_move


def _child(state: GameState, move: Move) -> GameState:
    return advance(state, _auto_queen(state, move), with_status=False)


def _auto_queen(state: GameState, move: Move) -> Move:
    """The computer always promotes to a queen."""
    if move.promote_to is None and is_pawn_push_to_promotion_square(move, state.board):
        return move.with_promotion(PieceType.QUEEN)
    return move


def _ordered(state: GameState, moves: list[Move]) -> list[Move]:
    """Captures of valuable pieces first: alpha-beta cuts off much earlier that way."""

    def victim_value(move: Move) -> int:
        target = state.board.piece(move.to_square)
        return CAPTURE_VALUES[target.type] if target is not None else 0

    return sorted(moves, key=victim_value, reverse=True)
