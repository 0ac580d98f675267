"""
Computer opponent for checkers.

* easy: any legal move
* medium: a jump if possible, otherwise a king move, otherwise anything
* hard: minimax with alpha-beta pruning; material plus a positional table that rewards the edges and the back rows
"""

from random import Random
from typing import Optional

from loguru import logger

from src.checkers.board import Color, Move, Piece
from src.checkers.game import GameState, advance, generate_legal_moves
from src.core.config import get_settings, opponent_rng
from src.core.shared_types import Difficulty

MATE_SCORE = 1000

MAN_VALUE = 10
KING_VALUE = 20

POSITION_VALUES: list[list[int]] = [
    [0, 4, 0, 4, 0, 4, 0, 4],
    [4, 0, 3, 0, 3, 0, 3, 0],
    [0, 3, 0, 2, 0, 2, 0, 4],
    [4, 0, 2, 0, 1, 0, 3, 0],
    [0, 3, 0, 1, 0, 2, 0, 4],
    [4, 0, 2, 0, 2, 0, 3, 0],
    [0, 3, 0, 3, 0, 3, 0, 4],
    [4, 0, 4, 0, 4, 0, 4, 0],
]


def piece_value(piece: Piece) -> int:
    return KING_VALUE if piece.is_king else MAN_VALUE


def evaluate(state: GameState, perspective: Color) -> int:
    score = 0
    for position, piece in state.board.grid.occupied():
        value = piece_value(piece) + POSITION_VALUES[position.row][position.col]
        score += value if piece.color == perspective else -value
    return score


def minimax(state: GameState, depth: int, alpha: float, beta: float, perspective: Color) -> float:
    """
    Alpha-beta search over whole plies. A continued multi-jump keeps the same side to move, so whether a node
    maximizes is read from the state, not alternated.
    """
    moves = generate_legal_moves(state)
    maximizing = state.side_to_move == perspective
    if not moves or state.board.count(state.side_to_move) == 0:
        return -MATE_SCORE if maximizing else MATE_SCORE
    if depth == 0:
        return evaluate(state, perspective)

    best = float("-inf") if maximizing else float("inf")
    for move in moves:
        score = minimax(advance(state, move, with_status=False), depth - 1, alpha, beta, perspective)
        if maximizing:
            best = max(best, score)
            alpha = max(alpha, score)
        else:
            best = min(best, score)
            beta = min(beta, score)
        if beta <= alpha:
            break
    return best


def select_opponent_move(
    state: GameState,
    side: Color,
    difficulty: Difficulty,
    rng: Optional[Random] = None,
    depth: Optional[int] = None,
) -> Optional[Move]:
    """Pick a move for `side`. None when it is not that side's turn or no legal move exists."""
    if state.side_to_move != side or state.is_over:
        return None
    moves = generate_legal_moves(state)
    if not moves:
        return None

    rng = rng or opponent_rng()
    if difficulty == Difficulty.EASY:
        chosen = rng.choice(moves)
    elif difficulty == Difficulty.MEDIUM:
        chosen = _prefer_jumps_then_kings(state, moves, rng)
    else:
        chosen = _best_by_search(state, moves, depth or get_settings().checkers_search_depth)

    logger.debug(f"checkers.ai.select_opponent_move difficulty={difficulty} move={chosen}")
    return chosen


def _prefer_jumps_then_kings(state: GameState, moves: list[Move], rng: Random) -> Move:
    jumps = [move for move in moves if move.is_jump]
    if jumps:
        return rng.choice(jumps)
    king_moves = [move for move in moves if state.board.piece(move.from_square).is_king]
    if king_moves:
        return rng.choice(king_moves)
    return rng.choice(moves)


def _best_by_search(state: GameState, moves: list[Move], depth: int) -> Move:
    side = state.side_to_move
    best_move = moves[0]
    best_score = float("-inf")
    alpha = float("-inf")
    for move in moves:
        score = minimax(advance(state, move, with_status=False), depth - 1, alpha, float("inf"), side)
        if score > best_score:
            best_score = score
            best_move = move
        alpha = max(alpha, score)
    return best_move
