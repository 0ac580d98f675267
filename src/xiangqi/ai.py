"""
Computer opponent for xiangqi.

* easy: any legal move
* medium: a capturing move with probability `capture_preference`, otherwise any move
* hard: one-ply heuristic, best move with a small chance of playing the runner-up instead
"""

from random import Random
from typing import Optional

from loguru import logger

from src.core.config import get_settings, opponent_rng
from src.core.shared_types import Difficulty
from src.xiangqi.game import GameState, generate_legal_moves
from src.xiangqi.moves import Move, has_crossed_river
from src.xiangqi.pieces import Color, PieceType

CAPTURE_VALUES: dict[PieceType, float] = {
    PieceType.SOLDIER: 1,
    PieceType.ADVISOR: 2,
    PieceType.ELEPHANT: 2,
    PieceType.HORSE: 4,
    PieceType.CANNON: 4.5,
    PieceType.CHARIOT: 9,
    PieceType.GENERAL: 100,
}

CENTER_ROWS = range(3, 7)
CENTER_COLS = range(2, 7)


def score_move(state: GameState, move: Move) -> float:
    """
    Heuristic value of a single move for the side playing it:
    capture value, central points, soldiers crossing the river, and a penalty for landing on an attacked point.
    """
    board = state.board
    piece = board.piece(move.from_square)
    target = board.piece(move.to_square)
    score = 0.0

    if target is not None:
        score += CAPTURE_VALUES[target.type] * 10
    if move.to_square.row in CENTER_ROWS and move.to_square.col in CENTER_COLS:
        score += 2
    if piece.type == PieceType.SOLDIER and has_crossed_river(move.to_square, piece.color):
        score += 1
    if piece.type in (PieceType.HORSE, PieceType.CANNON):
        score += 0.5
    # the general can never land on an attacked point: legal moves are already filtered
    if piece.type != PieceType.GENERAL and board.move_piece(move).is_under_attack(
        move.to_square, piece.color.opponent
    ):
        score -= CAPTURE_VALUES[piece.type] * 5
    return score


def select_opponent_move(
    state: GameState,
    side: Color,
    difficulty: Difficulty,
    rng: Optional[Random] = None,
) -> Optional[Move]:
    """Pick a move for `side`. None when it is not that side's turn or no legal move exists."""
    if state.side_to_move != side or state.is_over:
        return None
    moves = generate_legal_moves(state)
    if not moves:
        return None

    rng = rng or opponent_rng()
    settings = get_settings()
    if difficulty == Difficulty.EASY:
        chosen = rng.choice(moves)
    elif difficulty == Difficulty.MEDIUM:
        captures = [move for move in moves if state.board.piece(move.to_square) is not None]
        if captures and rng.random() < settings.capture_preference:
            chosen = rng.choice(captures)
        else:
            chosen = rng.choice(moves)
    else:
        ranked = sorted(moves, key=lambda move: score_move(state, move), reverse=True)
        if len(ranked) > 1 and rng.random() < settings.second_best_chance:
            chosen = ranked[1]
        else:
            chosen = ranked[0]

    logger.debug(f"xiangqi.ai.select_opponent_move difficulty={difficulty} move={chosen}")
    return chosen
