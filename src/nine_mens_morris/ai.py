"""
Computer opponent for nine men's morris.

* easy: any legal move
* medium: a move closing a mill with probability `capture_preference`, otherwise any legal move
* hard: one-ply heuristic, best move with a small chance of playing the runner-up instead

When a mill is pending the move returned is always a removal.
"""

from random import Random
from typing import Optional

from loguru import logger

from src.core.config import get_settings, opponent_rng
from src.core.shared_types import Difficulty
from src.nine_mens_morris.board import CONNECTIONS, MILLS, Board, Color
from src.nine_mens_morris.game import GameState, Move, MoveKind, generate_legal_moves


def _board_after(board: Board, move: Move, color: Color) -> Board:
    if move.from_point is not None:
        board = board.set(move.from_point, None)
    return board.set(move.to_point, color)


def open_lines(board: Board, color: Color) -> list[tuple[int, int, int]]:
    """Mills where `color` holds two points and the third one is empty"""
    return [
        mill
        for mill in MILLS
        if sum(board.points[point] == color for point in mill) == 2
        and any(board.points[point] is None for point in mill)
    ]


def closes_mill(state: GameState, move: Move) -> bool:
    color = state.side_to_move
    return _board_after(state.board, move, color).check_mill(move.to_point, color)


def score_move(state: GameState, move: Move) -> float:
    """
    Placement / slide / fly: closing a mill, blocking an opponent line, building own lines, mobility.
    Removal: taking a piece from an opponent line that is one move away from a mill.
    """
    board = state.board
    color = state.side_to_move

    if move.kind == MoveKind.REMOVE:
        threatening = {point for mill in open_lines(board, color.opponent) for point in mill}
        return (5.0 if move.to_point in threatening else 0.0) + len(CONNECTIONS[move.to_point]) * 0.1

    after = _board_after(board, move, color)
    score = 0.0
    if after.check_mill(move.to_point, color):
        score += 10
    blocked = [mill for mill in open_lines(board, color.opponent) if move.to_point in mill]
    score += 6 * len(blocked)
    score += 2 * (len(open_lines(after, color)) - len(open_lines(board, color)))
    score += 0.5 * len(after.empty_neighbours(move.to_point))
    if move.from_point is not None and board.check_mill(move.from_point, color):
        # opening a mill to close it again later
        score += 1
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
    if difficulty == Difficulty.HARD:
        ranked = sorted(moves, key=lambda move: score_move(state, move), reverse=True)
        if len(ranked) > 1 and rng.random() < settings.second_best_chance:
            chosen = ranked[1]
        else:
            chosen = ranked[0]
    elif difficulty == Difficulty.MEDIUM and not state.awaiting_removal:
        mills = [move for move in moves if closes_mill(state, move)]
        if mills and rng.random() < settings.capture_preference:
            chosen = rng.choice(mills)
        else:
            chosen = rng.choice(moves)
    else:
        chosen = rng.choice(moves)

    logger.debug(f"nine_mens_morris.ai.select_opponent_move difficulty={difficulty} move={chosen}")
    return chosen
