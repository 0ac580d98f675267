"""
Computer opponent for go.

* easy: any legal point
* medium: a capturing point with probability `capture_preference`, otherwise any legal point
* hard: one-ply heuristic, best point with a small chance of playing the runner-up instead
"""

from random import Random
from typing import Optional

from loguru import logger

from src.core.config import get_settings, opponent_rng
from src.core.position import Position
from src.core.shared_types import Difficulty
from src.go.board import Stone, place_stone
from src.go.game import GameState, Move, legal_moves


def score_point(state: GameState, point: Position) -> float:
    """
    Captures, threatening enemy groups (atari), keeping liberties for the own group, a slight pull towards the
    centre, and a penalty for putting the own group into atari.
    """
    color = state.side_to_move
    placement = place_stone(state.board, point, color)
    board = placement.board
    score = len(placement.captured) * 10.0

    for neighbour in board.neighbours(point):
        if board.stone(neighbour) == color.opponent:
            enemy = board.group_at(neighbour)
            if len(enemy.liberties) == 1:
                score += 3

    liberties = len(placement.group.liberties)
    score += min(liberties, 4) * 0.5
    if liberties == 1:
        score -= 5

    centre = (state.board.size - 1) / 2
    distance = abs(point.row - centre) + abs(point.col - centre)
    score -= distance * 0.1
    return score


def captures_stones(state: GameState, point: Position) -> bool:
    return len(place_stone(state.board, point, state.side_to_move).captured) > 0


def select_opponent_move(
    state: GameState,
    side: Stone,
    difficulty: Difficulty,
    rng: Optional[Random] = None,
) -> Optional[Move]:
    """A placement for `side`. None when it is not that side's turn or no point is playable."""
    if state.side_to_move != side or state.is_over:
        return None
    points = legal_moves(state)
    if not points:
        return None

    rng = rng or opponent_rng()
    settings = get_settings()
    if difficulty == Difficulty.EASY:
        chosen = rng.choice(points)
    elif difficulty == Difficulty.MEDIUM:
        captures = [point for point in points if captures_stones(state, point)]
        if captures and rng.random() < settings.capture_preference:
            chosen = rng.choice(captures)
        else:
            chosen = rng.choice(points)
    else:
        ranked = sorted(points, key=lambda point: score_point(state, point), reverse=True)
        if len(ranked) > 1 and rng.random() < settings.second_best_chance:
            chosen = ranked[1]
        else:
            chosen = ranked[0]

    logger.debug(f"go.ai.select_opponent_move difficulty={difficulty} point={chosen}")
    return Move(chosen)
