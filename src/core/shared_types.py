"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    FINISHED = "finished"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GameKind(StrEnum):
    CHESS = "chess"
    CHECKERS = "checkers"
    XIANGQI = "xiangqi"
    GO = "go"
    NINE_MENS_MORRIS = "nine mens morris"


# Statuses after which no more moves are accepted
TERMINAL_STATUSES: frozenset[Status] = frozenset(
    {Status.CHECKMATE, Status.STALEMATE, Status.FINISHED}
)
