"""
Nine men's morris board: 24 points on three nested squares, joined at the middle of each side.

Points are numbered row by row, as drawn:

    0 ----------- 1 ----------- 2
    |             |             |
    |    3 ------ 4 ------ 5    |
    |    |        |        |    |
    |    |   6 -- 7 -- 8   |    |
    |    |   |         |   |    |
    9 -- 10 -11        12- 13 - 14
    |    |   |         |   |    |
    |    |   15 - 16 - 17  |    |
    |    |        |        |    |
    |    18 ----- 19 ----- 20   |
    |             |             |
    21 ---------- 22 ---------- 23
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from src.core.exceptions import OutOfBoundsError

N_POINTS = 24

CONNECTIONS: dict[int, tuple[int, ...]] = {
    0: (1, 9),
    1: (0, 2, 4),
    2: (1, 14),
    3: (4, 10),
    4: (1, 3, 5, 7),
    5: (4, 13),
    6: (7, 11),
    7: (4, 6, 8),
    8: (7, 12),
    9: (0, 10, 21),
    10: (3, 9, 11, 18),
    11: (6, 10, 15),
    12: (8, 13, 17),
    13: (5, 12, 14, 20),
    14: (2, 13, 23),
    15: (11, 16),
    16: (15, 17, 19),
    17: (12, 16),
    18: (10, 19),
    19: (16, 18, 20, 22),
    20: (13, 19),
    21: (9, 22),
    22: (19, 21, 23),
    23: (14, 22),
}

MILLS: tuple[tuple[int, int, int], ...] = (
    # horizontal
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (9, 10, 11),
    (12, 13, 14),
    (15, 16, 17),
    (18, 19, 20),
    (21, 22, 23),
    # vertical
    (0, 9, 21),
    (3, 10, 18),
    (6, 11, 15),
    (1, 4, 7),
    (16, 19, 22),
    (8, 12, 17),
    (5, 13, 20),
    (2, 14, 23),
)


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


@dataclass(frozen=True)
class Board:
    points: tuple[Optional[Color], ...] = (None,) * N_POINTS

    @classmethod
    def from_pieces(cls, white: list[int], black: list[int]) -> Self:
        points: list[Optional[Color]] = [None] * N_POINTS
        for point in white:
            points[point] = Color.WHITE
        for point in black:
            points[point] = Color.BLACK
        return cls(tuple(points))

    def piece(self, point: int) -> Optional[Color]:
        if not 0 <= point < N_POINTS:
            raise OutOfBoundsError(f"Point {point} does not exist, the board has {N_POINTS} points.")
        return self.points[point]

    def set(self, point: int, value: Optional[Color]) -> Self:
        self.piece(point)
        return type(self)(self.points[:point] + (value,) + self.points[point + 1 :])

    def points_of(self, color: Color) -> list[int]:
        return [point for point, piece in enumerate(self.points) if piece == color]

    def count(self, color: Color) -> int:
        return len(self.points_of(color))

    def empty_points(self) -> list[int]:
        return [point for point, piece in enumerate(self.points) if piece is None]

    def empty_neighbours(self, point: int) -> list[int]:
        return [neighbour for neighbour in CONNECTIONS[point] if self.points[neighbour] is None]

    def check_mill(self, point: int, color: Color) -> bool:
        """Is `point` part of a line completely held by `color`?"""
        return any(
            point in mill and all(self.points[p] == color for p in mill) for mill in MILLS
        )

    def get_removable_pieces(self, opponent: Color) -> list[int]:
        """
        Pieces of `opponent` that may be taken after a mill.
        Pieces inside a mill are protected, unless every piece of `opponent` is inside a mill.
        """
        pieces = self.points_of(opponent)
        outside_mills = [point for point in pieces if not self.check_mill(point, opponent)]
        return outside_mills if outside_mills else pieces
