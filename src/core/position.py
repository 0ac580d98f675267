"""
A point on a rectangular board

(placed in its own module as every grid based game needs to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

Vector = tuple[int, int]


@dataclass(frozen=True, order=True)
class Position:
    """Row 0 is the top row of the board as the players see it, column 0 the left-most column."""

    row: int
    col: int

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)

    def is_within(self, n_rows: int, n_cols: int) -> bool:
        return (0 <= self.row < n_rows) and (0 <= self.col < n_cols)

    def midpoint(self, other: Position) -> Position:
        """Square halfway between two squares (ex. the square jumped over in checkers)"""
        return Position((self.row + other.row) // 2, (self.col + other.col) // 2)
