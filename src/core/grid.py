"""
Persistent 2D grid used as the storage of every rectangular board.

Boards are never edited in place: every move yields a new grid.
Setting a cell only rebuilds the row that changed (plus the outer tuple), all other rows are shared
with the previous generation. This keeps trial moves (check-safety simulation, minimax search) cheap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Mapping, Optional, TypeVar

from src.core.exceptions import OutOfBoundsError
from src.core.position import Position

T = TypeVar("T")

Cells = tuple[tuple[Optional[T], ...], ...]


@dataclass(frozen=True)
class Grid(Generic[T]):
    cells: Cells

    @classmethod
    def empty(cls, n_rows: int, n_cols: int) -> Grid[T]:
        return cls(tuple((None,) * n_cols for _ in range(n_rows)))

    @classmethod
    def from_rows(cls, rows: list[list[Optional[T]]]) -> Grid[T]:
        return cls(tuple(tuple(row) for row in rows))

    @property
    def n_rows(self) -> int:
        return len(self.cells)

    @property
    def n_cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def contains(self, position: Position) -> bool:
        return position.is_within(self.n_rows, self.n_cols)

    def get(self, position: Position) -> Optional[T]:
        """Content of a cell. Coordinates are checked before touching the underlying tuples."""
        self._assert_within_bounds(position)
        return self.cells[position.row][position.col]

    def is_empty(self, position: Position) -> bool:
        return self.get(position) is None

    def set(self, position: Position, value: Optional[T]) -> Grid[T]:
        """New grid with a single cell replaced."""
        return self.set_many({position: value})

    def set_many(self, changes: Mapping[Position, Optional[T]]) -> Grid[T]:
        """New grid with several cells replaced. Rows without changes are shared with this grid."""
        by_row: dict[int, dict[int, Optional[T]]] = {}
        for position, value in changes.items():
            self._assert_within_bounds(position)
            by_row.setdefault(position.row, {})[position.col] = value

        rows = list(self.cells)
        for row_idx, row_changes in by_row.items():
            row = list(rows[row_idx])
            for col_idx, value in row_changes.items():
                row[col_idx] = value
            rows[row_idx] = tuple(row)
        return Grid(tuple(rows))

    def positions(self) -> Iterator[Position]:
        """All positions, row by row (top to bottom, left to right)."""
        for row in range(self.n_rows):
            for col in range(self.n_cols):
                yield Position(row, col)

    def occupied(self) -> Iterator[tuple[Position, T]]:
        """All non-empty cells in reading order."""
        for row_idx, row in enumerate(self.cells):
            for col_idx, value in enumerate(row):
                if value is not None:
                    yield Position(row_idx, col_idx), value

    def empty_positions(self) -> list[Position]:
        return [
            Position(row_idx, col_idx)
            for row_idx, row in enumerate(self.cells)
            for col_idx, value in enumerate(row)
            if value is None
        ]

    def _assert_within_bounds(self, position: Position) -> None:
        if not self.contains(position):
            raise OutOfBoundsError(
                f"{position} is outside of the {self.n_rows}x{self.n_cols} board."
            )
