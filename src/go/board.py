"""
Go board: stones, groups and liberties.

A group is a maximal set of same-colored stones connected through their four orthogonal neighbours.
Its liberties are the empty points adjacent to any of its stones. Groups are never stored: they are recomputed
from the stones on the board whenever they are needed.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from src.core.grid import Grid
from src.core.position import Position, Vector

SUPPORTED_SIZES = (9, 13, 19)

NEIGHBOURS: list[Vector] = [(-1, 0), (1, 0), (0, -1), (0, 1)]


class Stone(Enum):
    BLACK = auto()
    WHITE = auto()

    @property
    def opponent(self) -> "Stone":
        return Stone.WHITE if self == Stone.BLACK else Stone.BLACK


DIAGRAM_TO_STONE: dict[str, Stone] = {"b": Stone.BLACK, "w": Stone.WHITE}
STONE_TO_DIAGRAM: dict[Stone, str] = {value: key for key, value in DIAGRAM_TO_STONE.items()}


@dataclass(frozen=True)
class Group:
    color: Stone
    stones: frozenset[Position]
    liberties: frozenset[Position]

    @property
    def is_captured(self) -> bool:
        return len(self.liberties) == 0


@dataclass(frozen=True)
class Board:
    grid: Grid[Stone]

    @classmethod
    def empty(cls, size: int) -> Self:
        return cls(Grid.empty(size, size))

    @classmethod
    def from_diagram(cls, diagram: list[str]) -> Self:
        """One string per row: 'b' black, 'w' white, '.' empty."""
        return cls(
            Grid.from_rows([[DIAGRAM_TO_STONE.get(char) for char in line] for line in diagram])
        )

    def to_diagram(self) -> list[str]:
        return [
            "".join(STONE_TO_DIAGRAM[stone] if stone else "." for stone in row)
            for row in self.grid.cells
        ]

    @property
    def size(self) -> int:
        return self.grid.n_rows

    def stone(self, position: Position) -> Optional[Stone]:
        return self.grid.get(position)

    def neighbours(self, position: Position) -> list[Position]:
        return [
            neighbour
            for neighbour in (position.offset(d_row, d_col) for d_row, d_col in NEIGHBOURS)
            if self.grid.contains(neighbour)
        ]

    def group_at(self, position: Position) -> Optional[Group]:
        """Depth first flood fill from one stone"""
        color = self.stone(position)
        if color is None:
            return None

        stones: set[Position] = set()
        liberties: set[Position] = set()
        stack = [position]
        while stack:
            current = stack.pop()
            if current in stones:
                continue
            stones.add(current)
            for neighbour in self.neighbours(current):
                occupant = self.stone(neighbour)
                if occupant is None:
                    liberties.add(neighbour)
                elif occupant == color and neighbour not in stones:
                    stack.append(neighbour)
        return Group(color, frozenset(stones), frozenset(liberties))

    def find_groups(self) -> list[Group]:
        """Every group on the board, in reading order of their first stone"""
        seen: set[Position] = set()
        groups: list[Group] = []
        for position, _ in self.grid.occupied():
            if position in seen:
                continue
            group = self.group_at(position)
            seen |= group.stones
            groups.append(group)
        return groups

    def remove(self, stones: frozenset[Position]) -> Self:
        return type(self)(self.grid.set_many({position: None for position in stones}))


@dataclass(frozen=True)
class Placement:
    """Outcome of putting a stone on the board, before any legality verdict"""

    board: Board
    captured: frozenset[Position]
    group: Group

    @property
    def is_suicide(self) -> bool:
        return self.group.is_captured


def place_stone(board: Board, position: Position, color: Stone) -> Placement:
    """
    Put a stone on an empty point and resolve captures.

    Enemy groups adjacent to the new stone that are left without liberties are removed first.
    Only then the liberties of the group the new stone belongs to are looked at.
    """
    board = Board(board.grid.set(position, color))

    captured: set[Position] = set()
    for neighbour in board.neighbours(position):
        if board.stone(neighbour) != color.opponent or neighbour in captured:
            continue
        group = board.group_at(neighbour)
        if group.is_captured:
            captured |= group.stones

    board = board.remove(frozenset(captured))
    return Placement(board, frozenset(captured), board.group_at(position))
