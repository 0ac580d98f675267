"""
Conversion between algebraic square names and board positions

(placed in its own module as multiple other modules need to import it)
"""

from src.core.position import Position

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


def square(name: str) -> Position:
    """Algebraic notation: 'a8' is the top-left square (row 0, col 0), 'h1' the bottom-right (row 7, col 7)"""
    col = ord(name[0]) - ord("a")
    row = BOARD_DIMENSIONS[0] - int(name[1])
    return Position(row, col)


def to_algebraic(position: Position) -> str:
    return f"{chr(position.col + ord('a'))}{BOARD_DIMENSIONS[0] - position.row}"


def is_within_bounds(position: Position) -> bool:
    return position.is_within(*BOARD_DIMENSIONS)
