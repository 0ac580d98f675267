"""
Go turn logic. Black plays first.

* A stone may only be placed on an empty point (anything else raises `OccupiedPointError`).
* Suicide is not allowed: a placement whose own group ends up without liberties, after enemy captures, is rejected.
* Simple ko: when a single stone captured exactly one stone and is left with one liberty, the point it captured
  may not be played by the opponent on the very next turn.
* The game ends when a side reaches the capture target (when one is set), or after two passes in a row.
  There is no territory counting: after two passes the side with more captures wins.
"""

from dataclasses import dataclass, replace
from typing import Optional, Self

from loguru import logger

from src.core.exceptions import OccupiedPointError
from src.core.position import Position
from src.core.shared_types import Status
from src.go.board import Board, Group, Stone, place_stone

# the classic capture game targets players can choose from
CAPTURE_TARGETS = (5, 10, 20)


@dataclass(frozen=True)
class Move:
    """A stone on `point`, or a pass when `point` is None"""

    point: Optional[Position] = None

    @classmethod
    def pass_turn(cls) -> Self:
        return cls(None)

    @property
    def is_pass(self) -> bool:
        return self.point is None


@dataclass(frozen=True)
class GameState:
    board: Board
    side_to_move: Stone = Stone.BLACK
    status: Status = Status.PLAYING
    winner: Optional[Stone] = None
    black_captures: int = 0
    white_captures: int = 0
    ko_point: Optional[Position] = None
    pass_count: int = 0
    capture_target: Optional[int] = None
    history: tuple[Move, ...] = ()

    @classmethod
    def new_game(cls, size: int = 19, capture_target: Optional[int] = None) -> Self:
        return cls(board=Board.empty(size), capture_target=capture_target)

    @property
    def is_over(self) -> bool:
        return self.status == Status.FINISHED

    def captures(self, color: Stone) -> int:
        """Number of enemy stones the given side has taken off the board"""
        return self.black_captures if color == Stone.BLACK else self.white_captures


def is_legal(state: GameState, point: Position) -> bool:
    """Empty, not the ko point, not suicide"""
    if state.is_over or state.board.stone(point) is not None or point == state.ko_point:
        return False
    return not place_stone(state.board, point, state.side_to_move).is_suicide


def legal_moves(state: GameState) -> list[Position]:
    """Every point the side to move may place a stone on, in reading order"""
    return [point for point in state.board.grid.empty_positions() if is_legal(state, point)]


def apply_move(state: GameState, move: Move) -> Optional[GameState]:
    """
    New state after the move
    ---

    * None when the game is over, the point is off the board or the ko point, or the placement would be suicide
    * raises OccupiedPointError when the point already holds a stone
    """
    if state.is_over:
        return None
    if move.is_pass:
        return _pass(state, move)

    point = move.point
    if not state.board.grid.contains(point):
        logger.debug(f"go.game.apply_move rejected point={point} reason=off_board")
        return None
    if state.board.stone(point) is not None:
        raise OccupiedPointError(f"{point} already holds a stone.")
    if point == state.ko_point:
        logger.debug(f"go.game.apply_move rejected point={point} reason=ko")
        return None

    color = state.side_to_move
    placement = place_stone(state.board, point, color)
    if placement.is_suicide:
        logger.debug(f"go.game.apply_move rejected point={point} reason=suicide")
        return None

    n_captured = len(placement.captured)
    new_state = replace(
        state,
        board=placement.board,
        side_to_move=color.opponent,
        ko_point=_ko_point(placement.captured, placement.group),
        pass_count=0,
        history=state.history + (move,),
        black_captures=state.black_captures + (n_captured if color == Stone.BLACK else 0),
        white_captures=state.white_captures + (n_captured if color == Stone.WHITE else 0),
    )
    if n_captured:
        logger.debug(f"go.game.apply_move captured={n_captured} by={color}")

    if state.capture_target is not None and new_state.captures(color) >= state.capture_target:
        return replace(new_state, status=Status.FINISHED, winner=color)
    return new_state


def _ko_point(captured: frozenset[Position], group: Group) -> Optional[Position]:
    if len(captured) == 1 and len(group.stones) == 1 and len(group.liberties) == 1:
        return next(iter(captured))
    return None


def _pass(state: GameState, move: Move) -> GameState:
    new_state = replace(
        state,
        side_to_move=state.side_to_move.opponent,
        ko_point=None,
        pass_count=state.pass_count + 1,
        history=state.history + (move,),
    )
    if new_state.pass_count < 2:
        return new_state

    winner = None
    if state.black_captures != state.white_captures:
        winner = Stone.BLACK if state.black_captures > state.white_captures else Stone.WHITE
    logger.debug(f"go.game.finished reason=passes winner={winner}")
    return replace(new_state, status=Status.FINISHED, winner=winner)
