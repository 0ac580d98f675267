"""
Nine men's morris turn logic. White moves first, each side starts with nine pieces in hand.

Phases (for the side to move):
* placing: as long as any side has pieces in hand, a turn puts a piece on an empty point
* moving: slide a piece to an adjacent empty point
* flying: with exactly three pieces left, a piece may jump to any empty point

Closing a mill does not end the turn: the same side then removes one opponent piece.
"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Optional, Self

from loguru import logger

from src.core.shared_types import Status
from src.nine_mens_morris.board import Board, Color

PIECES_PER_SIDE = 9


class Phase(StrEnum):
    PLACING = "placing"
    MOVING = "moving"
    FLYING = "flying"


class MoveKind(StrEnum):
    PLACE = "place"
    SLIDE = "slide"
    FLY = "fly"
    REMOVE = "remove"


@dataclass(frozen=True)
class Move:
    kind: MoveKind
    to_point: int
    from_point: Optional[int] = None

    @classmethod
    def place(cls, point: int) -> Self:
        return cls(MoveKind.PLACE, point)

    @classmethod
    def slide(cls, from_point: int, to_point: int) -> Self:
        return cls(MoveKind.SLIDE, to_point, from_point)

    @classmethod
    def fly(cls, from_point: int, to_point: int) -> Self:
        return cls(MoveKind.FLY, to_point, from_point)

    @classmethod
    def remove(cls, point: int) -> Self:
        return cls(MoveKind.REMOVE, point)


@dataclass(frozen=True)
class GameState:
    board: Board = Board()
    side_to_move: Color = Color.WHITE
    status: Status = Status.PLAYING
    winner: Optional[Color] = None
    white_in_hand: int = PIECES_PER_SIDE
    black_in_hand: int = PIECES_PER_SIDE
    # a mill was just closed: the side to move has to remove an opponent piece
    awaiting_removal: bool = False
    history: tuple[Move, ...] = ()

    @classmethod
    def new_game(cls) -> Self:
        return cls()

    @property
    def is_over(self) -> bool:
        return self.status == Status.FINISHED

    def in_hand(self, color: Color) -> int:
        return self.white_in_hand if color == Color.WHITE else self.black_in_hand

    def on_board(self, color: Color) -> int:
        return self.board.count(color)

    @property
    def phase(self) -> Phase:
        if self.white_in_hand > 0 or self.black_in_hand > 0:
            return Phase.PLACING
        if self.on_board(self.side_to_move) == 3:
            return Phase.FLYING
        return Phase.MOVING


def generate_legal_moves(state: GameState) -> list[Move]:
    if state.is_over:
        return []
    board = state.board
    color = state.side_to_move

    if state.awaiting_removal:
        return [Move.remove(point) for point in board.get_removable_pieces(color.opponent)]

    phase = state.phase
    if phase == Phase.PLACING:
        if state.in_hand(color) == 0:
            return []
        return [Move.place(point) for point in board.empty_points()]
    if phase == Phase.FLYING:
        return [
            Move.fly(from_point, to_point)
            for from_point in board.points_of(color)
            for to_point in board.empty_points()
        ]
    return [
        Move.slide(from_point, to_point)
        for from_point in board.points_of(color)
        for to_point in board.empty_neighbours(from_point)
    ]


def legal_moves(state: GameState, point: Optional[int] = None) -> list[int]:
    """
    Points to highlight
    ---
    * a mill is pending: the opponent pieces that may be removed
    * placing: every empty point
    * moving / flying: destinations of the piece on `point`
    """
    moves = generate_legal_moves(state)
    if state.awaiting_removal or state.phase == Phase.PLACING:
        return [move.to_point for move in moves]
    return [move.to_point for move in moves if move.from_point == point]


def apply_move(state: GameState, move: Move) -> Optional[GameState]:
    """New state, or None when the move is not legal."""
    if move not in generate_legal_moves(state):
        logger.debug(f"nine_mens_morris.game.apply_move rejected move={move} phase={state.phase}")
        return None
    if move.kind == MoveKind.REMOVE:
        return _remove(state, move)

    color = state.side_to_move
    board = state.board
    if move.from_point is not None:
        board = board.set(move.from_point, None)
    board = board.set(move.to_point, color)

    new_state = replace(state, board=board, history=state.history + (move,))
    if move.kind == MoveKind.PLACE:
        new_state = _take_from_hand(new_state, color)

    if board.check_mill(move.to_point, color) and board.get_removable_pieces(color.opponent):
        logger.debug(f"nine_mens_morris.game.mill point={move.to_point} by={color}")
        return replace(new_state, awaiting_removal=True)
    return _pass_turn(new_state)


def _remove(state: GameState, move: Move) -> GameState:
    new_state = replace(
        state,
        board=state.board.set(move.to_point, None),
        awaiting_removal=False,
        history=state.history + (move,),
    )
    return _pass_turn(new_state)


def _take_from_hand(state: GameState, color: Color) -> GameState:
    if color == Color.WHITE:
        return replace(state, white_in_hand=state.white_in_hand - 1)
    return replace(state, black_in_hand=state.black_in_hand - 1)


def _pass_turn(state: GameState) -> GameState:
    return classify(replace(state, side_to_move=state.side_to_move.opponent))


def classify(state: GameState) -> GameState:
    """
    * a side with no pieces left in hand and fewer than three on the board loses
    * the side to move loses when it cannot move
    """
    for color in (state.side_to_move, state.side_to_move.opponent):
        if state.in_hand(color) == 0 and state.on_board(color) < 3:
            return _finish(state, color.opponent)
    if not generate_legal_moves(state):
        return _finish(state, state.side_to_move.opponent)
    return state


def _finish(state: GameState, winner: Color) -> GameState:
    logger.debug(f"nine_mens_morris.game.finished winner={winner}")
    return replace(state, status=Status.FINISHED, winner=winner)
