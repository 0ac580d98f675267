"""
Xiangqi turn logic: legal moves (no move may leave the own general attacked or facing the other general),
applying moves and classifying the position for the side to move. Red moves first.
"""

from dataclasses import dataclass, replace
from typing import Optional, Self

from loguru import logger

from src.core.position import Position
from src.core.shared_types import TERMINAL_STATUSES, Status
from src.xiangqi.board import Board
from src.xiangqi.moves import Move
from src.xiangqi.pieces import Color, Piece


@dataclass(frozen=True)
class GameState:
    board: Board
    side_to_move: Color = Color.RED
    status: Status = Status.PLAYING
    captured_pieces: tuple[Piece, ...] = ()
    history: tuple[Move, ...] = ()

    @classmethod
    def new_game(cls, board: Optional[Board] = None) -> Self:
        state = cls(board=board or Board.starting_position())
        return replace(state, status=classify(state))

    @property
    def winner(self) -> Optional[Color]:
        if self.status != Status.CHECKMATE:
            return None
        return self.side_to_move.opponent

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def captured_by(self, color: Color) -> list[Piece]:
        return [piece for piece in self.captured_pieces if piece.color != color]


def generate_legal_moves(state: GameState, color: Optional[Color] = None) -> list[Move]:
    color = color or state.side_to_move
    board = state.board
    return [
        move
        for move in board.generate_candidate_moves(color)
        if not board.move_piece(move).is_check(color)
    ]


def legal_moves(state: GameState, position: Position) -> list[Position]:
    """Destinations the piece on `position` may move to."""
    if not state.board.grid.contains(position):
        return []
    piece = state.board.piece(position)
    if piece is None or piece.color != state.side_to_move:
        return []
    return [
        move.to_square for move in generate_legal_moves(state) if move.from_square == position
    ]


def apply_move(state: GameState, move: Move) -> Optional[GameState]:
    """New state, or None when the move is not legal."""
    if state.is_over or move not in generate_legal_moves(state):
        logger.debug(f"xiangqi.game.apply_move rejected move={move} status={state.status}")
        return None
    return advance(state, move)


def advance(state: GameState, move: Move, with_status: bool = True) -> GameState:
    captured = state.board.piece(move.to_square)
    new_state = replace(
        state,
        board=state.board.move_piece(move),
        side_to_move=state.side_to_move.opponent,
        captured_pieces=state.captured_pieces + ((captured,) if captured else ()),
        history=state.history + (move,),
    )
    if not with_status:
        return new_state
    return replace(new_state, status=classify(new_state))


def classify(state: GameState) -> Status:
    color = state.side_to_move
    in_check = state.board.is_check(color)
    if not generate_legal_moves(state, color):
        return Status.CHECKMATE if in_check else Status.STALEMATE
    return Status.CHECK if in_check else Status.PLAYING
