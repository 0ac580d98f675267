"""
Turn structure of checkers.

A jump that can be continued by the same piece does not end the turn: the state remembers which piece has to keep
jumping (`continuing_from`) and only jumps of that piece are legal until the chain is over.
"""

from dataclasses import dataclass, replace
from typing import Optional, Self

from loguru import logger

from src.checkers.board import Board, Color, Move, Piece
from src.core.position import Position
from src.core.shared_types import Status


@dataclass(frozen=True)
class GameState:
    board: Board
    side_to_move: Color = Color.WHITE
    status: Status = Status.PLAYING
    winner: Optional[Color] = None
    continuing_from: Optional[Position] = None
    captured_pieces: tuple[Piece, ...] = ()
    history: tuple[Move, ...] = ()

    @classmethod
    def new_game(cls, board: Optional[Board] = None) -> Self:
        state = cls(board=board or Board.starting_position())
        return _classify(state)

    @property
    def is_over(self) -> bool:
        return self.status == Status.FINISHED

    def captured_by(self, color: Color) -> int:
        """Number of opponent pieces the given side has taken"""
        return sum(1 for piece in self.captured_pieces if piece.color != color)


def generate_legal_moves(state: GameState) -> list[Move]:
    if state.continuing_from is not None:
        return state.board.jump_moves(state.continuing_from)
    return state.board.all_moves(state.side_to_move)


def legal_moves(state: GameState, position: Position) -> list[Position]:
    """Destinations the piece on `position` can move to this turn."""
    if not state.board.grid.contains(position):
        return []
    piece = state.board.piece(position)
    if piece is None or piece.color != state.side_to_move or state.is_over:
        return []
    if state.continuing_from is not None and position != state.continuing_from:
        return []
    return [move.to_square for move in generate_legal_moves(state) if move.from_square == position]


def apply_move(state: GameState, move: Move) -> Optional[GameState]:
    """New state after the move, or None when the move is not legal."""
    if state.is_over or move not in generate_legal_moves(state):
        logger.debug(f"checkers.game.apply_move rejected move={move}")
        return None
    return advance(state, move)


def advance(state: GameState, move: Move, with_status: bool = True) -> GameState:
    """Play a move known to be legal."""
    jumped = state.board.piece(move.jumped_square) if move.is_jump else None
    board = state.board.move_piece(move)
    new_state = replace(
        state,
        board=board,
        captured_pieces=state.captured_pieces + ((jumped,) if jumped else ()),
        history=state.history + (move,),
        continuing_from=None,
    )

    if move.is_jump and board.can_jump(move.to_square):
        # multi-jump: same piece, same player
        return replace(new_state, continuing_from=move.to_square)

    new_state = replace(new_state, side_to_move=state.side_to_move.opponent)
    return _classify(new_state) if with_status else new_state


def _classify(state: GameState) -> GameState:
    """A side without pieces, or with pieces but without any legal move, loses immediately."""
    color = state.side_to_move
    if state.board.count(color) == 0 or not generate_legal_moves(state):
        logger.debug(f"checkers.game.finished winner={color.opponent}")
        return replace(state, status=Status.FINISHED, winner=color.opponent)
    return replace(state, status=Status.PLAYING, winner=None)
