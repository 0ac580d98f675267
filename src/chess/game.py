"""
Entrypoint into the chess rules for the service layer.

A GameState is an immutable snapshot: every accepted move returns a new state, a rejected move returns None
(the caller simply ignores the attempt). All the business logic required to play a turn lives here:

1. generate candidate moves (the board does this)
2. add castling / en passant candidates (they depend on the game history, not only the board)
3. remove moves that leave your own king attacked
4. apply the move, resolve promotion
5. classify the resulting position for the side now to move
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Self

from loguru import logger

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, CastlingDirection
from src.chess.moves import (
    PROMOTION_OPTIONS,
    Move,
    candidate_castling_move,
    en_passant_moves,
    is_pawn_push_to_promotion_square,
    pawn_direction,
)
from src.chess.pieces import Color, Piece, PieceType
from src.core.position import Position
from src.core.shared_types import TERMINAL_STATUSES, Status


@dataclass(frozen=True)
class GameState:
    board: Board
    side_to_move: Color = Color.WHITE
    status: Status = Status.PLAYING
    castling_rights: frozenset[CastlingDirection] = frozenset(CastlingDirection)
    en_passant_square: Optional[Position] = None
    # a pawn reached the last rank without a piece type chosen: waiting for `promote()`
    pending_promotion: Optional[Position] = None
    captured_pieces: tuple[Piece, ...] = ()
    history: tuple[Move, ...] = field(default=())

    @classmethod
    def new_game(cls, fen_position: Optional[str] = None) -> Self:
        """Canonical starting layout, or any piece placement written as the first part of a FEN string."""
        board = Board.from_fen(fen_position) if fen_position else Board.starting_position()
        state = cls(board=board)
        return replace(state, status=classify(state))

    @property
    def winner(self) -> Optional[Color]:
        """Only a checkmate has a winner: the side that is mated is the side to move."""
        if self.status != Status.CHECKMATE:
            return None
        return self.side_to_move.opponent

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def captured_by(self, color: Color) -> list[Piece]:
        """Pieces the given side has taken from its opponent."""
        return [piece for piece in self.captured_pieces if piece.color != color]


# --- LEGAL MOVES ---
def generate_legal_moves(state: GameState, color: Optional[Color] = None) -> list[Move]:
    """
    List of legal moves for the player with the 'color' pieces (defaults to the side to move)
    ----

    Pawn moves to the last rank are listed once, without a promotion type. `apply_move()` accepts them either with a
    piece type filled in, or without one (then the game waits for `promote()`).
    """
    color = color or state.side_to_move
    candidate_moves = state.board.generate_candidate_moves(color)

    if color == state.side_to_move:
        candidate_moves.extend(_castling_moves(state, color))
        if state.en_passant_square is not None:
            candidate_moves.extend(
                en_passant_moves(state.en_passant_square, color, state.board)
            )

    # keep those moves that do not put (or leave) you in check
    return [
        move for move in candidate_moves if not _is_putting_yourself_in_check(state.board, move, color)
    ]


def legal_moves(state: GameState, position: Position) -> list[Position]:
    """Destinations the piece standing on `position` may move to. Used to highlight the selectable squares."""
    if not state.board.grid.contains(position):
        return []
    piece = state.board.piece(position)
    if piece is None or piece.color != state.side_to_move or state.pending_promotion is not None:
        return []
    return [
        move.to_square
        for move in generate_legal_moves(state)
        if move.from_square == position
    ]


def has_legal_move(state: GameState, color: Color) -> bool:
    return len(generate_legal_moves(state, color)) > 0


def _is_putting_yourself_in_check(board: Board, move: Move, color: Color) -> bool:
    """Play the move on a scratch board and determine if the king is attacked on the new board"""
    return board.move_piece(move).is_check(color)


# --- APPLYING MOVES ---
def apply_move(state: GameState, move: Move) -> Optional[GameState]:
    """
    Attempt to make a move
    -----

    Returns the new state, or None when the move is not legal in this state.
    The move only needs its from/to squares (and optionally the promotion type): castling and en passant markers are
    looked up in the list of legal moves.
    """
    if state.is_over or state.pending_promotion is not None:
        logger.debug(f"chess.game.apply_move rejected move={move.to_uci()} status={state.status}")
        return None

    legal = _match_legal_move(state, move)
    if legal is None:
        logger.debug(f"chess.game.apply_move rejected move={move.to_uci()} reason=illegal")
        return None

    is_promotion = is_pawn_push_to_promotion_square(legal, state.board)
    if is_promotion and move.promote_to is not None:
        if move.promote_to not in PROMOTION_OPTIONS:
            logger.debug(f"chess.game.apply_move rejected move={move.to_uci()} reason=promotion")
            return None
        legal = legal.with_promotion(move.promote_to)

    return advance(state, legal)


def advance(state: GameState, move: Move, with_status: bool = True) -> GameState:
    """
    Play a move taken from `generate_legal_moves()` without validating it again.

    The search uses `with_status=False`: it detects the end of the game itself, so classifying every node is wasted work.
    """
    captured = _captured_piece(state.board, move)
    new_state = replace(
        state,
        board=state.board.move_piece(move),
        castling_rights=_remaining_castling_rights(state.castling_rights, move),
        en_passant_square=_en_passant_square(state.board, move),
        captured_pieces=state.captured_pieces + ((captured,) if captured else ()),
        history=state.history + (move,),
    )

    if move.promote_to is None and is_pawn_push_to_promotion_square(move, state.board):
        # the player still needs to choose: turn does not pass yet
        return replace(new_state, pending_promotion=move.to_square)

    return _pass_turn(new_state, with_status)


def promote(state: GameState, piece_type: PieceType) -> Optional[GameState]:
    """Resolve a pending promotion with the piece type the player selected."""
    if state.pending_promotion is None or piece_type not in PROMOTION_OPTIONS:
        return None

    square = state.pending_promotion
    pawn = state.board.piece(square)
    board = Board(state.board.grid.set(square, pawn.promoted_to(piece_type)))
    last_move = state.history[-1].with_promotion(piece_type)
    new_state = replace(
        state,
        board=board,
        pending_promotion=None,
        history=state.history[:-1] + (last_move,),
    )
    return _pass_turn(new_state)


def _pass_turn(state: GameState, with_status: bool = True) -> GameState:
    next_state = replace(state, side_to_move=state.side_to_move.opponent)
    if not with_status:
        return next_state
    return replace(next_state, status=classify(next_state))


def _match_legal_move(state: GameState, move: Move) -> Optional[Move]:
    return next(
        (
            candidate
            for candidate in generate_legal_moves(state)
            if candidate.from_square == move.from_square and candidate.to_square == move.to_square
        ),
        None,
    )


def _captured_piece(board: Board, move: Move) -> Optional[Piece]:
    if move.is_en_passant:
        return board.piece(Position(move.from_square.row, move.to_square.col))
    return board.piece(move.to_square)


# --- END OF GAME ---
def classify(state: GameState) -> Status:
    """
    Status for the side to move
    ---
    * no legal move and in check: checkmate
    * no legal move, not in check: stalemate
    * in check: check
    """
    color = state.side_to_move
    in_check = state.board.is_check(color)
    if not has_legal_move(state, color):
        return Status.CHECKMATE if in_check else Status.STALEMATE
    return Status.CHECK if in_check else Status.PLAYING


# -- CASTLING RULE HELPERS ---
def _castling_moves(state: GameState, color: Color) -> list[Move]:
    """
    **you are allowed to castle if**

    * Castling rights are not yet revoked (king and rook have not moved, rook not captured).
    * King and rook still stand on their home squares.
    * You are not currently in check (you cannot castle out of check).
    * All squares in between the king and the rook are empty.
    * The king does not pass through or land on an attacked square.
    """
    board = state.board
    if board.is_check(color):
        return []

    moves: list[Move] = []
    for direction in state.castling_rights:
        if direction.color != color:
            continue

        rule = CASTLING_RULES[direction]
        if board.piece(rule.king_from) != Piece(PieceType.KING, color):
            continue
        if board.piece(rule.rook_from) != Piece(PieceType.ROOK, color):
            continue
        if board.is_any_occupied(rule.path()):
            continue
        if board.is_any_under_attack(rule.king_walk(), color.opponent):
            continue

        moves.append(candidate_castling_move(direction))
    # sets do not have a stable order
    return sorted(moves, key=lambda move: move.castling_direction.value)


def _remaining_castling_rights(
    rights: frozenset[CastlingDirection], move: Move
) -> frozenset[CastlingDirection]:
    """
    A right gets revoked once the king or the rook involved leaves its home square, or the rook gets captured there.
    """
    touched = {move.from_square, move.to_square}
    return frozenset(
        direction
        for direction in rights
        if not touched & {CASTLING_RULES[direction].king_from, CASTLING_RULES[direction].rook_from}
    )


# --- EN PASSANT RULE HELPERS ----
def _en_passant_square(board: Board, move: Move) -> Optional[Position]:
    """The possible en passant square for the next turn: the square a pawn skipped with its double step."""
    piece = board.piece(move.from_square)
    rows_moved = abs(move.from_square.row - move.to_square.row)
    if piece is None or piece.type != PieceType.PAWN or rows_moved != 2:
        return None
    return move.from_square.offset(pawn_direction(piece.color), 0)
