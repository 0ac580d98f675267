"""Unit tests for /src/chess/game.py"""

from random import Random

import pytest

from src.chess.board import Board
from src.chess.castling import CastlingDirection
from src.chess.game import (
    GameState,
    apply_move,
    classify,
    generate_legal_moves,
    legal_moves,
    promote,
)
from src.chess.moves import Move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import square
from src.core.shared_types import Status


def uci_move(text: str) -> Move:
    """Move written in UCI notation such as e2e4, from and to squares only"""
    return Move(square(text[:2]), square(text[2:4]))


def play(state: GameState, *uci_moves: str) -> GameState:
    """Play a sequence of moves that are all expected to be legal"""
    for uci in uci_moves:
        new_state = apply_move(state, uci_move(uci))
        assert new_state is not None, f"{uci} was rejected"
        state = new_state
    return state


@pytest.fixture
def castling_state() -> GameState:
    """Only the kings and the rooks: ready to perform any castling move"""
    return GameState.new_game("r3k2r/8/8/8/8/8/8/R3K2R")


# -- STARTING POSITION --
def test_new_game() -> None:
    state = GameState.new_game()
    assert state.side_to_move == Color.WHITE
    assert state.status == Status.PLAYING
    assert len(generate_legal_moves(state)) == 20


def test_king_pawn_opening() -> None:
    """e2-e4 is legal, the turn passes to black and black's king stays safe"""
    state = GameState.new_game()
    assert square("e4") in legal_moves(state, square("e2"))

    new_state = apply_move(state, Move(square("e2"), square("e4")))
    assert new_state is not None
    assert new_state.side_to_move == Color.BLACK
    assert not new_state.board.is_check(Color.BLACK)
    assert new_state.en_passant_square == square("e3")
    assert new_state.history == (Move(square("e2"), square("e4")),)
    # the previous state is untouched
    assert state.board.piece(square("e2")) == Piece(PieceType.PAWN, Color.WHITE)


def test_legal_moves_is_pure() -> None:
    state = GameState.new_game()
    assert legal_moves(state, square("g1")) == legal_moves(state, square("g1"))
    assert set(legal_moves(state, square("g1"))) == {square("f3"), square("h3")}


@pytest.mark.parametrize(
    "uci",
    [
        "e2e5",  # too far
        "e7e5",  # not your piece
        "e4e5",  # no piece
        "a1a3",  # blocked
    ],
)
def test_illegal_moves_are_rejected(uci: str) -> None:
    assert apply_move(GameState.new_game(), uci_move(uci)) is None


def test_pinned_piece_keeps_the_king_covered() -> None:
    state = GameState.new_game("4k3/8/8/8/4r3/8/4R3/4K3")
    assert set(legal_moves(state, square("e2"))) == {square("e3"), square("e4")}


def test_no_legal_move_leaves_own_king_attacked() -> None:
    """Random playout: every generated move keeps the mover's king safe"""
    rng = Random(3)
    state = GameState.new_game()
    for _ in range(30):
        moves = generate_legal_moves(state)
        if not moves or state.is_over:
            break
        for move in moves:
            assert not state.board.move_piece(move).is_check(state.side_to_move)
        next_state = apply_move(state, rng.choice(moves))
        if next_state.pending_promotion is not None:
            next_state = promote(next_state, PieceType.QUEEN)
        state = next_state


# -- END OF GAME --
def test_fools_mate() -> None:
    state = play(GameState.new_game(), "f2f3", "e7e5", "g2g4", "d8h4")
    assert state.status == Status.CHECKMATE
    assert state.winner == Color.BLACK
    assert state.is_over
    assert apply_move(state, uci_move("a2a3")) is None


def test_back_rank_mate() -> None:
    state = GameState(board=Board.from_fen("R5k1/5ppp/8/8/8/8/8/6K1"), side_to_move=Color.BLACK)
    assert classify(state) == Status.CHECKMATE


def test_stalemate() -> None:
    state = GameState(board=Board.from_fen("7k/5Q2/6K1/8/8/8/8/8"), side_to_move=Color.BLACK)
    assert classify(state) == Status.STALEMATE


def test_check_status() -> None:
    state = play(GameState.new_game(), "e2e4", "f7f6", "d1h5")
    assert state.status == Status.CHECK
    assert state.winner is None


# -- CASTLING --
def test_castling_both_sides(castling_state: GameState) -> None:
    destinations = legal_moves(castling_state, square("e1"))
    assert square("g1") in destinations
    assert square("c1") in destinations


def test_castling_moves_rook_and_revokes_rights(castling_state: GameState) -> None:
    state = apply_move(castling_state, Move(square("e1"), square("g1")))
    assert state.board.piece(square("f1")) == Piece(PieceType.ROOK, Color.WHITE)
    assert state.board.piece(square("h1")) is None
    assert state.castling_rights == frozenset(
        {CastlingDirection.BLACK_KING_SIDE, CastlingDirection.BLACK_QUEEN_SIDE}
    )


def test_no_castling_through_attacked_square() -> None:
    """The black rook on f2 covers f1"""
    state = GameState.new_game("r3k2r/8/8/8/8/8/5r2/R3K2R")
    destinations = legal_moves(state, square("e1"))
    assert square("g1") not in destinations
    assert square("c1") in destinations


def test_no_castling_out_of_check() -> None:
    state = GameState.new_game("r3k2r/8/8/8/8/8/4r3/R3K2R")
    assert state.status == Status.CHECK
    destinations = legal_moves(state, square("e1"))
    assert square("g1") not in destinations
    assert square("c1") not in destinations


def test_king_move_revokes_castling(castling_state: GameState) -> None:
    state = play(castling_state, "e1f1", "a8b8", "f1e1", "b8a8")
    assert square("g1") not in legal_moves(state, square("e1"))
    assert CastlingDirection.BLACK_KING_SIDE in state.castling_rights
    assert CastlingDirection.BLACK_QUEEN_SIDE not in state.castling_rights


# -- EN PASSANT --
def test_en_passant_capture() -> None:
    state = play(GameState.new_game(), "e2e4", "a7a6", "e4e5", "d7d5")
    assert square("d6") in legal_moves(state, square("e5"))

    state = apply_move(state, Move(square("e5"), square("d6")))
    assert state.board.piece(square("d5")) is None
    assert state.captured_by(Color.WHITE) == [Piece(PieceType.PAWN, Color.BLACK)]


def test_en_passant_expires() -> None:
    state = play(GameState.new_game(), "e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "h7h6")
    assert square("d6") not in legal_moves(state, square("e5"))


# -- PROMOTION --
PROMOTION_FEN = "8/4P3/8/8/8/8/8/k6K"


def test_promotion_pending_until_chosen() -> None:
    state = apply_move(GameState.new_game(PROMOTION_FEN), Move(square("e7"), square("e8")))
    assert state.pending_promotion == square("e8")
    assert state.side_to_move == Color.WHITE
    # nothing else can happen before the piece is chosen
    assert apply_move(state, Move(square("h1"), square("h2"))) is None

    state = promote(state, PieceType.QUEEN)
    assert state.board.piece(square("e8")) == Piece(PieceType.QUEEN, Color.WHITE)
    assert state.pending_promotion is None
    assert state.side_to_move == Color.BLACK
    assert state.history[-1].promote_to == PieceType.QUEEN


def test_promotion_in_the_move() -> None:
    move = Move(square("e7"), square("e8"), promote_to=PieceType.ROOK)
    state = apply_move(GameState.new_game(PROMOTION_FEN), move)
    assert state.board.piece(square("e8")) == Piece(PieceType.ROOK, Color.WHITE)
    assert state.side_to_move == Color.BLACK


def test_cannot_promote_to_king() -> None:
    state = GameState.new_game(PROMOTION_FEN)
    move = Move(square("e7"), square("e8"), promote_to=PieceType.KING)
    assert apply_move(state, move) is None
    pending = apply_move(state, Move(square("e7"), square("e8")))
    assert promote(pending, PieceType.KING) is None


def test_promote_without_pending_promotion() -> None:
    assert promote(GameState.new_game(), PieceType.QUEEN) is None
