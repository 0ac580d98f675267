"""
Translation between the service layer and the five rule engines.

Each engine is a closed package with its own GameState, Move and side types. The service only talks to the
`GameAdapter` registered for a session's game kind (same strategy-table idea as the piece movement rules):
requests in, engine objects through, response fields out.
"""

from random import Random
from typing import Any, Optional, Protocol

from src.api.models import Coordinate, MoveRequest, NewGameRequest, Square
from src.checkers import ai as checkers_ai
from src.checkers import game as checkers_game
from src.checkers.board import Color as CheckersColor
from src.checkers.board import Move as CheckersMove
from src.chess import ai as chess_ai
from src.chess import game as chess_game
from src.chess.moves import Move as ChessMove
from src.chess.pieces import Color as ChessColor
from src.chess.pieces import PieceType as ChessPieceType
from src.core.config import EngineSettings
from src.core.exceptions import InvalidRequestError
from src.core.position import Position
from src.core.shared_types import Difficulty, GameKind
from src.go import ai as go_ai
from src.go import game as go_game
from src.go.board import Stone
from src.nine_mens_morris import ai as morris_ai
from src.nine_mens_morris import game as morris_game
from src.nine_mens_morris.board import Color as MorrisColor
from src.nine_mens_morris.game import Move as MorrisMove
from src.nine_mens_morris.game import MoveKind, Phase
from src.xiangqi import ai as xiangqi_ai
from src.xiangqi import game as xiangqi_game
from src.xiangqi.moves import Move as XiangqiMove
from src.xiangqi.pieces import Color as XiangqiColor

Details = dict[str, Any]


class GameAdapter(Protocol):
    """What the service needs from a game engine"""

    sides: tuple[str, str]

    def new_state(self, request: NewGameRequest, settings: EngineSettings) -> Any: ...

    def side_to_move(self, state: Any) -> str: ...

    def legal_moves(self, state: Any, origin: Optional[Square]) -> list[Square]: ...

    def parse_move(self, state: Any, request: MoveRequest) -> Any: ...

    def apply_move(self, state: Any, move: Any) -> Optional[Any]: ...

    def select_opponent_move(self, state: Any, difficulty: Difficulty, rng: Random) -> Optional[Any]: ...

    def board(self, state: Any) -> list[str]: ...

    def winner(self, state: Any) -> Optional[str]: ...

    def details(self, state: Any) -> Details: ...


# --- CONVERSION HELPERS ---
def side_name(color: Any) -> str:
    return color.name.lower()


def to_position(square: Optional[Square]) -> Position:
    if not isinstance(square, Coordinate):
        raise InvalidRequestError(f"Expected a row/column coordinate, got {square!r}.")
    return Position(square.row, square.col)


def to_point(square: Optional[Square]) -> int:
    if not isinstance(square, int):
        raise InvalidRequestError(f"Expected a point number, got {square!r}.")
    return square


def to_coordinate(position: Position) -> Coordinate:
    return Coordinate(row=position.row, col=position.col)


def optional_position(position: Optional[Position]) -> Optional[str]:
    return None if position is None else f"{position.row},{position.col}"


# --- ADAPTERS ---
class ChessAdapter:
    sides = ("white", "black")

    def new_state(self, request: NewGameRequest, settings: EngineSettings) -> chess_game.GameState:
        return chess_game.GameState.new_game()

    def side_to_move(self, state: chess_game.GameState) -> str:
        return side_name(state.side_to_move)

    def legal_moves(self, state: chess_game.GameState, origin: Optional[Square]) -> list[Square]:
        return [to_coordinate(target) for target in chess_game.legal_moves(state, to_position(origin))]

    def parse_move(self, state: chess_game.GameState, request: MoveRequest) -> ChessMove:
        promote_to = ChessPieceType[request.promote_to.upper()] if request.promote_to else None
        return ChessMove(to_position(request.origin), to_position(request.target), promote_to=promote_to)

    def apply_move(self, state: chess_game.GameState, move: ChessMove) -> Optional[chess_game.GameState]:
        return chess_game.apply_move(state, move)

    def promote(self, state: chess_game.GameState, piece: str) -> Optional[chess_game.GameState]:
        return chess_game.promote(state, ChessPieceType[piece.upper()])

    def select_opponent_move(
        self, state: chess_game.GameState, difficulty: Difficulty, rng: Random
    ) -> Optional[ChessMove]:
        return chess_ai.select_opponent_move(state, state.side_to_move, difficulty, rng=rng)

    def board(self, state: chess_game.GameState) -> list[str]:
        return [
            "".join(piece.to_fen() if piece else "." for piece in row)
            for row in state.board.grid.cells
        ]

    def winner(self, state: chess_game.GameState) -> Optional[str]:
        return side_name(state.winner) if state.winner else None

    def details(self, state: chess_game.GameState) -> Details:
        return {
            "pending_promotion": optional_position(state.pending_promotion),
            "en_passant_square": optional_position(state.en_passant_square),
            "castling_rights": sorted(direction.value for direction in state.castling_rights),
            "white_captured": len(state.captured_by(ChessColor.WHITE)),
            "black_captured": len(state.captured_by(ChessColor.BLACK)),
        }


class CheckersAdapter:
    sides = ("white", "black")

    def new_state(self, request: NewGameRequest, settings: EngineSettings) -> checkers_game.GameState:
        return checkers_game.GameState.new_game()

    def side_to_move(self, state: checkers_game.GameState) -> str:
        return side_name(state.side_to_move)

    def legal_moves(self, state: checkers_game.GameState, origin: Optional[Square]) -> list[Square]:
        return [
            to_coordinate(target) for target in checkers_game.legal_moves(state, to_position(origin))
        ]

    def parse_move(self, state: checkers_game.GameState, request: MoveRequest) -> CheckersMove:
        return CheckersMove(to_position(request.origin), to_position(request.target))

    def apply_move(
        self, state: checkers_game.GameState, move: CheckersMove
    ) -> Optional[checkers_game.GameState]:
        return checkers_game.apply_move(state, move)

    def select_opponent_move(
        self, state: checkers_game.GameState, difficulty: Difficulty, rng: Random
    ) -> Optional[CheckersMove]:
        return checkers_ai.select_opponent_move(state, state.side_to_move, difficulty, rng=rng)

    def board(self, state: checkers_game.GameState) -> list[str]:
        return state.board.to_diagram()

    def winner(self, state: checkers_game.GameState) -> Optional[str]:
        return side_name(state.winner) if state.winner else None

    def details(self, state: checkers_game.GameState) -> Details:
        return {
            "continuing_from": optional_position(state.continuing_from),
            "white_captured": state.captured_by(CheckersColor.WHITE),
            "black_captured": state.captured_by(CheckersColor.BLACK),
        }


class XiangqiAdapter:
    sides = ("red", "black")

    def new_state(self, request: NewGameRequest, settings: EngineSettings) -> xiangqi_game.GameState:
        return xiangqi_game.GameState.new_game()

    def side_to_move(self, state: xiangqi_game.GameState) -> str:
        return side_name(state.side_to_move)

    def legal_moves(self, state: xiangqi_game.GameState, origin: Optional[Square]) -> list[Square]:
        return [
            to_coordinate(target) for target in xiangqi_game.legal_moves(state, to_position(origin))
        ]

    def parse_move(self, state: xiangqi_game.GameState, request: MoveRequest) -> XiangqiMove:
        return XiangqiMove(to_position(request.origin), to_position(request.target))

    def apply_move(
        self, state: xiangqi_game.GameState, move: XiangqiMove
    ) -> Optional[xiangqi_game.GameState]:
        return xiangqi_game.apply_move(state, move)

    def select_opponent_move(
        self, state: xiangqi_game.GameState, difficulty: Difficulty, rng: Random
    ) -> Optional[XiangqiMove]:
        return xiangqi_ai.select_opponent_move(state, state.side_to_move, difficulty, rng=rng)

    def board(self, state: xiangqi_game.GameState) -> list[str]:
        return state.board.to_diagram()

    def winner(self, state: xiangqi_game.GameState) -> Optional[str]:
        return side_name(state.winner) if state.winner else None

    def details(self, state: xiangqi_game.GameState) -> Details:
        return {
            "red_captured": len(state.captured_by(XiangqiColor.RED)),
            "black_captured": len(state.captured_by(XiangqiColor.BLACK)),
        }


class GoAdapter:
    sides = ("black", "white")

    def new_state(self, request: NewGameRequest, settings: EngineSettings) -> go_game.GameState:
        return go_game.GameState.new_game(
            size=request.board_size or settings.go_board_size,
            capture_target=request.capture_target or settings.go_capture_target,
        )

    def side_to_move(self, state: go_game.GameState) -> str:
        return side_name(state.side_to_move)

    def legal_moves(self, state: go_game.GameState, origin: Optional[Square]) -> list[Square]:
        """Placements do not have an origin: every playable point"""
        return [to_coordinate(point) for point in go_game.legal_moves(state)]

    def parse_move(self, state: go_game.GameState, request: MoveRequest) -> go_game.Move:
        if request.target is None:
            return go_game.Move.pass_turn()
        return go_game.Move(to_position(request.target))

    def apply_move(self, state: go_game.GameState, move: go_game.Move) -> Optional[go_game.GameState]:
        return go_game.apply_move(state, move)

    def select_opponent_move(
        self, state: go_game.GameState, difficulty: Difficulty, rng: Random
    ) -> Optional[go_game.Move]:
        # nowhere left to play: the computer passes
        move = go_ai.select_opponent_move(state, state.side_to_move, difficulty, rng=rng)
        return move or go_game.Move.pass_turn()

    def board(self, state: go_game.GameState) -> list[str]:
        return state.board.to_diagram()

    def winner(self, state: go_game.GameState) -> Optional[str]:
        return side_name(state.winner) if state.winner else None

    def details(self, state: go_game.GameState) -> Details:
        return {
            "black_captures": state.captures(Stone.BLACK),
            "white_captures": state.captures(Stone.WHITE),
            "ko_point": optional_position(state.ko_point),
            "pass_count": state.pass_count,
            "capture_target": state.capture_target,
        }


class NineMensMorrisAdapter:
    sides = ("white", "black")

    def new_state(self, request: NewGameRequest, settings: EngineSettings) -> morris_game.GameState:
        return morris_game.GameState.new_game()

    def side_to_move(self, state: morris_game.GameState) -> str:
        return side_name(state.side_to_move)

    def legal_moves(self, state: morris_game.GameState, origin: Optional[Square]) -> list[Square]:
        return list(morris_game.legal_moves(state, None if origin is None else to_point(origin)))

    def parse_move(self, state: morris_game.GameState, request: MoveRequest) -> MorrisMove:
        """The kind of move follows from the state: removal, placement, or a slide / fly of a piece"""
        target = to_point(request.target)
        if state.awaiting_removal:
            return MorrisMove.remove(target)
        if state.phase == Phase.PLACING:
            return MorrisMove.place(target)
        kind = MoveKind.FLY if state.phase == Phase.FLYING else MoveKind.SLIDE
        return MorrisMove(kind, target, to_point(request.origin))

    def apply_move(
        self, state: morris_game.GameState, move: MorrisMove
    ) -> Optional[morris_game.GameState]:
        return morris_game.apply_move(state, move)

    def select_opponent_move(
        self, state: morris_game.GameState, difficulty: Difficulty, rng: Random
    ) -> Optional[MorrisMove]:
        return morris_ai.select_opponent_move(state, state.side_to_move, difficulty, rng=rng)

    def board(self, state: morris_game.GameState) -> list[str]:
        """One character per point: 'w', 'b' or '.'"""
        symbols = {MorrisColor.WHITE: "w", MorrisColor.BLACK: "b", None: "."}
        return ["".join(symbols[piece] for piece in state.board.points)]

    def winner(self, state: morris_game.GameState) -> Optional[str]:
        return side_name(state.winner) if state.winner else None

    def details(self, state: morris_game.GameState) -> Details:
        return {
            "phase": state.phase.value,
            "awaiting_removal": state.awaiting_removal,
            "white_in_hand": state.white_in_hand,
            "black_in_hand": state.black_in_hand,
            "white_on_board": state.on_board(MorrisColor.WHITE),
            "black_on_board": state.on_board(MorrisColor.BLACK),
        }


ADAPTERS: dict[GameKind, GameAdapter] = {
    GameKind.CHESS: ChessAdapter(),
    GameKind.CHECKERS: CheckersAdapter(),
    GameKind.XIANGQI: XiangqiAdapter(),
    GameKind.GO: GoAdapter(),
    GameKind.NINE_MENS_MORRIS: NineMensMorrisAdapter(),
}
