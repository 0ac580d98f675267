"""Requests and Response models"""

from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Difficulty, GameKind, Status
from src.go.board import SUPPORTED_SIZES
from src.go.game import CAPTURE_TARGETS

SideName = str

# the piece types a chess pawn may be promoted to
PROMOTION_CHOICES = ("queen", "rook", "bishop", "knight")


class Coordinate(BaseModel):
    """Row / column on a rectangular board, row 0 at the top"""

    row: int
    col: int

    @field_validator("row", "col")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Coordinates cannot be negative, got {value}.")
        return value


# rectangular boards use coordinates, nine men's morris uses point numbers (0-23)
Square = Union[Coordinate, int]


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    kind: GameKind
    difficulty: Difficulty = Difficulty.MEDIUM
    # side played by the human; None means both sides are played by humans
    human_side: Optional[SideName] = None
    vs_computer: bool = True
    board_size: Optional[int] = None
    capture_target: Optional[int] = None

    @field_validator("human_side")
    @classmethod
    def validate_side(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        side = value.strip().lower()
        if side not in ("white", "black", "red"):
            raise InvalidRequestError(f"Unknown side {value!r}.")
        return side

    @field_validator("board_size")
    @classmethod
    def validate_board_size(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value not in SUPPORTED_SIZES:
            raise InvalidRequestError(f"Board size must be one of {SUPPORTED_SIZES}, got {value}.")
        return value

    @field_validator("capture_target")
    @classmethod
    def validate_capture_target(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value not in CAPTURE_TARGETS:
            raise InvalidRequestError(
                f"Capture target must be one of {CAPTURE_TARGETS}, got {value}."
            )
        return value


class LegalMovesRequest(BaseModel):
    session_id: UUID
    origin: Optional[Square] = None


class MoveRequest(BaseModel):
    """
    A move attempt
    ---
    * chess / checkers / xiangqi: origin and target coordinates (+ optional promotion for chess)
    * go: target coordinate, or no target at all to pass
    * nine men's morris: target point only while placing or removing, origin and target points otherwise
    """

    session_id: UUID
    origin: Optional[Square] = None
    target: Optional[Square] = None
    promote_to: Optional[str] = None

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        piece = value.strip().lower()
        if piece not in PROMOTION_CHOICES:
            raise InvalidRequestError(f"Cannot promote to {value!r}.")
        return piece


class PromoteRequest(BaseModel):
    session_id: UUID
    piece: str

    @field_validator("piece")
    @classmethod
    def validate_piece(cls, value: str) -> str:
        piece = value.strip().lower()
        if piece not in PROMOTION_CHOICES:
            raise InvalidRequestError(f"Cannot promote to {value!r}.")
        return piece


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    session_id: UUID
    kind: GameKind
    difficulty: Difficulty
    human_side: Optional[SideName]
    board: list[str]
    side_to_move: SideName
    status: Status
    winner: Optional[SideName]
    move_count: int
    # False when the last move attempt was rejected (the state is unchanged then)
    accepted: bool = True
    details: dict[str, Union[int, str, bool, list[str], None]] = {}


class LegalMovesResponse(BaseModel):
    session_id: UUID
    origin: Optional[Square]
    destinations: list[Square]
