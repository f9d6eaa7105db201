"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from gamesuite.chess.square import BOARD_DIMENSIONS
from gamesuite.core.exceptions import InvalidRequestError
from gamesuite.core.shared_types import PieceType, Side, Status

AlgebraicSquare = str


# --- REQUEST MODELS ---
class CreateSessionRequest(BaseModel):
    placement_fen: Optional[str] = None
    starting_side: Side = Side.WHITE
    strict_legality: bool = False
    safe_castling: bool = False

    @field_validator("placement_fen")
    @classmethod
    def validate_placement_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        ranks = value.strip().split("/")
        if len(ranks) != BOARD_DIMENSIONS[0]:
            raise InvalidRequestError(
                f"Board placement must contain {BOARD_DIMENSIONS[0]} '/'-separated ranks."
            )
        if value.count("K") != 1 or value.count("k") != 1:
            raise InvalidRequestError("Board placement must hold exactly one king per side.")
        return value.strip()


class SelectSquareRequest(BaseModel):
    session_id: UUID
    row: int
    col: int

    @field_validator(*["row", "col"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value < BOARD_DIMENSIONS[0]:
            raise InvalidRequestError(
                f"Coordinate {value!r} is off the board (0-{BOARD_DIMENSIONS[0] - 1})."
            )
        return value


class SessionRequest(BaseModel):
    session_id: UUID


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    id: str
    type: PieceType
    side: Side
    symbol: str
    square: AlgebraicSquare
    captured: bool


class MoveRecordResponse(BaseModel):
    piece_id: str
    from_square: AlgebraicSquare
    to_square: AlgebraicSquare
    notation: str
    is_capture: bool
    is_check: bool
    is_checkmate: bool


class SessionResponse(BaseModel):
    session_id: UUID
    current_side: Side
    status: Status
    board_fen: str
    selected_square: Optional[AlgebraicSquare]
    legal_destinations: list[AlgebraicSquare]
    move_history: list[MoveRecordResponse]
    captured_pieces: list[PieceResponse]
    check_square: Optional[AlgebraicSquare]
