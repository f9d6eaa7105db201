"""Defines the chess pieces"""

from dataclasses import dataclass, field
from typing import Self

from gamesuite.chess.square import Square
from gamesuite.core.exceptions import InvalidFENError
from gamesuite.core.shared_types import PieceType, Side

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

PIECE_SYMBOLS: dict[tuple[Side, PieceType], str] = {
    (Side.WHITE, PieceType.KING): "♔",
    (Side.WHITE, PieceType.QUEEN): "♕",
    (Side.WHITE, PieceType.ROOK): "♖",
    (Side.WHITE, PieceType.BISHOP): "♗",
    (Side.WHITE, PieceType.KNIGHT): "♘",
    (Side.WHITE, PieceType.PAWN): "♙",
    (Side.BLACK, PieceType.KING): "♚",
    (Side.BLACK, PieceType.QUEEN): "♛",
    (Side.BLACK, PieceType.ROOK): "♜",
    (Side.BLACK, PieceType.BISHOP): "♝",
    (Side.BLACK, PieceType.KNIGHT): "♞",
    (Side.BLACK, PieceType.PAWN): "♟",
}

PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}


@dataclass
class Piece:
    id: str
    type: PieceType
    side: Side
    row: int
    col: int
    has_moved: bool = False
    captured: bool = False
    symbol: str = field(init=False)
    points: int = field(init=False)

    def __post_init__(self):
        self.symbol = PIECE_SYMBOLS[(self.side, self.type)]
        # NOTE: The King's worth is undefined (does not count towards total points)
        self.points = PIECE_POINTS.get(self.type, 0)

    @classmethod
    def from_fen(cls, character: str, piece_id: str, square: Square) -> Self:
        # lower case: Black pieces, upper case: White pieces
        if character.lower() not in FEN_TO_PIECE:
            raise InvalidFENError(f"Unknown piece character: {character!r}")
        side = Side.WHITE if character.isupper() else Side.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_id, piece_type, side, square.row, square.col)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.side == Side.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @property
    def square(self) -> Square:
        return Square(self.row, self.col)

    @property
    def is_alive(self) -> bool:
        return not self.captured

    def place_on(self, square: Square) -> None:
        self.row = square.row
        self.col = square.col
