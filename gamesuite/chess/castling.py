"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum

from gamesuite.chess.square import Square


class CastlingDirection(Enum):
    """The two castling directions. Values are their notation."""

    KING_SIDE = "O-O"
    QUEEN_SIDE = "O-O-O"


@dataclass(frozen=True)
class CastlingColumns:
    """
    Store the columns where the rook starts from / ends up in by castling, and how far the king travels.
    Castling never leaves the row the king stands on, so columns are all we need.
    """

    king_step: int
    rook_from: int
    rook_to: int

    def squares_between(self, row: int, king_col: int) -> list[Square]:
        """Squares strictly between king and rook. All of them must be empty to castle."""
        low, high = sorted((king_col, self.rook_from))
        return [Square(row, col) for col in range(low + 1, high)]


# The moves (in classical chess) made when castling, the same for both sides
CASTLING_RULES: dict[CastlingDirection, CastlingColumns] = {
    CastlingDirection.KING_SIDE: CastlingColumns(king_step=2, rook_from=7, rook_to=5),
    CastlingDirection.QUEEN_SIDE: CastlingColumns(king_step=-2, rook_from=0, rook_to=3),
}


def castling_direction(from_col: int, to_col: int) -> CastlingDirection:
    """A king move of two columns is a castling move, towards the rook it castles with."""
    return (
        CastlingDirection.KING_SIDE if to_col > from_col else CastlingDirection.QUEEN_SIDE
    )


def is_castling_move(from_col: int, to_col: int) -> bool:
    """Only meaningful for king moves"""
    return abs(to_col - from_col) == 2
