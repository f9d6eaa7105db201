"""
The Board is a view over the set of pieces: where every piece sits, alive or captured, and whether it has moved.

There is no separate grid kept in sync with the pieces. Occupancy is found by scanning the (at most 32) live pieces.
"""

from collections import Counter
from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from gamesuite.chess.pieces import FEN_TO_PIECE, Piece
from gamesuite.chess.square import BOARD_DIMENSIONS, Square
from gamesuite.core.exceptions import InvalidFENError
from gamesuite.core.shared_types import PieceType, Side

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

BACK_ROW: dict[Side, int] = {Side.BLACK: 0, Side.WHITE: 7}
PAWN_ROW: dict[Side, int] = {Side.BLACK: 1, Side.WHITE: 6}


def initial_setup() -> list[Piece]:
    """
    The 32 pieces of the standard starting layout.

    Black back rank on row 0, black pawns on row 1, white pawns on row 6 and the white back rank on row 7.
    Ids are fixed: the pieces that come in pairs are numbered from the a-file onwards (ex. 'wr1' on a1, 'wr2' on h1).
    """
    pieces: list[Piece] = []
    for side in (Side.BLACK, Side.WHITE):
        prefix = side.value[0]
        seen: Counter[PieceType] = Counter()
        back_rank: list[Piece] = []
        for col, piece_type in enumerate(BACK_RANK):
            seen[piece_type] += 1
            letter = "n" if piece_type == PieceType.KNIGHT else piece_type.value[0]
            # queen and king are unique, so they go without a number
            number = (
                ""
                if piece_type in (PieceType.QUEEN, PieceType.KING)
                else str(seen[piece_type])
            )
            back_rank.append(
                Piece(f"{prefix}{letter}{number}", piece_type, side, BACK_ROW[side], col)
            )
        pawns = [
            Piece(f"{prefix}p{col + 1}", PieceType.PAWN, side, PAWN_ROW[side], col)
            for col in range(BOARD_DIMENSIONS[1])
        ]
        # keep the board's reading order: row 0 first
        pieces.extend(back_rank + pawns if side == Side.BLACK else pawns + back_rank)
    return pieces


def is_on_starting_square(piece: Piece) -> bool:
    """Would this piece stand here in the standard starting layout?"""
    if piece.type == PieceType.PAWN:
        return piece.row == PAWN_ROW[piece.side]
    return piece.row == BACK_ROW[piece.side] and BACK_RANK[piece.col] == piece.type


@dataclass
class Board:
    pieces: list[Piece]

    @classmethod
    def standard(cls) -> Self:
        return cls(initial_setup())

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """A playable position from the placement part of a FEN string: exactly one king per side."""
        board = cls.from_placement(fen_str)
        for side in Side:
            kings = [piece for piece in board.pieces_of(side) if piece.type == PieceType.KING]
            if len(kings) != 1:
                raise InvalidFENError(
                    f"Expected exactly one {side} king, found {len(kings)} in {fen_str!r}"
                )
        return board

    @classmethod
    def from_placement(cls, fen_str: str) -> Self:
        """Construct a board using the placement part of a FEN string, whatever pieces it holds.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with a rook on a8
        * pawns cover the 7th rank (row 1) entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces

        Pieces get numbered ids in reading order (ex. 'wp1', 'bk1').
        A piece only counts as 'not moved yet' when it stands on its square of the standard layout.
        """
        fen_by_rows = fen_str.strip().split("/")
        if len(fen_by_rows) != BOARD_DIMENSIONS[0]:
            raise InvalidFENError(
                f"Expected {BOARD_DIMENSIONS[0]} ranks separated by '/', got {len(fen_by_rows)}: {fen_str!r}"
            )

        pieces: list[Piece] = []
        seen: Counter[str] = Counter()
        for row, fen_one_row in enumerate(fen_by_rows):
            col = 0
            for character in fen_one_row:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
                    continue
                if character.lower() not in FEN_TO_PIECE:
                    raise InvalidFENError(
                        f"Unknown piece character {character!r} in {fen_str!r}"
                    )
                side_prefix = "w" if character.isupper() else "b"
                seen[character] += 1
                piece_id = f"{side_prefix}{character.lower()}{seen[character]}"
                piece = Piece.from_fen(character, piece_id, Square(row, col))
                piece.has_moved = not is_on_starting_square(piece)
                pieces.append(piece)
                col += 1
            if col != BOARD_DIMENSIONS[1]:
                raise InvalidFENError(
                    f"Rank {fen_one_row!r} does not describe {BOARD_DIMENSIONS[1]} squares"
                )
        return cls(pieces)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece_at(row, col)

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # -- OCCUPANCY --
    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        """The unique live piece on (row, col), if any."""
        return next(
            (
                piece
                for piece in self.pieces
                if not piece.captured and piece.row == row and piece.col == col
            ),
            None,
        )

    def piece(self, square: Square) -> Optional[Piece]:
        return self.piece_at(square.row, square.col)

    def is_occupied(self, square: Square) -> bool:
        return self.piece(square) is not None

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(self.is_occupied(square) for square in squares)

    # -- LOOKUPS --
    def live_pieces(self) -> list[Piece]:
        return [piece for piece in self.pieces if piece.is_alive]

    def pieces_of(self, side: Side) -> list[Piece]:
        """Live pieces of one side"""
        return [piece for piece in self.live_pieces() if piece.side == side]

    def captured_pieces(self, side: Side) -> list[Piece]:
        """Pieces of `side` that got taken by the opponent"""
        return [
            piece for piece in self.pieces if piece.captured and piece.side == side
        ]

    def find_piece(self, piece_id: str) -> Optional[Piece]:
        return next((piece for piece in self.pieces if piece.id == piece_id), None)

    def locate_king(self, side: Side) -> Optional[Piece]:
        return next(
            (
                piece
                for piece in self.pieces_of(side)
                if piece.type == PieceType.KING
            ),
            None,
        )

    def count_material(self) -> dict[Side, int]:
        """Tally the points of material each side has on the board"""
        return {side: sum(piece.points for piece in self.pieces_of(side)) for side in Side}

    def copy(self) -> Self:
        """Scratch copy to try out moves on"""
        return deepcopy(self)
