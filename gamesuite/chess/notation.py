"""Move notation for the move history (algebraic-like, without check markers)."""

from gamesuite.chess.castling import castling_direction, is_castling_move
from gamesuite.chess.square import FILES, Square
from gamesuite.core.shared_types import PieceType

PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


def format_move(
    piece_type: PieceType, from_square: Square, to_square: Square, is_capture: bool
) -> str:
    """
    Notation of a single move
    ----

    examples:
    * "e4": pawn push
    * "Nf3": piece letter + destination
    * "Bxc6": capture marker 'x' in between
    * "exd5": pawns have no letter, so a pawn capture names the file it came from
    * "O-O" / "O-O-O": castling king side / queen side
    """
    if piece_type == PieceType.KING and is_castling_move(from_square.col, to_square.col):
        return castling_direction(from_square.col, to_square.col).value

    destination = to_square.to_algebraic()
    if piece_type == PieceType.PAWN and is_capture:
        return f"{FILES[from_square.col]}x{destination}"

    capture_marker = "x" if is_capture else ""
    return f"{PIECE_LETTERS[piece_type]}{capture_marker}{destination}"
