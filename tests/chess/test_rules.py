"""Unit tests for /gamesuite/chess/rules.py"""

import pytest

from gamesuite.chess.board import Board
from gamesuite.chess.pieces import Piece
from gamesuite.chess.rules import (
    MoveOutcome,
    apply_move,
    castling_destinations,
    evaluate_status,
    has_any_legal_move,
    is_in_check,
    is_square_attacked,
    kings_touch,
    legal_destinations,
)
from gamesuite.chess.square import Square
from gamesuite.core.config import RulesConfig
from gamesuite.core.exceptions import InvalidMoveError
from gamesuite.core.shared_types import PieceType, Side, Status

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R"
STRICT = RulesConfig(strict_legality=True)
SAFE_CASTLING = RulesConfig(safe_castling=True)


def _sq(notation: str) -> Square:
    return Square.from_algebraic(notation)


def _algebraic(squares: set[Square]) -> set[str]:
    return {square.to_algebraic() for square in squares}


def _piece(board: Board, notation: str) -> Piece:
    piece = board.piece(_sq(notation))
    assert piece is not None, f"no piece on {notation}"
    return piece


def _play(board: Board, side: Side, from_sq: str, to_sq: str) -> MoveOutcome:
    target = _sq(to_sq)
    return apply_move(_piece(board, from_sq), target.row, target.col, board, side)


@pytest.fixture
def castling_board() -> Board:
    """Only the Kings and the Rooks, all on their starting squares. Ready to castle in any direction."""
    return Board.from_fen(CASTLING_FEN)


@pytest.fixture
def fools_mate_board() -> Board:
    """1.f3 e5 2.g4 Qh4#"""
    board = Board.standard()
    _play(board, Side.WHITE, "f2", "f3")
    _play(board, Side.BLACK, "e7", "e5")
    _play(board, Side.WHITE, "g2", "g4")
    _play(board, Side.BLACK, "d8", "h4")
    return board


# -- LEGAL DESTINATIONS --
def test_destinations_in_starting_position() -> None:
    """20 moves: 16 pawn moves and 4 knight moves"""
    board = Board.standard()
    total = sum(
        len(legal_destinations(piece, board)) for piece in board.pieces_of(Side.WHITE)
    )
    assert total == 20


def test_legal_destinations_is_idempotent() -> None:
    board = Board.from_fen("r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R")
    for piece in board.live_pieces():
        assert legal_destinations(piece, board) == legal_destinations(piece, board)


def test_captured_piece_has_no_destinations() -> None:
    board = Board.standard()
    pawn = _piece(board, "e2")
    pawn.captured = True
    assert legal_destinations(pawn, board) == set()


def test_opponent_king_is_never_a_capture_target() -> None:
    board = Board.from_fen("4k3/3P4/8/8/8/8/8/4K3")
    assert _algebraic(legal_destinations(_piece(board, "d7"), board)) == {"d8"}


def test_pseudo_legal_allows_walking_into_check() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/3r4/4K3")
    king = _piece(board, "e1")
    assert _algebraic(legal_destinations(king, board)) == {"d1", "f1", "d2", "e2", "f2"}


def test_strict_legality_drops_moves_into_check() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/3r4/4K3")
    king = _piece(board, "e1")
    assert _algebraic(legal_destinations(king, board, STRICT)) == {"f1", "d2"}


def test_strict_legality_keeps_kings_apart() -> None:
    board = Board.from_fen("8/8/8/8/8/3k4/8/4K3")
    king = _piece(board, "e1")
    assert _algebraic(legal_destinations(king, board, STRICT)) == {"d1", "f1", "f2"}


def test_pinned_piece() -> None:
    """The bishop on e2 shields its king from the rook on e7"""
    board = Board.from_fen("4k3/4r3/8/8/8/8/4B3/4K3")
    bishop = _piece(board, "e2")
    assert len(legal_destinations(bishop, board)) > 0
    assert legal_destinations(bishop, board, STRICT) == set()


def test_strict_legality_does_not_touch_the_board() -> None:
    board = Board.from_fen("4k3/4r3/8/8/8/8/4B3/4K3")
    before = board.to_fen()
    for piece in board.pieces_of(Side.WHITE):
        legal_destinations(piece, board, STRICT)
    assert board.to_fen() == before
    assert not any(piece.captured for piece in board.pieces)
    assert not _piece(board, "e1").has_moved


# -- CASTLING --
def test_castling_destinations(castling_board: Board) -> None:
    white_king = _piece(castling_board, "e1")
    black_king = _piece(castling_board, "e8")
    assert _algebraic(set(castling_destinations(white_king, castling_board))) == {"g1", "c1"}
    assert _algebraic(set(castling_destinations(black_king, castling_board))) == {"g8", "c8"}
    assert {_sq("g1"), _sq("c1")} <= legal_destinations(white_king, castling_board)


def test_no_castling_through_pieces() -> None:
    board = Board.from_fen("r3k2r/8/8/8/8/8/8/RN2K1NR")
    assert castling_destinations(_piece(board, "e1"), board) == []


def test_no_castling_after_king_moved(castling_board: Board) -> None:
    king = _piece(castling_board, "e1")
    king.has_moved = True
    assert castling_destinations(king, castling_board) == []


def test_no_castling_with_a_moved_rook(castling_board: Board) -> None:
    _piece(castling_board, "h1").has_moved = True
    king = _piece(castling_board, "e1")
    assert _algebraic(set(castling_destinations(king, castling_board))) == {"c1"}


def test_no_castling_out_of_check() -> None:
    board = Board.from_fen("r3k2r/8/8/4r3/8/8/8/R3K2R")
    king = _piece(board, "e1")
    assert is_in_check(Side.WHITE, board)
    assert castling_destinations(king, board) == []


def test_castling_through_attacked_square() -> None:
    """Black rook on f8 watches f1: only refused when castling safely"""
    board = Board.from_fen("r3kr2/8/8/8/8/8/8/R3K2R")
    king = _piece(board, "e1")
    assert _algebraic(set(castling_destinations(king, board))) == {"g1", "c1"}
    assert _algebraic(set(castling_destinations(king, board, SAFE_CASTLING))) == {"c1"}


@pytest.mark.parametrize(
    "king_to, rook_from, rook_to",
    [("g1", "h1", "f1"), ("c1", "a1", "d1")],
)
def test_castling_moves_king_and_rook(
    castling_board: Board, king_to: str, rook_from: str, rook_to: str
) -> None:
    king = _piece(castling_board, "e1")
    rook = _piece(castling_board, rook_from)
    outcome = _play(castling_board, Side.WHITE, "e1", king_to)

    assert outcome.is_castling
    assert outcome.rook_moved is rook
    assert outcome.captured_piece is None
    assert king.square == _sq(king_to)
    assert rook.square == _sq(rook_to)
    assert king.has_moved and rook.has_moved
    assert castling_board.piece(_sq(rook_from)) is None


def test_black_castles_too(castling_board: Board) -> None:
    outcome = _play(castling_board, Side.BLACK, "e8", "c8")
    assert outcome.is_castling
    assert _piece(castling_board, "d8").type == PieceType.ROOK


# -- APPLY MOVE --
def test_basic_move() -> None:
    board = Board.standard()
    pawn = _piece(board, "e2")
    outcome = apply_move(pawn, 4, 4, board, Side.WHITE)
    assert outcome.from_square == Square(6, 4)
    assert outcome.to_square == Square(4, 4)
    assert not outcome.is_capture
    assert not outcome.is_castling
    assert pawn.has_moved
    assert board.piece_at(4, 4) is pawn
    assert board.piece_at(6, 4) is None


@pytest.mark.parametrize("to_row, to_col", [(3, 4), (6, 4), (5, 5), (-1, 4), (4, 9)])
def test_illegal_destination_is_rejected(to_row: int, to_col: int) -> None:
    board = Board.standard()
    before = board.to_fen()
    pawn = _piece(board, "e2")
    with pytest.raises(InvalidMoveError):
        apply_move(pawn, to_row, to_col, board, Side.WHITE)
    assert board.to_fen() == before
    assert not pawn.has_moved


def test_wrong_side_is_rejected() -> None:
    board = Board.standard()
    pawn = _piece(board, "e7")
    with pytest.raises(InvalidMoveError):
        apply_move(pawn, 3, 4, board, Side.WHITE)
    assert pawn.square == _sq("e7")


def test_piece_from_another_board_is_rejected() -> None:
    board = Board.standard()
    stranger = _piece(Board.standard(), "e2")
    with pytest.raises(InvalidMoveError):
        apply_move(stranger, 4, 4, board, Side.WHITE)
    assert board.piece_at(4, 4) is None


def test_captured_piece_cannot_move() -> None:
    board = Board.standard()
    knight = _piece(board, "g1")
    knight.captured = True
    with pytest.raises(InvalidMoveError):
        apply_move(knight, 5, 5, board, Side.WHITE)


def test_capture() -> None:
    board = Board.from_fen("4k3/8/8/3p4/4P3/8/8/4K3")
    black_pawn = _piece(board, "d5")
    outcome = _play(board, Side.WHITE, "e4", "d5")
    assert outcome.captured_piece is black_pawn
    assert black_pawn.captured
    assert board.piece(_sq("d5")).side == Side.WHITE
    assert black_pawn in board.pieces


def test_no_two_live_pieces_share_a_square(fools_mate_board: Board) -> None:
    squares = [piece.square for piece in fools_mate_board.live_pieces()]
    assert len(squares) == len(set(squares))


# -- CHECK DETECTION --
def test_no_check_in_starting_position() -> None:
    board = Board.standard()
    assert not is_in_check(Side.WHITE, board)
    assert not is_in_check(Side.BLACK, board)


@pytest.mark.parametrize(
    "fen, in_check",
    [
        ("4k3/8/8/8/8/8/8/r3K3", True),  # rook along the first rank
        ("4k3/8/8/8/8/8/8/r1N1K3", False),  # ... blocked by a white knight
        ("4k3/8/8/3p4/4K3/8/8/8", True),  # pawn attacks diagonally
        ("4k3/8/8/4p3/4K3/8/8/8", False),  # ... not straight ahead
        ("4k3/8/8/8/8/5n2/8/4K3", True),  # knight
        ("4k3/8/8/8/1b6/8/8/4K3", True),  # bishop along the diagonal
        ("4k3/8/8/8/1b6/8/3P4/4K3", False),  # ... blocked
        ("8/8/8/8/8/8/3k4/4K3", False),  # kings do not give check
    ],
)
def test_is_in_check(fen: str, in_check: bool) -> None:
    board = Board.from_fen(fen)
    assert is_in_check(Side.WHITE, board) == in_check


def test_no_king_means_no_check() -> None:
    board = Board.from_placement("8/8/8/8/8/8/8/r7")
    assert not is_in_check(Side.WHITE, board)


def test_kings_touch() -> None:
    assert kings_touch(Board.from_fen("8/8/8/8/8/8/3k4/4K3"))
    assert not kings_touch(Board.from_fen("8/8/8/8/8/3k4/8/4K3"))


def test_is_square_attacked() -> None:
    board = Board.standard()
    assert is_square_attacked(_sq("f3"), Side.WHITE, board)
    assert not is_square_attacked(_sq("e4"), Side.WHITE, board)
    assert is_square_attacked(_sq("e2"), Side.WHITE, board)  # own pieces defend it


# -- GAME STATUS --
def test_has_any_legal_move_in_starting_position() -> None:
    board = Board.standard()
    assert has_any_legal_move(Side.WHITE, board)
    assert has_any_legal_move(Side.BLACK, board)
    assert evaluate_status(Side.WHITE, board) == Status.PLAYING


def test_fools_mate(fools_mate_board: Board) -> None:
    assert is_in_check(Side.WHITE, fools_mate_board)
    assert not has_any_legal_move(Side.WHITE, fools_mate_board)
    assert evaluate_status(Side.WHITE, fools_mate_board) == Status.CHECKMATE
    # the pawns can still be pushed pseudo-legally: escapes are judged strictly
    assert legal_destinations(_piece(fools_mate_board, "a2"), fools_mate_board)


def test_check_with_a_way_out() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/r3K3")
    assert has_any_legal_move(Side.WHITE, board)
    assert evaluate_status(Side.WHITE, board) == Status.CHECK


def test_stalemate() -> None:
    """Qc7 leaves the black king on a8 without a square to go to, but not in check"""
    board = Board.from_fen("k7/8/1K6/2Q5/8/8/8/8")
    assert evaluate_status(Side.BLACK, board) == Status.PLAYING

    _play(board, Side.WHITE, "c5", "c7")
    assert not is_in_check(Side.BLACK, board)
    assert not has_any_legal_move(Side.BLACK, board)
    assert evaluate_status(Side.BLACK, board) == Status.STALEMATE


def test_back_rank_mate() -> None:
    board = Board.from_fen("6k1/5ppp/8/8/8/8/8/R5K1")
    _play(board, Side.WHITE, "a1", "a8")
    assert evaluate_status(Side.BLACK, board) == Status.CHECKMATE
