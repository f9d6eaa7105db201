"""
The rule engine: which squares a piece may go to, what happens when it goes there, and what that means for the game.

Legality comes in two flavours (see `RulesConfig`):

* pseudo-legal (default): every destination the movement rules allow. You can walk into check, or leave your king in check.
* strict: every candidate is played out on a scratch copy of the board first, and dropped if it exposes the mover's king.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from gamesuite.chess.board import Board
from gamesuite.chess.castling import (
    CASTLING_RULES,
    castling_direction,
    is_castling_move,
)
from gamesuite.chess.moves import KING_DELTAS, MOVEMENT_RULES, can_attack
from gamesuite.chess.pieces import Piece
from gamesuite.chess.square import Square
from gamesuite.core.config import DEFAULT_RULES, RulesConfig
from gamesuite.core.exceptions import InvalidMoveError
from gamesuite.core.shared_types import PieceType, Side, Status

logger = logging.getLogger(__name__)


@dataclass
class MoveOutcome:
    """What `apply_move` did to the board, for the caller to report upwards."""

    piece: Piece
    from_square: Square
    to_square: Square
    captured_piece: Optional[Piece] = None
    rook_moved: Optional[Piece] = None

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_castling(self) -> bool:
        return self.rook_moved is not None


# --- CHECK DETECTION ---
def is_square_attacked(
    square: Square, by_side: Side, board: Board, include_king: bool = True
) -> bool:
    """Can any live piece of `by_side` reach the square under its attack pattern?"""
    return any(
        can_attack(piece, square, board)
        for piece in board.pieces_of(by_side)
        if include_king or piece.type != PieceType.KING
    )


def is_in_check(side: Side, board: Board) -> bool:
    """
    Is the king of `side` attacked?
    ---

    Kings never give check themselves, so the opponent's king is left out.
    A board without a king for `side` is never in check.
    """
    king = board.locate_king(side)
    if king is None:
        return False
    return is_square_attacked(king.square, side.opponent, board, include_king=False)


def kings_touch(board: Board) -> bool:
    """Two kings on adjacent squares. Only reachable by pseudo-legal play."""
    white_king = board.locate_king(Side.WHITE)
    black_king = board.locate_king(Side.BLACK)
    if white_king is None or black_king is None:
        return False
    return any(
        white_king.square.offset(d_row, d_col) == black_king.square
        for d_row, d_col in KING_DELTAS
    )


# --- DESTINATIONS ---
def castling_destinations(
    king: Piece, board: Board, config: RulesConfig = DEFAULT_RULES
) -> list[Square]:
    """
    Find the castling squares for a king
    ---

    **you are allowed to castle if**

    * Your king has not moved yet, and you are not currently in check (you cannot castle out of a check).
    * The rook you castle with stands on column 0 or 7 of the king's row and has not moved yet.
    * Every square in between the two pieces is empty.
    * (only with `safe_castling`) None of the squares the king passes over or lands on is under attack.
    """
    if king.has_moved or is_in_check(king.side, board):
        return []

    destinations: list[Square] = []
    for columns in CASTLING_RULES.values():
        rook = board.piece_at(king.row, columns.rook_from)
        if (
            rook is None
            or rook.type != PieceType.ROOK
            or rook.side != king.side
            or rook.has_moved
        ):
            continue

        if board.is_any_occupied(columns.squares_between(king.row, king.col)):
            continue

        king_to = king.square.offset(0, columns.king_step)
        if config.safe_castling and _is_path_attacked(king, king_to, board):
            continue

        destinations.append(king_to)
    return destinations


def _is_path_attacked(king: Piece, king_to: Square, board: Board) -> bool:
    """Squares the king passes over and lands on"""
    step = 1 if king_to.col > king.col else -1
    path = [
        Square(king.row, col) for col in range(king.col + step, king_to.col + step, step)
    ]
    return any(is_square_attacked(square, king.side.opponent, board) for square in path)


def legal_destinations(
    piece: Piece, board: Board, config: RulesConfig = DEFAULT_RULES
) -> set[Square]:
    """
    The set of squares `piece` may move to
    ----

    1. candidate squares from the movement rules of its piece type
    2. castling squares (kings only)
    3. the opponent's king is never a capture target
    4. (only with `strict_legality`) drop squares that put / leave your own king in check
    """
    if piece.captured:
        return set()

    candidates = MOVEMENT_RULES[piece.type](piece, board)
    if piece.type == PieceType.KING:
        candidates.extend(castling_destinations(piece, board, config))

    destinations = {
        square for square in candidates if not _is_opponent_king(piece, square, board)
    }

    if config.strict_legality:
        destinations = {
            square
            for square in destinations
            if not _is_putting_yourself_in_check(piece, square, board)
        }
    return destinations


def _is_opponent_king(piece: Piece, square: Square, board: Board) -> bool:
    occupant = board.piece(square)
    return (
        occupant is not None
        and occupant.side != piece.side
        and occupant.type == PieceType.KING
    )


def _is_putting_yourself_in_check(piece: Piece, square: Square, board: Board) -> bool:
    """Return True if the move exposes your king

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check (or next to the other king) on the new board
    """
    scratch = board.copy()
    scratch_piece = scratch.find_piece(piece.id)
    # for the typechecker: the copy holds the same pieces
    assert scratch_piece is not None
    _execute(scratch_piece, square, scratch)
    return is_in_check(piece.side, scratch) or kings_touch(scratch)


def has_any_legal_move(
    side: Side, board: Board, config: RulesConfig = DEFAULT_RULES
) -> bool:
    """
    True as soon as one live piece of `side` has somewhere to go.

    Only moves that get (or keep) the king out of check count here, whatever `strict_legality` says:
    otherwise a mated side could always 'escape' by pushing a pawn, and checkmate / stalemate would never happen.
    """
    strict = config.model_copy(update={"strict_legality": True})
    return any(
        legal_destinations(piece, board, strict) for piece in board.pieces_of(side)
    )


def evaluate_status(
    side: Side, board: Board, config: RulesConfig = DEFAULT_RULES
) -> Status:
    """Status of the game from the point of view of the side about to move."""
    in_check = is_in_check(side, board)
    can_move = has_any_legal_move(side, board, config)
    if in_check:
        return Status.CHECK if can_move else Status.CHECKMATE
    return Status.PLAYING if can_move else Status.STALEMATE


# --- MOVE APPLICATION ---
def apply_move(
    piece: Piece,
    to_row: int,
    to_col: int,
    board: Board,
    side_to_move: Side,
    config: RulesConfig = DEFAULT_RULES,
) -> MoveOutcome:
    """
    Attempt to make a move
    -----

    All checks happen before the board is touched: either the whole move is applied, or nothing is.

    Raises:
        InvalidMoveError: the piece is not (or no longer) on this board, does not belong to the side to move,
            or cannot reach (to_row, to_col).
    """
    if board.find_piece(piece.id) is not piece or piece.captured:
        raise InvalidMoveError(f"Piece {piece.id!r} is not in play on this board.")

    if piece.side != side_to_move:
        raise InvalidMoveError(
            f"It is {side_to_move}'s turn, cannot move {piece.side} piece {piece.id!r}."
        )

    target = Square(to_row, to_col)
    if target not in legal_destinations(piece, board, config):
        raise InvalidMoveError(
            f"{piece.type} {piece.id!r} cannot move from {piece.square.to_algebraic()} to {target.to_algebraic()}"
            if target.is_within_bounds()
            else f"Square {(to_row, to_col)} is not on the board."
        )

    outcome = _execute(piece, target, board)
    logger.debug(
        "%s %s %s -> %s%s",
        piece.side,
        piece.type,
        outcome.from_square.to_algebraic(),
        target.to_algebraic(),
        f" takes {outcome.captured_piece.id}" if outcome.captured_piece else "",
    )
    return outcome


def _execute(piece: Piece, target: Square, board: Board) -> MoveOutcome:
    """
    Update the board, no questions asked
    ---

    1. mark whatever opposing piece stands on the target as captured
    2. move the piece, it now has moved
    3. castling (king moving two columns)? then the rook jumps over the king as well
    """
    outcome = MoveOutcome(piece=piece, from_square=piece.square, to_square=target)

    occupant = board.piece(target)
    if occupant is not None and occupant.side != piece.side:
        occupant.captured = True
        outcome.captured_piece = occupant

    from_col = piece.col
    piece.place_on(target)
    piece.has_moved = True

    if piece.type == PieceType.KING and is_castling_move(from_col, target.col):
        columns = CASTLING_RULES[castling_direction(from_col, target.col)]
        rook = board.piece_at(target.row, columns.rook_from)
        if rook is not None and rook.type == PieceType.ROOK and rook.side == piece.side:
            rook.place_on(Square(target.row, columns.rook_to))
            rook.has_moved = True
            outcome.rook_moved = rook

    return outcome
