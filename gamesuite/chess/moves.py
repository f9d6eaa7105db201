"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the destination sets for each piece type.

Everything in here is pseudo-legal: whether a move leaves your own king in check is decided by the rules module.
"""

from typing import Callable, Optional, Protocol

from gamesuite.chess.pieces import Piece
from gamesuite.chess.square import Square
from gamesuite.core.shared_types import PieceType, Side


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

# (d_row, d_col)
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = [
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]

# White moves UP the board (towards row 0), black moves DOWN
PAWN_DIRECTION: dict[Side, int] = {Side.WHITE: -1, Side.BLACK: 1}
PAWN_START_ROW: dict[Side, int] = {Side.WHITE: 6, Side.BLACK: 1}


# --- MOVEMENT RULES ---
def raycasting_move(piece: Piece, board: Board, directions: list[Vector]) -> list[Square]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the board. An opponent's piece ends the ray but can be captured, your own piece just ends it.
    """
    destinations: list[Square] = []
    for d_row, d_col in directions:
        target_square = piece.square
        while True:
            target_square = target_square.offset(d_row, d_col)
            if not target_square.is_within_bounds():
                break

            occupant = board.piece(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.side != piece.side:
                    destinations.append(target_square)
                break

            destinations.append(target_square)
    return destinations


def single_step_move(piece: Piece, board: Board, deltas: list[Vector]) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    destinations: list[Square] = []
    for d_row, d_col in deltas:
        target_square = piece.square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        occupant = board.piece(target_square)
        if occupant is None or occupant.side != piece.side:
            destinations.append(target_square)

    return destinations


def candidate_pawn_moves(piece: Piece, board: Board) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting row), if both squares are empty
    - takes diagonally

    NOTE: No en passant, no promotion.
    """
    destinations: list[Square] = []
    direction = PAWN_DIRECTION[piece.side]

    one_forward = piece.square.offset(direction, 0)
    if one_forward.is_within_bounds() and board.piece(one_forward) is None:
        destinations.append(one_forward)

        two_forward = piece.square.offset(2 * direction, 0)
        on_start_row = piece.row == PAWN_START_ROW[piece.side]
        if on_start_row and board.piece(two_forward) is None:
            destinations.append(two_forward)

    # pawns take diagonally:
    for d_col in (-1, 1):
        target_square = piece.square.offset(direction, d_col)
        if not target_square.is_within_bounds():
            continue
        occupant = board.piece(target_square)
        if occupant is not None and occupant.side != piece.side:
            destinations.append(target_square)
    return destinations


def candidate_knight_moves(piece: Piece, board: Board) -> list[Square]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    return single_step_move(piece, board, KNIGHT_DELTAS)


def candidate_bishop_moves(piece: Piece, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(piece, board, DIAGONALS)


def candidate_rook_moves(piece: Piece, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(piece, board, STRAIGHTS)


def candidate_queen_moves(piece: Piece, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(piece, board) + candidate_rook_moves(piece, board)


def candidate_king_moves(piece: Piece, board: Board) -> list[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled by the rules module, it needs to know about check).
    """
    return single_step_move(piece, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    piece: Piece, target: Square, board: Board, directions: list[Vector]
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece?"_

    This function determines:
    _"Is the target square in the line-of-sight of the piece, along one of the given directions?"_

    Any occupied square on the way blocks the ray, regardless of its color.
    """
    for d_row, d_col in directions:
        square = piece.square
        while True:
            square = square.offset(d_row, d_col)
            if not square.is_within_bounds():
                break
            if square == target:
                return True
            if board.piece(square) is not None:
                break
    return False


def single_step_attack(
    piece: Piece, target: Square, deltas: list[Vector]
) -> bool:
    """The equivalent for pawns, kings, and knights: they can only attack a single step along a direction."""
    return any(piece.square.offset(d_row, d_col) == target for d_row, d_col in deltas)


def attacks_as_pawn(piece: Piece, target: Square, board: Board) -> bool:
    """Pawns attack diagonally forward only. Their push is no attack."""
    direction = PAWN_DIRECTION[piece.side]
    return single_step_attack(piece, target, [(direction, -1), (direction, 1)])


def attacks_as_knight(piece: Piece, target: Square, board: Board) -> bool:
    return single_step_attack(piece, target, KNIGHT_DELTAS)


def attacks_as_bishop(piece: Piece, target: Square, board: Board) -> bool:
    return raycasting_attack(piece, target, board, DIAGONALS)


def attacks_as_rook(piece: Piece, target: Square, board: Board) -> bool:
    return raycasting_attack(piece, target, board, STRAIGHTS)


def attacks_as_queen(piece: Piece, target: Square, board: Board) -> bool:
    return raycasting_attack(piece, target, board, STRAIGHTS + DIAGONALS)


def attacks_as_king(piece: Piece, target: Square, board: Board) -> bool:
    return single_step_attack(piece, target, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
AttacksFn = Callable[[Piece, Square, Board], bool]
ATTACK_RULES: dict[PieceType, AttacksFn] = {
    PieceType.PAWN: attacks_as_pawn,
    PieceType.KNIGHT: attacks_as_knight,
    PieceType.BISHOP: attacks_as_bishop,
    PieceType.ROOK: attacks_as_rook,
    PieceType.QUEEN: attacks_as_queen,
    PieceType.KING: attacks_as_king,
}


def can_attack(piece: Piece, target: Square, board: Board) -> bool:
    """Could this (live) piece capture whatever stands on the target square?"""
    if piece.captured:
        return False
    return ATTACK_RULES[piece.type](piece, target, board)
