"""
The ChessSession is the entrypoint into the domain layer for the UI layer (and the service layer).
It is responsible for orchestrating everything that happens when a square gets clicked:
selection, asking the rule engine for destinations, applying the move, keeping the history and
telling the outside world about it through callbacks.

A session owns its pieces and its state, nothing is shared between sessions.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional, Self

from gamesuite.chess.board import Board
from gamesuite.chess.notation import format_move
from gamesuite.chess.pieces import Piece
from gamesuite.chess.rules import MoveOutcome, apply_move, evaluate_status, legal_destinations
from gamesuite.chess.square import Square
from gamesuite.core.config import DEFAULT_RULES, RulesConfig
from gamesuite.core.exceptions import (
    GameError,
    GameStateError,
    InvalidMoveError,
    NoPieceSelectedError,
)
from gamesuite.core.shared_types import TERMINAL_STATUSES, PieceType, Side, Status

logger = logging.getLogger(__name__)

# -- Event definitions --
CaptureCallback = Callable[[Piece], None]
TurnChangeCallback = Callable[[Side], None]
StatusChangeCallback = Callable[[Status], None]
# piece, from_col, from_row, to_col, to_row, is_capture
MoveRecordCallback = Callable[[Piece, int, int, int, int, bool], None]


@dataclass
class SessionEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_capture: list[CaptureCallback] = field(default_factory=list)
    on_turn_change: list[TurnChangeCallback] = field(default_factory=list)
    on_status_change: list[StatusChangeCallback] = field(default_factory=list)
    on_move_record: list[MoveRecordCallback] = field(default_factory=list)


@dataclass
class MoveRecord:
    """A played move, as it goes into the history. Has no say in the legality of later moves."""

    piece: Piece
    from_square: Square
    to_square: Square
    is_capture: bool
    notation: str
    captured_piece: Optional[Piece] = None
    is_castling: bool = False
    is_check: bool = False
    is_checkmate: bool = False


@dataclass
class SessionState:
    current_side: Side = Side.WHITE
    status: Status = Status.PLAYING
    selected_piece_id: Optional[str] = None
    legal_destinations: set[Square] = field(default_factory=set)
    king_positions: dict[Side, Square] = field(default_factory=dict)
    move_history: list[MoveRecord] = field(default_factory=list)
    last_move: Optional[tuple[Square, Square]] = None
    check_square: Optional[Square] = None
    captured_pieces: list[Piece] = field(default_factory=list)

    def clear_selection(self) -> None:
        self.selected_piece_id = None
        self.legal_destinations = set()


class ChessSession:
    """
    One game of chess, from the first click until checkmate / stalemate (or a reset).

    Every invalid interaction is a no-op: selecting the opponent's piece, clicking a square the selected piece
    cannot reach, or clicking anything once the game has ended. Nothing is raised to the UI.
    """

    def __init__(
        self,
        config: RulesConfig = DEFAULT_RULES,
        board: Optional[Board] = None,
        starting_side: Side = Side.WHITE,
    ) -> None:
        self.config = config
        self.events = SessionEvents()
        self._move_in_progress = False
        self._setup(board or Board.standard(), starting_side)

    @classmethod
    def from_fen(
        cls,
        placement: str,
        starting_side: Side = Side.WHITE,
        config: RulesConfig = DEFAULT_RULES,
    ) -> Self:
        """Start from a custom position, given as the placement part of a FEN string."""
        return cls(config=config, board=Board.from_fen(placement), starting_side=starting_side)

    # -- Properties --
    @property
    def board(self) -> Board:
        return self._board

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_side(self) -> Side:
        return self._state.current_side

    @property
    def status(self) -> Status:
        return self._state.status

    @property
    def is_game_over(self) -> bool:
        return self._state.status in TERMINAL_STATUSES

    @property
    def selected_piece(self) -> Optional[Piece]:
        if self._state.selected_piece_id is None:
            return None
        return self._board.find_piece(self._state.selected_piece_id)

    # -- UI LAYER API --
    def select_square(self, row: int, col: int) -> None:
        """
        A square got clicked
        ----

        1. own piece on it? --> (re)select it and cache its destinations for highlighting
        2. a piece is selected and the square is one of its destinations? --> play the move
        3. anything else --> clear the selection

        Clicks that arrive while a move is still being processed are dropped.
        """
        with self._processing() as acquired:
            if not acquired:
                logger.debug("Ignoring click on (%d, %d): move in progress", row, col)
                return

            if self.is_game_over:
                logger.debug("Ignoring click on (%d, %d): game is over", row, col)
                return

            piece = self._board.piece_at(row, col)
            if piece is not None and piece.side == self._state.current_side:
                self._select(piece)
                return

            try:
                self._move_selected_to(Square(row, col))
            except NoPieceSelectedError:
                # treated as a fresh selection attempt: there is nothing of ours on that square
                logger.debug("Nothing to select on (%d, %d)", row, col)
            except InvalidMoveError as err:
                logger.debug("Clearing selection: %s", err)
                self._state.clear_selection()

    def move(self, from_row: int, from_col: int, to_row: int, to_col: int) -> bool:
        """Both clicks in one go. Returns True if the move got played."""
        with self._processing() as acquired:
            if not acquired:
                return False
            try:
                self._assert_in_progress()
                piece = self._board.piece_at(from_row, from_col)
                if piece is None:
                    raise NoPieceSelectedError(f"No piece on {(from_row, from_col)}")
                self._play(piece, Square(to_row, to_col))
            except GameError as err:
                logger.debug("Move rejected: %s", err)
                return False
            return True

    def reset(self) -> None:
        """Discard everything and start over from the standard layout."""
        with self._processing() as acquired:
            if not acquired:
                logger.debug("Ignoring reset: move in progress")
                return
            self._setup(Board.standard(), Side.WHITE)
            logger.info("Session reset")
            self._emit_turn_change(self._state.current_side)
            self._emit_status_change(self._state.status)

    # -- QUERIES --
    def legal_destinations_for(self, row: int, col: int) -> set[Square]:
        """Destinations of whatever piece stands on (row, col). Does not change the selection."""
        piece = self._board.piece_at(row, col)
        if piece is None:
            return set()
        return legal_destinations(piece, self._board, self.config)

    def captured_by(self, side: Side) -> list[Piece]:
        """The opponent's pieces `side` has taken, in the order they were taken"""
        return [piece for piece in self._state.captured_pieces if piece.side != side]

    def material_balance(self) -> dict[Side, int]:
        return self._board.count_material()

    def history_notation(self) -> list[str]:
        return [record.notation for record in self._state.move_history]

    # -- PRIVATE HELPERS --
    def _setup(self, board: Board, starting_side: Side) -> None:
        self._board = board
        self._state = SessionState(current_side=starting_side)
        for side in Side:
            king = board.locate_king(side)
            if king is not None:
                self._state.king_positions[side] = king.square
        self._update_status()

    @contextmanager
    def _processing(self) -> Iterator[bool]:
        """Single-move-in-flight discipline: yields False when someone else is already busy."""
        if self._move_in_progress:
            yield False
            return
        self._move_in_progress = True
        try:
            yield True
        finally:
            self._move_in_progress = False

    def _assert_in_progress(self) -> None:
        if self.is_game_over:
            raise GameStateError(f"Game is over. status: {self._state.status}")

    def _select(self, piece: Piece) -> None:
        self._state.selected_piece_id = piece.id
        self._state.legal_destinations = legal_destinations(piece, self._board, self.config)
        logger.debug(
            "Selected %s on %s, %d destination(s)",
            piece.id,
            piece.square.to_algebraic(),
            len(self._state.legal_destinations),
        )

    def _move_selected_to(self, target: Square) -> None:
        piece = self.selected_piece
        if piece is None:
            raise NoPieceSelectedError(f"Clicked {target} without a selection")
        if target not in self._state.legal_destinations:
            raise InvalidMoveError(
                f"{piece.id} cannot move to {target.to_algebraic() if target.is_within_bounds() else target}"
            )
        self._play(piece, target)

    def _play(self, piece: Piece, target: Square) -> None:
        """
        Apply a move and report it
        -----

        1. let the rule engine update the board (raises before touching anything if the move is not allowed)
        2. update the history / caches, clear the selection
        3. switch sides and recompute the status for the side about to move
        4. notify: capture, move record, turn change, status change
        """
        outcome = apply_move(
            piece,
            target.row,
            target.col,
            self._board,
            self._state.current_side,
            self.config,
        )

        self._state.clear_selection()
        self._state.last_move = (outcome.from_square, outcome.to_square)
        if outcome.captured_piece is not None:
            self._state.captured_pieces.append(outcome.captured_piece)
        if piece.type == PieceType.KING:
            self._state.king_positions[piece.side] = outcome.to_square

        self._state.current_side = self._state.current_side.opponent
        self._update_status()

        record = self._record(outcome)
        logger.info("%s played %s", piece.side, record.notation)
        if self.is_game_over:
            logger.info("Game over: %s (%s to move)", self._state.status, self._state.current_side)

        if outcome.captured_piece is not None:
            self._emit_capture(outcome.captured_piece)
        self._emit_move_record(record)
        self._emit_turn_change(self._state.current_side)
        self._emit_status_change(self._state.status)

    def _record(self, outcome: MoveOutcome) -> MoveRecord:
        record = MoveRecord(
            piece=outcome.piece,
            from_square=outcome.from_square,
            to_square=outcome.to_square,
            is_capture=outcome.is_capture,
            notation=format_move(
                outcome.piece.type,
                outcome.from_square,
                outcome.to_square,
                outcome.is_capture,
            ),
            captured_piece=outcome.captured_piece,
            is_castling=outcome.is_castling,
            is_check=self._state.status in (Status.CHECK, Status.CHECKMATE),
            is_checkmate=self._state.status == Status.CHECKMATE,
        )
        self._state.move_history.append(record)
        return record

    def _update_status(self) -> None:
        """Status is a pure function of (board, side to move). The check square follows from it."""
        side = self._state.current_side
        self._state.status = evaluate_status(side, self._board, self.config)
        in_check = self._state.status in (Status.CHECK, Status.CHECKMATE)
        self._state.check_square = self._state.king_positions.get(side) if in_check else None

    # -- EVENTS --
    def _emit_capture(self, piece: Piece) -> None:
        for cb in self.events.on_capture:
            cb(piece)

    def _emit_move_record(self, record: MoveRecord) -> None:
        for cb in self.events.on_move_record:
            cb(
                record.piece,
                record.from_square.col,
                record.from_square.row,
                record.to_square.col,
                record.to_square.row,
                record.is_capture,
            )

    def _emit_turn_change(self, side: Side) -> None:
        for cb in self.events.on_turn_change:
            cb(side)

    def _emit_status_change(self, status: Status) -> None:
        for cb in self.events.on_status_change:
            cb(status)
