"""Orchestration of communication from the UI boundary to the chess sessions (and the reverse direction)."""

import logging
from uuid import UUID, uuid4

from gamesuite.api.models import (
    CreateSessionRequest,
    MoveRecordResponse,
    PieceResponse,
    SelectSquareRequest,
    SessionRequest,
    SessionResponse,
)
from gamesuite.chess.board import Board
from gamesuite.chess.pieces import Piece
from gamesuite.chess.session import ChessSession, MoveRecord
from gamesuite.core.config import RulesConfig
from gamesuite.core.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)


class SessionService:
    """
    Keeps every open chess session apart, in memory.

    Sessions live as long as the service does (nothing gets persisted).
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, ChessSession] = {}

    # -- UI boundary logic ---
    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Open a new session, on the standard layout unless a placement was given."""
        config = RulesConfig(
            strict_legality=request.strict_legality,
            safe_castling=request.safe_castling,
        )
        board = (
            Board.from_fen(request.placement_fen)
            if request.placement_fen
            else Board.standard()
        )
        session = ChessSession(
            config=config, board=board, starting_side=request.starting_side
        )

        session_id = uuid4()
        self._sessions[session_id] = session
        logger.info("Created session %s", session_id)
        return self._create_session_response(session_id, session)

    def select_square(self, request: SelectSquareRequest) -> SessionResponse:
        """A square got clicked. Invalid clicks simply leave the session as it was."""
        session = self.session(request.session_id)
        session.select_square(request.row, request.col)
        return self._create_session_response(request.session_id, session)

    def reset_session(self, request: SessionRequest) -> SessionResponse:
        session = self.session(request.session_id)
        session.reset()
        return self._create_session_response(request.session_id, session)

    def get_session(self, request: SessionRequest) -> SessionResponse:
        """Retrieve current session state."""
        session = self.session(request.session_id)
        return self._create_session_response(request.session_id, session)

    def delete_session(self, request: SessionRequest) -> None:
        """Close a session. Deleting an unknown session is not an error."""
        if self._sessions.pop(request.session_id, None) is not None:
            logger.info("Deleted session %s", request.session_id)

    def session(self, session_id: UUID) -> ChessSession:
        """The live session object (ex. to subscribe to its events). Raises if it does not exist."""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        return session

    # -- Internal helpers --
    def _create_session_response(
        self, session_id: UUID, session: ChessSession
    ) -> SessionResponse:
        state = session.state
        selected = session.selected_piece
        return SessionResponse(
            session_id=session_id,
            current_side=state.current_side,
            status=state.status,
            board_fen=session.board.to_fen(),
            selected_square=selected.square.to_algebraic() if selected else None,
            legal_destinations=sorted(
                square.to_algebraic() for square in state.legal_destinations
            ),
            move_history=[_move_response(record) for record in state.move_history],
            captured_pieces=[_piece_response(piece) for piece in state.captured_pieces],
            check_square=(
                state.check_square.to_algebraic() if state.check_square else None
            ),
        )


def _piece_response(piece: Piece) -> PieceResponse:
    return PieceResponse(
        id=piece.id,
        type=piece.type,
        side=piece.side,
        symbol=piece.symbol,
        square=piece.square.to_algebraic(),
        captured=piece.captured,
    )


def _move_response(record: MoveRecord) -> MoveRecordResponse:
    return MoveRecordResponse(
        piece_id=record.piece.id,
        from_square=record.from_square.to_algebraic(),
        to_square=record.to_square.to_algebraic(),
        notation=record.notation,
        is_capture=record.is_capture,
        is_check=record.is_check,
        is_checkmate=record.is_checkmate,
    )
