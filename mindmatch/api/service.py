"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Formats responses for the client
4. Maps engine errors to structured error responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateGameRequest,
    SelectCardRequest,
    # Responses
    GameStateResponse,
    SelectionResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    GameResultInfo,
    # Enums
    SessionStatus,
    PhaseName,
    OutcomeName,
    ErrorCode,
)
from ..engine_core.errors import (
    GameError,
    InvalidConfiguration,
    InsufficientSymbols,
    InvalidSelection,
)
from ..session import SessionManager, Session


logger = logging.getLogger(__name__)


def _error_from(exc: GameError) -> ErrorResponse:
    if isinstance(exc, InsufficientSymbols):
        return ErrorResponse(
            error=str(exc),
            error_code=ErrorCode.INVALID_CONFIGURATION,
            details={"pair_count": exc.pair_count, "available": exc.available},
        )
    if isinstance(exc, InvalidConfiguration):
        code = ErrorCode.INVALID_CONFIGURATION
    elif isinstance(exc, InvalidSelection):
        code = ErrorCode.INVALID_SELECTION
    else:
        code = ErrorCode.INTERNAL_ERROR
    return ErrorResponse(error=str(exc), error_code=code)


def _not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Session {session_id} not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


@dataclass
class APIService:
    """
    Main API service for presentation clients.

    Usage:
        service = APIService()

        state = service.create_session(CreateGameRequest(pair_count=8))
        response = service.select_card(state.session_id, SelectCardRequest(card_id=3))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateGameRequest) -> GameStateResponse | ErrorResponse:
        """Create a new session with a freshly dealt game."""
        try:
            session = self.session_manager.create_session(
                pair_count=request.pair_count,
                seed=request.seed,
                symbols=request.symbols,
            )
        except GameError as e:
            logger.info("Rejected session configuration: %s", e)
            return _error_from(e)
        return self._state_response(session)

    def get_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """Current board of a session."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _not_found(session_id)
        session.touch()
        return self._state_response(session)

    def select_card(
        self,
        session_id: str,
        request: SelectCardRequest,
    ) -> SelectionResponse | ErrorResponse:
        """Forward a tap to the session's game."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _not_found(session_id)

        try:
            outcome = session.game.select_card(request.card_id)
        except GameError as e:
            return _error_from(e)
        session.touch()

        return SelectionResponse(
            outcome=OutcomeName(outcome.value),
            state=self._state_response(session),
        )

    def restart_session(
        self,
        session_id: str,
        request: CreateGameRequest,
    ) -> GameStateResponse | ErrorResponse:
        """Deal a new game into an existing session."""
        if not self.session_manager.get_session(session_id):
            return _not_found(session_id)
        try:
            session = self.session_manager.restart_session(
                session_id,
                pair_count=request.pair_count,
                seed=request.seed,
                symbols=request.symbols,
            )
        except GameError as e:
            return _error_from(e)
        return self._state_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        return self.session_manager.list_active_sessions()

    def cleanup_idle_sessions(self, max_idle_seconds: int) -> int:
        """End sessions no client has touched for max_idle_seconds."""
        removed = self.session_manager.cleanup_stale_sessions(max_idle_seconds)
        if removed:
            logger.info("Removed %d idle session(s)", removed)
        return removed

    def _state_response(self, session: Session) -> GameStateResponse:
        """Convert session to response."""
        snapshot = session.game.get_state()
        result = session.game.result
        return GameStateResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            phase=PhaseName(snapshot.phase.value),
            cards=[
                CardInfo(
                    id=card.id,
                    face_up=card.face_up,
                    matched=card.matched,
                    symbol=card.visible_symbol,
                )
                for card in snapshot.cards
            ],
            moves=snapshot.moves,
            score=snapshot.score,
            pairs_total=snapshot.pairs_total,
            pairs_matched=snapshot.pairs_matched,
            games_played=session.games_played,
            result=GameResultInfo(score=result.score, moves=result.moves) if result else None,
        )
