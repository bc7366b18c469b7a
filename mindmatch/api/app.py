"""
FastAPI Application - REST API for presentation clients.

Endpoints:
    GET    /api/v1/health                     Health check
    POST   /api/v1/sessions                   Start a session (deals a game)
    GET    /api/v1/sessions                   List active sessions
    GET    /api/v1/sessions/{id}              Get board state
    POST   /api/v1/sessions/{id}/select       Select a card
    POST   /api/v1/sessions/{id}/restart      Deal a new game
    DELETE /api/v1/sessions/{id}              End session

Mismatch resets run on the server's event loop. A client that selects the
second card of a mismatched pair sees phase "evaluating"; polling the state
after the delay shows both cards face down again.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging

from .. import __version__
from ..config import Config, load_config
from ..utils.logger import setup_logging


logger = logging.getLogger(__name__)


def create_app(service=None, config: Optional[Config] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        config: Optional Config (loaded from file/environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install 'mindmatch[api]'"
        )

    from .service import APIService
    from .schemas import (
        CreateGameRequest,
        SelectCardRequest,
        GameStateResponse,
        SelectionResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        ErrorResponse,
        ErrorCode,
    )
    from ..session import SessionManager, AsyncioScheduler

    config = config or load_config()
    setup_logging(config.logging.level)

    app = FastAPI(
        title="MindMatch API",
        description="Card-matching memory game engine.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(
            scheduler=AsyncioScheduler(),
            match_reward=config.game.match_reward,
            mismatch_delay_ms=config.game.mismatch_delay_ms,
        )
    )
    default_pair_count = config.game.pair_count
    session_idle_seconds = config.server.session_idle_seconds

    # Idle sessions are swept before every request
    @app.middleware("http")
    async def expire_idle_sessions(request: Request, call_next):
        api_service.cleanup_idle_sessions(session_idle_seconds)
        return await call_next(request)

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_for_code = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_for_code.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def with_default_pairs(request: Optional[CreateGameRequest]) -> CreateGameRequest:
        request = request or CreateGameRequest()
        if request.pair_count is None:
            request = request.model_copy(update={"pair_count": default_pair_count})
        return request

    # =========================================================================
    # Health
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return HealthResponse(
            version=__version__,
            active_sessions=len(api_service.list_sessions()),
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Invalid board configuration"}},
        tags=["Sessions"],
        summary="Start a new session",
    )
    async def create_session(
        request: Optional[CreateGameRequest] = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Start a session and deal its first game."""
        response = api_service.create_session(with_default_pairs(request))
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get board state",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_state(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query(default="user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/select",
        response_model=SelectionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Card id outside the board"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Select a card",
    )
    async def select_card(
        session_id: str,
        request: SelectCardRequest,
    ) -> Union[SelectionResponse, JSONResponse]:
        """
        Select a card.

        Taps on matched or already revealed cards, and taps while a
        mismatched pair is showing, return outcome `ignored`.
        """
        response = api_service.select_card(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=GameStateResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
        },
        tags=["Game"],
        summary="Deal a new game",
    )
    async def restart_session(
        session_id: str,
        request: Optional[CreateGameRequest] = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.restart_session(session_id, with_default_pairs(request))
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    return app


# For running directly: uvicorn mindmatch.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
