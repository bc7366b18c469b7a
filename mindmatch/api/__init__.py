"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Starts a session (a game is dealt)
2. Forwards taps as card selections
3. Renders the returned board state
4. Restarts or ends the session

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    SelectCardRequest,
    # Responses
    GameStateResponse,
    SelectionResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
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
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "SelectCardRequest",
    # Responses
    "GameStateResponse",
    "SelectionResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "GameResultInfo",
    # Enums
    "SessionStatus",
    "PhaseName",
    "OutcomeName",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
