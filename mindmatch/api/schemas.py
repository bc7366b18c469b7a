"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a presentation client and the
engine. All responses include explicit types for OpenAPI schema generation.

Error Codes:
- INVALID_CONFIGURATION: Board cannot be dealt with the requested settings
- INVALID_SELECTION: Card id outside the board
- SESSION_NOT_FOUND: Session does not exist or has ended
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    COMPLETED = "completed"
    ENDED = "ended"


class PhaseName(str, Enum):
    """Board phase values."""
    AWAITING_FIRST = "awaiting_first"
    AWAITING_SECOND = "awaiting_second"
    EVALUATING = "evaluating"
    COMPLETE = "complete"


class OutcomeName(str, Enum):
    """Result of a card selection."""
    IGNORED = "ignored"
    REVEALED = "revealed"
    MATCHED = "matched"
    MISMATCHED = "mismatched"
    COMPLETED = "completed"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INVALID_SELECTION = "INVALID_SELECTION"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display. Face-down symbols are withheld."""
    id: int
    face_up: bool
    matched: bool
    symbol: Optional[str] = Field(
        default=None,
        description="Only present while the card is face up or matched",
    )

    model_config = {"from_attributes": True}


class GameResultInfo(BaseModel):
    """Final tally of a completed game."""
    score: int
    moves: int


# =============================================================================
# Requests
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a session or deal a new game into one."""
    pair_count: Optional[int] = Field(default=None, description="Pairs on the board")
    seed: Optional[int] = Field(default=None, description="Shuffle seed for a reproducible deal")
    symbols: Optional[list[str]] = Field(default=None, description="Custom symbol pool")


class SelectCardRequest(BaseModel):
    """A tap on a card."""
    card_id: int = Field(description="Position of the card on the board")


# =============================================================================
# Responses
# =============================================================================

class GameStateResponse(BaseModel):
    """Full board state for rendering."""
    session_id: str
    status: SessionStatus
    phase: PhaseName
    cards: list[CardInfo] = Field(default_factory=list)
    moves: int = 0
    score: int = 0
    pairs_total: int = 0
    pairs_matched: int = 0
    games_played: int = 1
    result: Optional[GameResultInfo] = None


class SelectionResponse(BaseModel):
    """Response to a card selection."""
    outcome: OutcomeName
    state: GameStateResponse


class SessionListResponse(BaseModel):
    """List of active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    active_sessions: int = 0


class ErrorResponse(BaseModel):
    """Structured error body."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
