"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the presentation layer
and the engine. The opponent's hand is only ever exposed as face-down
card backs: the engine knows its cards, the client never does.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- VALIDATION_ERROR: Request body could not be parsed
- INTERNAL_ERROR: Unexpected failure
Rule violations are not errors: they come back as accepted=false.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SuitName(str, Enum):
    """Card suits."""
    HEARTS = "HEARTS"
    DIAMONDS = "DIAMONDS"
    CLUBS = "CLUBS"
    SPADES = "SPADES"


class GameStatusName(str, Enum):
    """Engine status values."""
    START = "START"
    PLAYING = "PLAYING"
    SELECTING_SUIT = "SELECTING_SUIT"
    GAME_OVER = "GAME_OVER"


class SideName(str, Enum):
    """Seats at the table."""
    PLAYER = "PLAYER"
    AI = "AI"


class SessionStatus(str, Enum):
    """Session status values, from the human's point of view."""
    CREATED = "created"
    YOUR_TURN = "your_turn"
    CHOOSE_SUIT = "choose_suit"
    AI_THINKING = "ai_thinking"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """
    A card as the client may see it.

    Face-down cards carry no identity at all.
    """
    face_up: bool = True
    card_id: Optional[str] = None
    suit: Optional[SuitName] = None
    rank: Optional[str] = None
    label: Optional[str] = Field(None, description="Short display label, e.g. 10♠")

    model_config = {"from_attributes": True}


class GameStateResponse(BaseModel):
    """Read-only snapshot of the table after a transition."""
    session_id: str
    generation: int = Field(0, description="Increments on every accepted transition")
    status: GameStatusName
    session_status: SessionStatus
    turn: SideName
    winner: Optional[SideName] = None
    message: str = ""

    deck_size: int = 0
    player_hand: list[CardInfo] = Field(default_factory=list)
    opponent_hand: list[CardInfo] = Field(
        default_factory=list, description="Card backs only"
    )
    opponent_card_count: int = 0
    discard_top: Optional[CardInfo] = None
    discard_size: int = 0

    active_suit: Optional[SuitName] = None
    active_rank: Optional[str] = None

    playable_card_ids: list[str] = Field(default_factory=list)
    can_draw: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to open a session and deal a game."""
    human_player_name: str = Field("Player", min_length=1, max_length=50)
    random_seed: Optional[int] = Field(
        None, description="Seed for a reproducible deal. Ignored unless EIGHTS_ENV=development"
    )


class PlayCardRequest(BaseModel):
    """Play a card from the human's hand."""
    card_id: str = Field(..., description="Card id, e.g. HEARTS-7")


class SelectSuitRequest(BaseModel):
    """Declare a suit after playing an eight."""
    suit: SuitName


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    """Session status."""
    session_id: str
    status: SessionStatus
    human_player_name: str
    created_at: float
    generation: int = 0
    game_state: Optional[GameStateResponse] = None


class ActionResponse(BaseModel):
    """
    Outcome of an intent.

    accepted=false means the intent was illegal and nothing changed.
    """
    session_id: str
    accepted: bool
    loop_state: str
    message: str = ""
    error: Optional[str] = None
    error_code: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    ai_actions: list[str] = Field(default_factory=list)
    game_state: GameStateResponse


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class SessionListResponse(BaseModel):
    """Active sessions."""
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    """Session end acknowledgement."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check."""
    status: str = "healthy"
    service: str = "eights-engine"
    version: str
